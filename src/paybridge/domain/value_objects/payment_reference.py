from __future__ import annotations

import re
from dataclasses import dataclass
from uuid import uuid4

from paybridge.domain.exceptions import InvalidPaymentReferenceError

PREFIX = "PB_"
REFERENCE_PATTERN = re.compile(r"^PB_[a-f0-9]{32}$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PaymentReference:
    """Internal payment reference, sent to providers as their transaction reference.

    Format: ``PB_`` followed by 32 hex characters (a UUID4 without hyphens).
    Generated once per Payment; never reused.
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None or not self.value.strip():
            raise InvalidPaymentReferenceError(
                "Payment reference cannot be empty", "EMPTY_REFERENCE"
            )

        if not self.value.upper().startswith(PREFIX):
            raise InvalidPaymentReferenceError(
                f"Payment reference must start with '{PREFIX}'", "INVALID_PREFIX"
            )

        if not REFERENCE_PATTERN.match(self.value):
            raise InvalidPaymentReferenceError(
                "Payment reference format is invalid", "INVALID_FORMAT"
            )

    @classmethod
    def generate(cls) -> PaymentReference:
        """Generate a new unique PaymentReference."""
        return cls(value=f"{PREFIX}{uuid4().hex}")

    @classmethod
    def create(cls, value: str) -> PaymentReference:
        """Parse an externally supplied reference (e.g. from a webhook).

        Raises:
            InvalidPaymentReferenceError: If the value is not a PB_ reference.
        """
        return cls(value=value)

    def __str__(self) -> str:
        return self.value

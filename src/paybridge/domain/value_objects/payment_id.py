from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from paybridge.domain.exceptions import InvalidPaymentIdError


@dataclass(frozen=True, slots=True)
class PaymentId:
    """Opaque internal identifier of a Payment record.

    Distinct from PaymentReference: the id is the storage identity and is
    echoed to providers only as checkout metadata (``internal_id``).
    """

    value: UUID

    @classmethod
    def generate(cls) -> PaymentId:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, id_str: str) -> PaymentId:
        """Parse a PaymentId from its string form.

        Raises:
            InvalidPaymentIdError: If the string is not a valid UUID.
        """
        try:
            return cls(value=UUID(id_str))
        except (ValueError, AttributeError, TypeError) as e:
            raise InvalidPaymentIdError(f"Invalid payment ID: {id_str}") from e

    def __str__(self) -> str:
        return str(self.value)

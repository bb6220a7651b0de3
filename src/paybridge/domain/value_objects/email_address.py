from __future__ import annotations

import re
from dataclasses import dataclass

from paybridge.domain.exceptions import InvalidEmailError

MAX_LENGTH = 254
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """Payer email address.

    Normalization: surrounding whitespace is trimmed and the value is
    lower-cased before any check runs.
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None or not self.value.strip():
            raise InvalidEmailError("Email address cannot be empty", "EMPTY_EMAIL")

        normalized = self.value.strip().lower()
        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if not EMAIL_PATTERN.match(normalized):
            raise InvalidEmailError("Email address format is invalid", "INVALID_EMAIL_FORMAT")

        if len(normalized) > MAX_LENGTH:
            raise InvalidEmailError("Email address is too long", "EMAIL_TOO_LONG")

    @classmethod
    def create(cls, value: str) -> EmailAddress:
        return cls(value=value)

    def __str__(self) -> str:
        return self.value

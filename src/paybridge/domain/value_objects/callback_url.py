from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from paybridge.domain.exceptions import InvalidUrlError

MAX_LENGTH = 500
ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class CallbackUrl:
    """Absolute http(s) URL supplied by a client application.

    Used both for the post-checkout browser redirect and for the
    server-to-server payment notification.
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None or not self.value.strip():
            raise InvalidUrlError("URL cannot be empty", "EMPTY_URL")

        normalized = self.value.strip()
        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if len(normalized) > MAX_LENGTH:
            raise InvalidUrlError(
                f"URL cannot exceed {MAX_LENGTH} characters", "URL_TOO_LONG"
            )

        try:
            parts = urlsplit(normalized)
        except ValueError as e:
            raise InvalidUrlError("URL format is invalid", "INVALID_URL_FORMAT") from e

        if not parts.scheme or not parts.netloc:
            raise InvalidUrlError("URL format is invalid", "INVALID_URL_FORMAT")

        if parts.scheme.lower() not in ALLOWED_SCHEMES:
            raise InvalidUrlError("URL must use HTTP or HTTPS scheme", "INVALID_URL_SCHEME")

        if not parts.hostname:
            raise InvalidUrlError("URL format is invalid", "INVALID_URL_FORMAT")

    @classmethod
    def create(cls, value: str) -> CallbackUrl:
        return cls(value=value)

    def __str__(self) -> str:
        return self.value

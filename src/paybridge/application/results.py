"""Explicit success/failure results returned across the application boundary.

Gateways and use cases report expected failures (provider rejected the
request, signature mismatch, unsupported webhook event, database down) as
values instead of exceptions, so that callers can map them to responses
without catching anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCode(StrEnum):
    """Stable machine-readable codes for infrastructure and orchestration failures.

    Domain validation failures reuse the error_code of the DomainException
    that produced them (e.g. AMOUNT_NOT_POSITIVE, INVALID_EMAIL_FORMAT).
    """

    # Infrastructure
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_KEY = "DUPLICATE_KEY"

    # Orchestration
    UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"

    # Provider responses
    MISSING_AUTH_URL = "MISSING_AUTH_URL"
    PROVIDER_AUTH_ERROR = "PROVIDER_AUTH_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Webhooks
    MISSING_SIGNATURE = "MISSING_SIGNATURE"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    SIGNATURE_VERIFICATION_ERROR = "SIGNATURE_VERIFICATION_ERROR"
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    UNSUPPORTED_EVENT = "UNSUPPORTED_EVENT"
    EMPTY_REFERENCE = "EMPTY_REFERENCE"
    INVALID_AMOUNT = "INVALID_AMOUNT"


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Outcome of a fallible operation: either a value or (error, error_code)."""

    is_success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(is_success=True, value=value)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> Result[T]:
        return cls(is_success=False, error=error, error_code=error_code)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def to_dict(self) -> dict[str, Any]:
        """Render as the inbound-surface response body.

        Success renders the value (via its own to_dict() when it has one);
        failure renders ``{"error", "errorCode"}``.
        """
        if self.is_failure:
            return {"error": self.error, "errorCode": self.error_code}
        to_dict = getattr(self.value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        return {"value": self.value}


class WebhookResultType(Enum):
    PROCESSED = "processed"  # payment state settled from this webhook
    IGNORED = "ignored"  # authentic but nothing to do (unsupported event, unknown or settled payment)
    FAILED = "failed"  # rejected or could not be applied


@dataclass(frozen=True, slots=True)
class WebhookOutcome:
    """Internal outcome of handling one provider webhook.

    Never reflected in the provider-facing HTTP status: the webhook endpoint
    always acknowledges, see to_acknowledgement().
    """

    result_type: WebhookResultType
    reason: str | None = None

    @classmethod
    def processed(cls) -> WebhookOutcome:
        return cls(result_type=WebhookResultType.PROCESSED)

    @classmethod
    def ignored(cls, reason: str) -> WebhookOutcome:
        return cls(result_type=WebhookResultType.IGNORED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> WebhookOutcome:
        return cls(result_type=WebhookResultType.FAILED, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.result_type != WebhookResultType.FAILED

    def to_acknowledgement(self) -> dict[str, bool]:
        return {"received": True, "processed": self.is_success}

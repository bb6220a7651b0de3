"""Domain exceptions for paybridge.

Exception hierarchy:
    DomainException (base, carries a stable error_code)
    ├── Validation Errors
    │   ├── InvalidMoneyError
    │   ├── InvalidEmailError
    │   ├── InvalidUrlError
    │   ├── InvalidPaymentReferenceError
    │   └── InvalidPaymentIdError
    └── State Errors
        └── PaymentStateError

Every domain exception is recoverable at the orchestrator boundary: the
error_code is surfaced to callers as-is, the message is human readable.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base exception for all domain-level errors.

    All domain exceptions inherit from this class to enable
    catching domain errors distinctly from infrastructure errors.
    """

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code


# =============================================================================
# Validation Errors
# =============================================================================


class InvalidMoneyError(DomainException):
    """Raised when an amount/currency pair violates Money invariants.

    Codes: AMOUNT_NOT_POSITIVE, AMOUNT_TOO_LARGE, CURRENCY_REQUIRED,
    UNSUPPORTED_CURRENCY, CURRENCY_MISMATCH, NEGATIVE_RESULT, INVALID_FACTOR.
    """

    default_code = "INVALID_MONEY"


class InvalidEmailError(DomainException):
    """Raised when a payer email fails validation."""

    default_code = "INVALID_EMAIL"


class InvalidUrlError(DomainException):
    """Raised when a redirect/notification URL fails validation."""

    default_code = "INVALID_URL"


class InvalidPaymentReferenceError(DomainException):
    """Raised when a string is not a valid PB_ payment reference."""

    default_code = "INVALID_REFERENCE"


class InvalidPaymentIdError(DomainException):
    """Raised when a payment ID is not a valid UUID."""

    default_code = "INVALID_PAYMENT_ID"


# =============================================================================
# State Errors
# =============================================================================


class PaymentStateError(DomainException):
    """Raised when an operation is not permitted in the payment's state.

    Also raised at construction when the caller-facing idempotency key
    (app_name, external_reference) is incomplete.

    Codes: ALREADY_PROCESSED, APP_NAME_REQUIRED, EXTERNAL_REFERENCE_REQUIRED,
    INCONSISTENT_VERIFICATION.
    """

    default_code = "INVALID_PAYMENT_STATE"

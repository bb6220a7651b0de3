"""Domain entities - Objects with identity and lifecycle."""

from paybridge.domain.entities.payment import (
    Payment,
    PaymentProcessingResult,
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
)

__all__ = [
    "Payment",
    "PaymentProcessingResult",
    "PaymentProvider",
    "PaymentPurpose",
    "PaymentStatus",
]

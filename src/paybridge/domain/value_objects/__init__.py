"""Value objects - Immutable, self-validating primitives."""

from paybridge.domain.value_objects.callback_url import CallbackUrl
from paybridge.domain.value_objects.email_address import EmailAddress
from paybridge.domain.value_objects.money import Currency, Money
from paybridge.domain.value_objects.payment_id import PaymentId
from paybridge.domain.value_objects.payment_reference import PaymentReference

__all__ = [
    "CallbackUrl",
    "Currency",
    "EmailAddress",
    "Money",
    "PaymentId",
    "PaymentReference",
]

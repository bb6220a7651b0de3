"""Data Transfer Objects for use case input/output."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paybridge.domain.entities import PaymentProvider, PaymentPurpose
    from paybridge.domain.value_objects import Money


@dataclass(frozen=True)
class InitializePaymentRequest:
    """Input DTO for the InitializePayment use case.

    Carries raw caller input; value objects are built (and validated)
    inside the use case.
    """

    external_user_id: str  # payer email
    amount: Decimal | int | float | str
    purpose: PaymentPurpose
    provider: PaymentProvider
    app_name: str
    external_reference: str
    redirect_url: str
    notification_url: str
    currency: str = "NGN"


@dataclass(frozen=True)
class PaymentInitResult:
    """Checkout destination returned by a gateway."""

    reference: str
    checkout_url: str

    def to_dict(self) -> dict[str, str]:
        return {"reference": self.reference, "checkoutUrl": self.checkout_url}


@dataclass(frozen=True)
class PaymentVerificationResult:
    """Normalized content of a provider's successful-charge webhook.

    reference is the raw value the provider echoed back; it is validated
    as a PaymentReference by the webhook use case.
    """

    reference: str
    amount: Money

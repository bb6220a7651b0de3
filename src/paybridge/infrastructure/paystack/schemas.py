"""Paystack wire shapes, limited to the fields the gateway reads.

Unknown fields are ignored, so additions on Paystack's side do not break
parsing.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, StrictInt

SUCCESSFUL_CHARGE_EVENT = "charge.success"


class PaystackInitData(BaseModel):
    authorization_url: str | None = None
    access_code: str | None = None
    reference: str | None = None


class PaystackInitResponse(BaseModel):
    """Body of POST /transaction/initialize."""

    status: bool = False
    message: str | None = None
    data: PaystackInitData | None = None


class PaystackWebhookEnvelope(BaseModel):
    """Outer webhook envelope; data is validated once the event type is known."""

    event: str
    data: dict[str, Any] | None = None


class PaystackChargeData(BaseModel):
    """data object of a charge.success event. amount is in kobo/cents."""

    reference: str | None = None
    amount: StrictInt
    status: str | None = None
    currency: str | None = None

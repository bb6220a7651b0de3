"""Paystack adapter: HTTP client, wire schemas and PaymentGateway implementation."""

from paybridge.infrastructure.paystack.client import PaystackClient
from paybridge.infrastructure.paystack.gateway import SIGNATURE_HEADER, PaystackGateway

__all__ = [
    "SIGNATURE_HEADER",
    "PaystackClient",
    "PaystackGateway",
]

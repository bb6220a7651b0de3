"""Paystack implementation of the PaymentGateway port.

Checkout: POST /transaction/initialize with the amount in kobo and our
reference as Paystack's transaction reference.
Webhooks: ``x-paystack-signature`` is the hex HMAC-SHA512 of the raw body
keyed with the secret key; only ``charge.success`` events settle payments.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import ValidationError

from paybridge.application.dtos import PaymentInitResult, PaymentVerificationResult
from paybridge.application.ports import PaymentGateway
from paybridge.application.results import ErrorCode, Result
from paybridge.domain.entities import PaymentProvider
from paybridge.domain.exceptions import InvalidMoneyError
from paybridge.domain.value_objects import Money
from paybridge.infrastructure.paystack.schemas import (
    SUCCESSFUL_CHARGE_EVENT,
    PaystackChargeData,
    PaystackInitResponse,
    PaystackWebhookEnvelope,
)

if TYPE_CHECKING:
    from paybridge.domain.entities import Payment
    from paybridge.infrastructure.paystack.client import PaystackClient

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"
DEFAULT_CURRENCY = "NGN"


class PaystackGateway(PaymentGateway):
    def __init__(self, client: PaystackClient, secret_key: str) -> None:
        self._client = client
        self._secret_key = secret_key

    @property
    def provider(self) -> PaymentProvider:
        return PaymentProvider.PAYSTACK

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def initialize(self, payment: Payment) -> Result[PaymentInitResult]:
        log = logger.bind(payment_reference=payment.reference.value)

        try:
            response = self._client.initialize_transaction(self._build_initialize_payload(payment))
        except httpx.TimeoutException:
            log.exception("paystack_initialize_timeout")
            return Result.failure(
                "Payment provider request timed out. Please try again.",
                ErrorCode.TIMEOUT_ERROR,
            )
        except httpx.RequestError:
            log.exception("paystack_initialize_network_error")
            return Result.failure(
                "Unable to connect to payment provider. Please try again.",
                ErrorCode.NETWORK_ERROR,
            )

        if not response.is_success:
            log.warning(
                "paystack_initialize_rejected",
                status_code=response.status_code,
                body=response.text[:500],
            )
            return self._handle_error(response)

        try:
            body = PaystackInitResponse.model_validate_json(response.content)
        except ValidationError:
            log.exception("paystack_initialize_parse_error")
            return Result.failure(
                "Invalid response format from payment provider", ErrorCode.PARSE_ERROR
            )

        if body.data is None or not body.data.authorization_url:
            log.error("paystack_initialize_missing_auth_url", message=body.message)
            return Result.failure(
                "Provider response is missing the authorization URL", ErrorCode.MISSING_AUTH_URL
            )

        log.info("paystack_transaction_initialized", authorization_url=body.data.authorization_url)
        return Result.success(
            PaymentInitResult(
                reference=payment.reference.value,
                checkout_url=body.data.authorization_url,
            )
        )

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    def verify_signature(self, raw_payload: bytes, signature: str) -> Result[bool]:
        if not self._secret_key:
            logger.error("paystack_webhook_secret_missing")
            return Result.failure(
                "Webhook secret is not configured", ErrorCode.SIGNATURE_VERIFICATION_ERROR
            )

        if not signature or not signature.strip():
            return Result.failure("Signature header is missing", ErrorCode.MISSING_SIGNATURE)

        try:
            computed = hmac.new(
                self._secret_key.encode("utf-8"), raw_payload, hashlib.sha512
            ).hexdigest()
        except (TypeError, ValueError) as e:
            logger.exception("paystack_signature_compute_failed")
            return Result.failure(
                f"Signature verification failed: {e}", ErrorCode.SIGNATURE_VERIFICATION_ERROR
            )

        supplied = signature.strip().lower().encode("utf-8")
        if hmac.compare_digest(computed.encode("ascii"), supplied):
            return Result.success(True)

        return Result.failure("Invalid signature", ErrorCode.INVALID_SIGNATURE)

    def parse_webhook(self, raw_payload: bytes) -> Result[PaymentVerificationResult]:
        try:
            document = json.loads(raw_payload)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("paystack_webhook_invalid_json")
            return Result.failure("Invalid JSON format", ErrorCode.JSON_PARSE_ERROR)

        try:
            envelope = PaystackWebhookEnvelope.model_validate(document)
        except ValidationError:
            return Result.failure("Invalid webhook data", ErrorCode.INVALID_STRUCTURE)

        if envelope.data is None:
            return Result.failure("Invalid webhook data", ErrorCode.INVALID_STRUCTURE)

        if envelope.event != SUCCESSFUL_CHARGE_EVENT:
            return Result.failure(
                f"Event type '{envelope.event}' is not processed", ErrorCode.UNSUPPORTED_EVENT
            )

        try:
            charge = PaystackChargeData.model_validate(envelope.data)
        except ValidationError:
            return Result.failure("Invalid charge data", ErrorCode.INVALID_STRUCTURE)

        if not charge.reference or not charge.reference.strip():
            return Result.failure("Payment reference is empty", ErrorCode.EMPTY_REFERENCE)

        try:
            amount = Money.from_minor_units(charge.amount, charge.currency or DEFAULT_CURRENCY)
        except InvalidMoneyError as e:
            return Result.failure(f"Invalid charge amount: {e.message}", ErrorCode.INVALID_AMOUNT)

        return Result.success(
            PaymentVerificationResult(reference=charge.reference.strip(), amount=amount)
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _build_initialize_payload(self, payment: Payment) -> dict[str, Any]:
        return {
            "email": payment.payer.value,
            "amount": payment.amount.to_minor_units(),
            "currency": payment.amount.currency.value,
            "reference": payment.reference.value,
            "callback_url": payment.redirect_url.value,
            "metadata": {
                "internal_id": str(payment.id),
                "reference": payment.reference.value,
                "app_name": payment.app_name,
                "purpose": payment.purpose.name,
            },
        }

    def _handle_error(self, response: httpx.Response) -> Result[PaymentInitResult]:
        message = _provider_message(response) or "Payment initialization failed"

        match response.status_code:
            case 401:
                return Result.failure(
                    "Payment provider authentication failed. Please contact support.",
                    ErrorCode.PROVIDER_AUTH_ERROR,
                )
            case 400:
                return Result.failure(
                    f"Invalid payment request: {message}", ErrorCode.INVALID_REQUEST
                )
            case 429:
                return Result.failure(
                    "Too many payment requests. Please try again in a moment.",
                    ErrorCode.RATE_LIMIT_ERROR,
                )
            case 500 | 503:
                return Result.failure(
                    "Payment provider is temporarily unavailable. Please try again.",
                    ErrorCode.PROVIDER_UNAVAILABLE,
                )
            case _:
                return Result.failure(
                    f"Payment initialization failed: {message}", ErrorCode.PROVIDER_ERROR
                )


def _provider_message(response: httpx.Response) -> str | None:
    """Best-effort extraction of Paystack's ``message`` field from an error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None

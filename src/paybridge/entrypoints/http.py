"""Framework-agnostic handlers for the two inbound HTTP operations.

A web framework route only has to read the body/headers and return the
dict these functions produce:

    POST /api/payments/initialize   -> initialize_payment(orchestrator, json_body)
    POST /api/webhooks/{provider}   -> receive_webhook(orchestrator, provider, raw_body, headers)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from paybridge.application.dtos import InitializePaymentRequest
from paybridge.application.results import ErrorCode
from paybridge.domain.entities import PaymentProvider, PaymentPurpose

if TYPE_CHECKING:
    from collections.abc import Mapping

    from paybridge.application.orchestrator import PaymentOrchestrator

logger = structlog.get_logger(__name__)

SIGNATURE_HEADERS = {
    PaymentProvider.PAYSTACK: "x-paystack-signature",
    PaymentProvider.FLUTTERWAVE: "verif-hash",
}

REQUIRED_FIELDS = (
    "externalUserId",
    "amount",
    "purpose",
    "provider",
    "appName",
    "externalReference",
    "redirectUrl",
    "notificationUrl",
)


class RequestParseError(ValueError):
    pass


def signature_from_headers(provider_name: str, headers: Mapping[str, str]) -> str:
    """Pick the provider's signature header, case-insensitively; "" if absent."""
    provider = PaymentProvider.from_name(provider_name)
    header_name = SIGNATURE_HEADERS.get(provider) if provider else None
    if header_name is None:
        return ""
    for key, value in headers.items():
        if key.lower() == header_name:
            return value
    return ""


def parse_initialize_request(body: Mapping[str, Any]) -> InitializePaymentRequest:
    """Map the camelCase JSON body onto the use case DTO.

    Raises:
        RequestParseError: Missing field or unknown purpose/provider.
    """
    missing = [name for name in REQUIRED_FIELDS if body.get(name) in (None, "")]
    if missing:
        raise RequestParseError(f"Missing required fields: {', '.join(missing)}")

    provider = PaymentProvider.from_name(str(body["provider"]))
    if provider is None:
        raise RequestParseError(f"Unknown provider: {body['provider']}")

    purpose = _parse_purpose(str(body["purpose"]))
    if purpose is None:
        raise RequestParseError(f"Unknown purpose: {body['purpose']}")

    return InitializePaymentRequest(
        external_user_id=str(body["externalUserId"]),
        amount=body["amount"],
        purpose=purpose,
        provider=provider,
        app_name=str(body["appName"]),
        external_reference=str(body["externalReference"]),
        redirect_url=str(body["redirectUrl"]),
        notification_url=str(body["notificationUrl"]),
        currency=str(body.get("currency") or "NGN"),
    )


def initialize_payment(orchestrator: PaymentOrchestrator, body: Mapping[str, Any]) -> dict[str, Any]:
    """Returns {reference, checkoutUrl} or {error, errorCode}."""
    try:
        request = parse_initialize_request(body)
    except RequestParseError as e:
        return {"error": str(e), "errorCode": ErrorCode.INVALID_REQUEST.value}

    return orchestrator.initialize_payment(request).to_dict()


def receive_webhook(
    orchestrator: PaymentOrchestrator,
    provider_name: str,
    raw_body: bytes,
    headers: Mapping[str, str],
) -> dict[str, bool]:
    """Always an acknowledgement; the internal outcome is only logged.

    Providers retry on non-2xx, so internal failures must not reach them.
    """
    outcome = orchestrator.handle_webhook(
        provider_name, raw_body, signature_from_headers(provider_name, headers)
    )
    logger.info(
        "webhook_handled",
        provider=provider_name,
        outcome=outcome.result_type.value,
        reason=outcome.reason,
    )
    return outcome.to_acknowledgement()


def _parse_purpose(value: str) -> PaymentPurpose | None:
    key = value.strip().replace("-", "_").lower()
    compact = key.replace("_", "")
    for purpose in PaymentPurpose:
        if key == purpose.value or compact == purpose.value.replace("_", ""):
            return purpose
    return None

from decimal import Decimal

import pytest

from paybridge.application.dtos import PaymentVerificationResult
from paybridge.application.orchestrator import PaymentOrchestrator
from paybridge.application.results import ErrorCode, Result
from paybridge.domain.entities import PaymentProvider, PaymentPurpose
from paybridge.domain.value_objects import Money
from paybridge.entrypoints.http import (
    RequestParseError,
    initialize_payment,
    parse_initialize_request,
    receive_webhook,
    signature_from_headers,
)


@pytest.fixture
def orchestrator(
    payment_repository, gateway_registry, notification_sink, time_provider, lock_provider
) -> PaymentOrchestrator:
    return PaymentOrchestrator.build(
        payment_repository=payment_repository,
        gateways=gateway_registry,
        notification_sink=notification_sink,
        time_provider=time_provider,
        lock_provider=lock_provider,
    )


@pytest.fixture
def body() -> dict:
    return {
        "externalUserId": "user@example.com",
        "amount": 5000,
        "purpose": "ProductCheckout",
        "provider": "Paystack",
        "appName": "Shop",
        "externalReference": "ORDER-1",
        "redirectUrl": "https://shop.example/return",
        "notificationUrl": "https://shop.example/payments/notify",
    }


class TestSignatureFromHeaders:
    def test_paystack_header_case_insensitive(self) -> None:
        assert signature_from_headers("paystack", {"X-Paystack-Signature": "abc"}) == "abc"

    def test_flutterwave_header(self) -> None:
        assert signature_from_headers("Flutterwave", {"verif-hash": "h"}) == "h"

    def test_missing_header(self) -> None:
        assert signature_from_headers("paystack", {"Content-Type": "application/json"}) == ""

    def test_unknown_provider(self) -> None:
        assert signature_from_headers("stripe", {"x-paystack-signature": "abc"}) == ""


class TestParseInitializeRequest:
    def test_maps_camel_case_body(self, body: dict) -> None:
        request = parse_initialize_request(body)

        assert request.external_user_id == "user@example.com"
        assert request.amount == 5000
        assert request.purpose is PaymentPurpose.PRODUCT_CHECKOUT
        assert request.provider is PaymentProvider.PAYSTACK
        assert request.currency == "NGN"

    @pytest.mark.parametrize(
        ("value", "purpose"),
        [
            ("wallet_funding", PaymentPurpose.WALLET_FUNDING),
            ("ServicePayment", PaymentPurpose.SERVICE_PAYMENT),
            ("service-payment", PaymentPurpose.SERVICE_PAYMENT),
        ],
    )
    def test_purpose_spellings(self, body: dict, value: str, purpose: PaymentPurpose) -> None:
        body["purpose"] = value

        assert parse_initialize_request(body).purpose is purpose

    def test_optional_currency(self, body: dict) -> None:
        body["currency"] = "USD"

        assert parse_initialize_request(body).currency == "USD"

    def test_missing_fields_are_listed(self, body: dict) -> None:
        del body["appName"]
        body["redirectUrl"] = ""

        with pytest.raises(RequestParseError, match="appName, redirectUrl"):
            parse_initialize_request(body)

    @pytest.mark.parametrize(("field", "value"), [("provider", "stripe"), ("purpose", "donation")])
    def test_unknown_enum_values(self, body: dict, field: str, value: str) -> None:
        body[field] = value

        with pytest.raises(RequestParseError, match="Unknown"):
            parse_initialize_request(body)


class TestInitializePaymentHandler:
    def test_success_body(self, orchestrator, body: dict) -> None:
        response = initialize_payment(orchestrator, body)

        assert set(response) == {"reference", "checkoutUrl"}
        assert response["reference"].startswith("PB_")
        assert response["checkoutUrl"] == "https://pay.example/abc"

    def test_domain_failure_body(self, orchestrator, body: dict) -> None:
        body["amount"] = -1

        assert initialize_payment(orchestrator, body) == {
            "error": "Amount must be greater than zero",
            "errorCode": "AMOUNT_NOT_POSITIVE",
        }

    def test_malformed_body(self, orchestrator, body: dict) -> None:
        del body["amount"]

        response = initialize_payment(orchestrator, body)

        assert response["errorCode"] == ErrorCode.INVALID_REQUEST


class TestReceiveWebhookHandler:
    def test_processed_webhook_is_acknowledged(
        self, orchestrator, body: dict, stub_gateway, notification_sink
    ) -> None:
        reference = initialize_payment(orchestrator, body)["reference"]
        stub_gateway.parse_result = Result.success(
            PaymentVerificationResult(reference=reference, amount=Money.create(Decimal("5000")))
        )

        ack = receive_webhook(
            orchestrator, "paystack", b"{}", {"x-paystack-signature": "sig"}
        )

        assert ack == {"received": True, "processed": True}
        assert stub_gateway.verify_calls == [(b"{}", "sig")]
        assert len(notification_sink.notified) == 1

    def test_rejected_webhook_is_still_received(self, orchestrator, stub_gateway) -> None:
        stub_gateway.verify_result = Result.failure("Invalid signature", ErrorCode.INVALID_SIGNATURE)

        ack = receive_webhook(orchestrator, "paystack", b"{}", {})

        assert ack == {"received": True, "processed": False}

    def test_unknown_provider_is_still_received(self, orchestrator) -> None:
        ack = receive_webhook(orchestrator, "stripe", b"{}", {})

        assert ack == {"received": True, "processed": False}

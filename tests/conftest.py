"""Shared pytest fixtures for the test suite.

Collaborators are faked by hand (no mocking library): each fake records its
calls and exposes attributes that tests flip to script failures.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest

from paybridge.application.dtos import (
    InitializePaymentRequest,
    PaymentInitResult,
    PaymentVerificationResult,
)
from paybridge.application.exceptions import PersistenceError
from paybridge.application.gateway_registry import GatewayRegistry
from paybridge.application.ports import NotificationSink, PaymentGateway
from paybridge.application.results import Result
from paybridge.domain.entities import Payment, PaymentProvider, PaymentPurpose
from paybridge.domain.value_objects import CallbackUrl, EmailAddress, Money
from paybridge.infrastructure.lock_provider import NoOpLockProvider
from paybridge.infrastructure.payment_repository import (
    InMemoryPaymentRepository,
    InMemoryPaymentStore,
)
from paybridge.infrastructure.time_provider import FixedTimeProvider

CHECKOUT_URL = "https://pay.example/abc"


# =============================================================================
# Fakes
# =============================================================================


class StubGateway(PaymentGateway):
    """Scriptable gateway that records every call."""

    def __init__(self, provider: PaymentProvider = PaymentProvider.PAYSTACK) -> None:
        self._provider = provider
        self.init_result: Result[PaymentInitResult] | None = None
        self.init_exception: Exception | None = None
        self.verify_result: Result[bool] = Result.success(True)
        self.parse_result: Result[PaymentVerificationResult] | None = None
        self.initialize_calls: list[Payment] = []
        self.verify_calls: list[tuple[bytes, str]] = []
        self.parse_calls: list[bytes] = []

    @property
    def provider(self) -> PaymentProvider:
        return self._provider

    def initialize(self, payment: Payment) -> Result[PaymentInitResult]:
        self.initialize_calls.append(payment)
        if self.init_exception is not None:
            raise self.init_exception
        if self.init_result is not None:
            return self.init_result
        return Result.success(
            PaymentInitResult(reference=payment.reference.value, checkout_url=CHECKOUT_URL)
        )

    def verify_signature(self, raw_payload: bytes, signature: str) -> Result[bool]:
        self.verify_calls.append((raw_payload, signature))
        return self.verify_result

    def parse_webhook(self, raw_payload: bytes) -> Result[PaymentVerificationResult]:
        self.parse_calls.append(raw_payload)
        if self.parse_result is None:
            raise AssertionError("parse_result not scripted")
        return self.parse_result


class SpyPaymentRepository(InMemoryPaymentRepository):
    """In-memory repository that counts calls and can be told to fail."""

    def __init__(self, store: InMemoryPaymentStore | None = None) -> None:
        super().__init__(store)
        self.add_calls: list[Payment] = []
        self.save_calls = 0
        self.reference_lookups = 0
        self.fail_on_save_call: int | None = None  # 1-based; None = never
        self.fail_on_lookup = False

    def add(self, payment: Payment) -> None:
        self.add_calls.append(payment)
        super().add(payment)

    def get_by_reference(self, reference: Any) -> Payment | None:
        self.reference_lookups += 1
        if self.fail_on_lookup:
            raise PersistenceError("connection refused")
        return super().get_by_reference(reference)

    def get_by_external_reference(self, app_name: str, external_reference: str) -> Payment | None:
        if self.fail_on_lookup:
            raise PersistenceError("connection refused")
        return super().get_by_external_reference(app_name, external_reference)

    def save(self) -> None:
        self.save_calls += 1
        if self.fail_on_save_call is not None and self.save_calls >= self.fail_on_save_call:
            raise PersistenceError("Database connection failed")
        super().save()


class RecordingNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.notified: list[Payment] = []
        self.error: Exception | None = None

    def notify(self, payment: Payment) -> None:
        self.notified.append(payment)
        if self.error is not None:
            raise self.error


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed timestamp for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def time_provider(fixed_time: datetime) -> FixedTimeProvider:
    return FixedTimeProvider(fixed_time)


@pytest.fixture
def lock_provider() -> NoOpLockProvider:
    """Use NoOpLockProvider for unit tests (single-threaded)."""
    return NoOpLockProvider()


@pytest.fixture
def payment_store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()


@pytest.fixture
def payment_repository(payment_store: InMemoryPaymentStore) -> SpyPaymentRepository:
    return SpyPaymentRepository(payment_store)


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def gateway_registry(stub_gateway: StubGateway) -> GatewayRegistry:
    return GatewayRegistry([stub_gateway])


@pytest.fixture
def notification_sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def payment_factory(fixed_time: datetime) -> Callable[..., Payment]:
    """Build PENDING payments with sensible defaults; override any field."""

    def _make(**overrides: Any) -> Payment:
        fields: dict[str, Any] = {
            "provider": PaymentProvider.PAYSTACK,
            "purpose": PaymentPurpose.PRODUCT_CHECKOUT,
            "amount": Money.create(Decimal("5000"), "NGN"),
            "payer": EmailAddress("user@example.com"),
            "app_name": "Shop",
            "external_reference": "ORDER-1",
            "redirect_url": CallbackUrl("https://shop.example/return"),
            "notification_url": CallbackUrl("https://shop.example/payments/notify"),
            "now": fixed_time,
        }
        fields.update(overrides)
        return Payment.create(**fields)

    return _make


@pytest.fixture
def request_factory() -> Callable[..., InitializePaymentRequest]:
    def _make(**overrides: Any) -> InitializePaymentRequest:
        fields: dict[str, Any] = {
            "external_user_id": "user@example.com",
            "amount": Decimal("5000"),
            "purpose": PaymentPurpose.PRODUCT_CHECKOUT,
            "provider": PaymentProvider.PAYSTACK,
            "app_name": "Shop",
            "external_reference": "ORDER-1",
            "redirect_url": "https://shop.example/return",
            "notification_url": "https://shop.example/payments/notify",
        }
        fields.update(overrides)
        return InitializePaymentRequest(**fields)

    return _make

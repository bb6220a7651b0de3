from __future__ import annotations

from typing import TYPE_CHECKING

from paybridge.application.use_cases.handle_webhook import HandleWebhookUseCase
from paybridge.application.use_cases.initialize_payment import InitializePaymentUseCase

if TYPE_CHECKING:
    from paybridge.application.dtos import InitializePaymentRequest, PaymentInitResult
    from paybridge.application.gateway_registry import GatewayRegistry
    from paybridge.application.ports import (
        LockProvider,
        NotificationSink,
        PaymentRepository,
        TimeProvider,
    )
    from paybridge.application.results import Result, WebhookOutcome


class PaymentOrchestrator:
    """Single entry point used by the delivery layer.

    One instance per request scope: the repository it is built with is a
    unit of work, so it must not be shared across concurrent requests.
    """

    def __init__(
        self,
        initialize_use_case: InitializePaymentUseCase,
        webhook_use_case: HandleWebhookUseCase,
    ) -> None:
        self._initialize = initialize_use_case
        self._webhook = webhook_use_case

    @classmethod
    def build(
        cls,
        *,
        payment_repository: PaymentRepository,
        gateways: GatewayRegistry,
        notification_sink: NotificationSink,
        time_provider: TimeProvider,
        lock_provider: LockProvider,
    ) -> PaymentOrchestrator:
        return cls(
            initialize_use_case=InitializePaymentUseCase(
                time_provider=time_provider,
                payment_repository=payment_repository,
                gateways=gateways,
                lock_provider=lock_provider,
            ),
            webhook_use_case=HandleWebhookUseCase(
                time_provider=time_provider,
                lock_provider=lock_provider,
                payment_repository=payment_repository,
                gateways=gateways,
                notification_sink=notification_sink,
            ),
        )

    def initialize_payment(self, request: InitializePaymentRequest) -> Result[PaymentInitResult]:
        return self._initialize.execute(request)

    def handle_webhook(
        self, provider_name: str, raw_payload: bytes, signature: str | None
    ) -> WebhookOutcome:
        return self._webhook.execute(provider_name, raw_payload, signature)

"""Composition root: wires settings into shared adapters and per-request orchestrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from paybridge.application.gateway_registry import GatewayRegistry
from paybridge.application.orchestrator import PaymentOrchestrator
from paybridge.config import get_settings
from paybridge.infrastructure import (
    BackgroundNotificationSink,
    HttpNotificationSink,
    InMemoryLockProvider,
    InMemoryPaymentRepository,
    InMemoryPaymentStore,
    SystemTimeProvider,
)
from paybridge.infrastructure.paystack import PaystackClient, PaystackGateway

if TYPE_CHECKING:
    from collections.abc import Callable

    from paybridge.application.ports import (
        LockProvider,
        NotificationSink,
        PaymentGateway,
        TimeProvider,
    )
    from paybridge.config import Settings

logger = structlog.get_logger(__name__)


class Container:
    """Process-wide collaborators.

    Gateways, the lock provider, the store and the notification sink are
    shared; each call to orchestrator() gets its own repository (unit of work).
    """

    def __init__(
        self,
        store: InMemoryPaymentStore,
        gateways: GatewayRegistry,
        notification_sink: NotificationSink,
        time_provider: TimeProvider,
        lock_provider: LockProvider,
    ) -> None:
        self.store = store
        self.gateways = gateways
        self.notification_sink = notification_sink
        self.time_provider = time_provider
        self.lock_provider = lock_provider
        self._closers: list[Callable[[], None]] = []

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Container:
        settings = settings or get_settings()
        secret_key = settings.paystack_secret_key.get_secret_value()

        if not secret_key:
            logger.warning("paystack_secret_key_missing")

        paystack_client = PaystackClient(
            secret_key=secret_key,
            base_url=settings.paystack_base_url,
            timeout=settings.paystack_timeout_seconds,
        )
        gateways: list[PaymentGateway] = [PaystackGateway(paystack_client, secret_key)]

        http_sink = HttpNotificationSink(timeout=settings.notification_timeout_seconds)
        background_sink = BackgroundNotificationSink(
            http_sink, max_workers=settings.notification_workers
        )

        container = cls(
            store=InMemoryPaymentStore(),
            gateways=GatewayRegistry(gateways),
            notification_sink=background_sink,
            time_provider=SystemTimeProvider(),
            lock_provider=InMemoryLockProvider(),
        )
        container._closers = [
            background_sink.shutdown,
            http_sink.close,
            paystack_client.close,
        ]
        logger.info(
            "container_ready",
            providers=sorted(p.name for p in container.gateways.providers),
        )
        return container

    def orchestrator(self) -> PaymentOrchestrator:
        return PaymentOrchestrator.build(
            payment_repository=InMemoryPaymentRepository(self.store),
            gateways=self.gateways,
            notification_sink=self.notification_sink,
            time_provider=self.time_provider,
            lock_provider=self.lock_provider,
        )

    def close(self) -> None:
        """Drain pending notifications, then close HTTP clients."""
        for close in self._closers:
            close()
        self._closers = []

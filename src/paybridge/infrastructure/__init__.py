"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- Persistence: in-memory payment store and unit-of-work repository
- Gateways: the Paystack PaymentGateway over httpx
- Notification: HTTP and background notification sinks
- Time Provider: Clock abstraction for testability
- Locking: per-reference locks for webhook reconciliation

Infrastructure adapters implement the ports defined in the application layer.
"""

from paybridge.infrastructure.lock_provider import InMemoryLockProvider, NoOpLockProvider
from paybridge.infrastructure.notification import (
    BackgroundNotificationSink,
    HttpNotificationSink,
)
from paybridge.infrastructure.payment_repository import (
    InMemoryPaymentRepository,
    InMemoryPaymentStore,
)
from paybridge.infrastructure.time_provider import FixedTimeProvider, SystemTimeProvider

__all__ = [
    "BackgroundNotificationSink",
    "FixedTimeProvider",
    "HttpNotificationSink",
    "InMemoryLockProvider",
    "InMemoryPaymentRepository",
    "InMemoryPaymentStore",
    "NoOpLockProvider",
    "SystemTimeProvider",
]

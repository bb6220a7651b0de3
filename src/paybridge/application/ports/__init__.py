"""Ports - Abstract interfaces for external dependencies.

Ports define the contracts that infrastructure adapters must implement.
This allows the application layer to remain decoupled from concrete implementations.
"""

from paybridge.application.ports.lock_provider import LockProvider
from paybridge.application.ports.notification_sink import NotificationSink
from paybridge.application.ports.payment_gateway import PaymentGateway
from paybridge.application.ports.payment_repository import PaymentRepository
from paybridge.application.ports.time_provider import TimeProvider

__all__ = [
    "LockProvider",
    "NotificationSink",
    "PaymentGateway",
    "PaymentRepository",
    "TimeProvider",
]

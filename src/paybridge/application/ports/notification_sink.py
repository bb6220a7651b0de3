from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paybridge.domain.entities import Payment


class NotificationSink(ABC):
    """Port for notifying the originating application of a settled payment.

    Contract:
    - notify() is fire-and-forget: implementations log their own failures
      and MUST NOT raise
    - notify() is only called after the payment's new state is committed
    """

    @abstractmethod
    def notify(self, payment: Payment) -> None:
        """Send the payment outcome to payment.notification_url."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class TimeProvider(ABC):
    """Source of timestamps for payment lifecycle events.

    Payment.created_at and Payment.verified_at are always taken from here,
    never from datetime.now() inside the domain, so use cases stay
    deterministic under test.

    Implementations return aware datetimes with tzinfo=datetime.UTC.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current instant in UTC."""
        ...

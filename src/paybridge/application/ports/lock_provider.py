from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class LockProvider(ABC):
    """Port for per-payment locking around status transitions.

    Contract:
    - acquire() MUST serialize access to the same resource_id
    - acquire() MUST release the lock when the context exits (normal or exception)
    - acquire() MUST be blocking
    - Different resource_ids MAY be acquired concurrently

    Webhook reconciliation and the initialize failure path take the lock on
    the payment reference, so exactly one of them moves a PENDING payment.
    """

    @abstractmethod
    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        """Acquire a lock for the given resource ID.

        Args:
            resource_id: Stable identifier, e.g. a payment reference value.

        Usage:
            with lock_provider.acquire(reference.value):
                ...
        """
        ...

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING

from paybridge.application.ports import LockProvider

if TYPE_CHECKING:
    from collections.abc import Iterator


class InMemoryLockProvider(LockProvider):
    """In-memory lock provider using one lock per payment reference.

    Implementation uses two-phase locking:
    1. Global lock protects the lock dictionary during lookup/creation
    2. Resource lock serializes webhooks for the same reference

    Limitations:
    - Single-process only (locks don't work across processes)
    - Unbounded memory growth (locks are never evicted)
    - Multi-instance deployments need a database row lock or a
      distributed lock behind the same port
    """

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self._global_lock = Lock()

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        with self._global_lock:
            lock = self._locks.setdefault(resource_id, Lock())

        with lock:
            yield


class NoOpLockProvider(LockProvider):
    """Lock provider that performs no locking.

    For single-threaded unit tests only.
    """

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:  # noqa: ARG002
        yield

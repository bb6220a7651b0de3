from __future__ import annotations

import copy
from threading import Lock
from typing import TYPE_CHECKING

from paybridge.application.exceptions import DuplicatePaymentError, StalePaymentError
from paybridge.application.ports import PaymentRepository

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from paybridge.domain.entities import Payment, PaymentStatus
    from paybridge.domain.value_objects import PaymentReference


class InMemoryPaymentStore:
    """Process-wide committed payment records (the "database").

    Implementation notes:
    - Keyed by PaymentReference (frozen dataclass, hashable)
    - Secondary unique index on (app_name, external_reference)
    - Stores and returns deep copies; callers never share instances
    - commit() is atomic and thread-safe: the uniqueness check and the
      write happen under one lock, like a unique constraint in a database
    - A settled (terminal) record is final: commit() refuses to replace it
      with a different status, like an optimistic version check

    Deepcopy assumptions:
    - Value objects are frozen dataclasses and deepcopy-safe
    - datetime objects with tzinfo=UTC survive deepcopy correctly
    """

    def __init__(self) -> None:
        self._payments: dict[PaymentReference, Payment] = {}
        self._by_external_reference: dict[tuple[str, str], PaymentReference] = {}
        self._lock = Lock()

    def get(self, reference: PaymentReference) -> Payment | None:
        with self._lock:
            payment = self._payments.get(reference)
            return None if payment is None else copy.deepcopy(payment)

    def find_reference(self, app_name: str, external_reference: str) -> PaymentReference | None:
        with self._lock:
            return self._by_external_reference.get((app_name, external_reference))

    def commit(self, payments: Iterable[Payment]) -> None:
        """Write payments; all or nothing.

        Raises:
            DuplicatePaymentError: If any payment reuses another payment's
                (app_name, external_reference). Nothing is written.
            StalePaymentError: If any payment would overwrite a settled record
                with a different outcome. Nothing is written.
        """
        payments = list(payments)
        with self._lock:
            for payment in payments:
                key = (payment.app_name, payment.external_reference)
                owner = self._by_external_reference.get(key)
                if owner is not None and owner != payment.reference:
                    raise DuplicatePaymentError(
                        f"Payment already exists for app_name={payment.app_name}, "
                        f"external_reference={payment.external_reference}"
                    )
                current = self._payments.get(payment.reference)
                if (
                    current is not None
                    and current.is_terminal
                    and _outcome(current) != _outcome(payment)
                ):
                    raise StalePaymentError(
                        f"Payment {payment.reference.value} is already {current.status.value}"
                    )

            for payment in payments:
                key = (payment.app_name, payment.external_reference)
                self._payments[payment.reference] = copy.deepcopy(payment)
                self._by_external_reference[key] = payment.reference

    def __len__(self) -> int:
        with self._lock:
            return len(self._payments)


class InMemoryPaymentRepository(PaymentRepository):
    """Request-scoped unit of work over an InMemoryPaymentStore.

    Implementation notes:
    - Every payment handed out or added is tracked (identity map): loading the
      same reference twice returns the same instance
    - save() commits all tracked payments; tracking continues afterwards, so a
      later transition on the same instance can be saved again
    - A failed save() drops every tracked payment that differs from the
      committed record, so the next load sees the store again
    - NOT thread-safe; create one repository per request and share the store

    Copy-on-read rationale:
    Loading copies catches bugs where code mutates an entity without
    calling save(). This mimics ORM behavior where changes are only
    visible to other sessions after commit.
    """

    def __init__(self, store: InMemoryPaymentStore | None = None) -> None:
        self._store = store if store is not None else InMemoryPaymentStore()
        self._tracked: dict[PaymentReference, Payment] = {}

    @property
    def store(self) -> InMemoryPaymentStore:
        return self._store

    def add(self, payment: Payment) -> None:
        self._tracked[payment.reference] = payment

    def get_by_reference(self, reference: PaymentReference) -> Payment | None:
        tracked = self._tracked.get(reference)
        if tracked is not None:
            return tracked

        payment = self._store.get(reference)
        if payment is None:
            return None

        self._tracked[reference] = payment
        return payment

    def get_by_external_reference(
        self, app_name: str, external_reference: str
    ) -> Payment | None:
        reference = self._store.find_reference(app_name, external_reference)
        if reference is None:
            return None
        return self.get_by_reference(reference)

    def save(self) -> None:
        try:
            self._store.commit(self._tracked.values())
        except (DuplicatePaymentError, StalePaymentError):
            self._drop_diverged()
            raise

    def _drop_diverged(self) -> None:
        for reference, payment in list(self._tracked.items()):
            committed = self._store.get(reference)
            if committed is None or _outcome(committed) != _outcome(payment):
                del self._tracked[reference]


def _outcome(payment: Payment) -> tuple[PaymentStatus, datetime | None]:
    return payment.status, payment.verified_at

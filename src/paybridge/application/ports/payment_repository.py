from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paybridge.domain.entities import Payment
    from paybridge.domain.value_objects import PaymentReference


class PaymentRepository(ABC):
    """Port for payment persistence (unit-of-work style).

    Contract:
    - add() stages a new payment; nothing is durable until save()
    - get_by_*() return None if the payment does not exist (no exception)
    - Entities returned by get_by_*() are tracked: mutating them through their
      transition methods and then calling save() persists the change
    - save() commits every staged and tracked payment
    - (app_name, external_reference) is unique; save() raises
      DuplicatePaymentError when a staged payment would violate it
    - A settled payment is final; save() raises StalePaymentError when a
      tracked copy would replace it with a different outcome
    - Any operation MAY raise PersistenceError

    Payments are never deleted.
    """

    @abstractmethod
    def add(self, payment: Payment) -> None:
        """Stage a new payment for insertion on the next save()."""

    @abstractmethod
    def get_by_reference(self, reference: PaymentReference) -> Payment | None:
        """Retrieve a payment by its internal reference."""

    @abstractmethod
    def get_by_external_reference(
        self, app_name: str, external_reference: str
    ) -> Payment | None:
        """Retrieve a payment by the caller-facing idempotency key."""

    @abstractmethod
    def save(self) -> None:
        """Commit pending mutations.

        Raises:
            DuplicatePaymentError: A staged payment reuses an existing
                (app_name, external_reference) pair.
            StalePaymentError: A tracked payment was settled elsewhere after
                it was loaded.
            PersistenceError: The store could not be written.
        """

"""Infrastructure-facing exceptions raised by port implementations.

These are NOT domain exceptions: they describe failures of collaborators
(database, network) and are translated into Result error codes by the
use cases.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Raised by a PaymentRepository when the store cannot be read or written."""


class DuplicatePaymentError(PersistenceError):
    """Raised on save() when (app_name, external_reference) already exists.

    This is the storage-level guard for the double-initialization race: two
    concurrent initialize calls can both miss the idempotency lookup, but
    only one of them can commit.
    """


class StalePaymentError(PersistenceError):
    """Raised on save() when a payment was settled by someone else meanwhile.

    A settled record is final: a unit of work holding an older copy can
    not replace it with a different outcome.
    """

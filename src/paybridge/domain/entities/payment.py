"""Payment aggregate with state machine behavior.

State machine:
    - pending → success (process_successful_payment, amounts match)
    - pending → failed  (process_successful_payment, amount mismatch)
    - pending → failed  (mark_initialization_failed)
    - success and failed are terminal
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from paybridge.domain.exceptions import PaymentStateError
from paybridge.domain.value_objects import PaymentId, PaymentReference

if TYPE_CHECKING:
    from datetime import datetime

    from paybridge.domain.value_objects import CallbackUrl, EmailAddress, Money


class PaymentStatus(Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


class PaymentProvider(Enum):
    """Payment providers a gateway can be registered for."""

    PAYSTACK = "paystack"
    FLUTTERWAVE = "flutterwave"

    @classmethod
    def from_name(cls, name: str) -> PaymentProvider | None:
        """Case-insensitive lookup by name or value; None if unknown."""
        if not name:
            return None
        key = name.strip().lower()
        for provider in cls:
            if key in (provider.value, provider.name.lower()):
                return provider
        return None


class PaymentPurpose(Enum):
    PRODUCT_CHECKOUT = "product_checkout"
    SERVICE_PAYMENT = "service_payment"
    WALLET_FUNDING = "wallet_funding"


class PaymentProcessingResult(Enum):
    """Outcome of reconciling a provider-reported amount against a Payment."""

    SUCCESS = "success"
    AMOUNT_MISMATCH = "amount_mismatch"


TERMINAL_STATUSES = frozenset({PaymentStatus.SUCCESS, PaymentStatus.FAILED})


class Payment:
    """Payment aggregate root.

    Unlike value objects, a Payment is mutable, but only through its own
    transition methods; every field is exposed as a read-only property.
    Timestamps are passed in by the caller (see TimeProvider) so the
    entity never reads the clock itself.

    Use create() for new payments and restore() to rehydrate stored ones.
    """

    __slots__ = (
        "_id",
        "_reference",
        "_provider",
        "_purpose",
        "_amount",
        "_payer",
        "_app_name",
        "_external_reference",
        "_redirect_url",
        "_notification_url",
        "_status",
        "_created_at",
        "_verified_at",
    )

    def __init__(
        self,
        *,
        id: PaymentId,
        reference: PaymentReference,
        provider: PaymentProvider,
        purpose: PaymentPurpose,
        amount: Money,
        payer: EmailAddress,
        app_name: str,
        external_reference: str,
        redirect_url: CallbackUrl,
        notification_url: CallbackUrl,
        status: PaymentStatus,
        created_at: datetime,
        verified_at: datetime | None,
    ) -> None:
        self._id = id
        self._reference = reference
        self._provider = provider
        self._purpose = purpose
        self._amount = amount
        self._payer = payer
        self._app_name = app_name
        self._external_reference = external_reference
        self._redirect_url = redirect_url
        self._notification_url = notification_url
        self._status = status
        self._created_at = created_at
        self._verified_at = verified_at

    @classmethod
    def create(
        cls,
        *,
        provider: PaymentProvider,
        purpose: PaymentPurpose,
        amount: Money,
        payer: EmailAddress,
        app_name: str,
        external_reference: str,
        redirect_url: CallbackUrl,
        notification_url: CallbackUrl,
        now: datetime,
    ) -> Payment:
        """Create a new PENDING payment with a freshly generated reference.

        Raises:
            PaymentStateError: If app_name or external_reference is blank.
        """
        if app_name is None or not app_name.strip():
            raise PaymentStateError("App name is required", "APP_NAME_REQUIRED")

        if external_reference is None or not external_reference.strip():
            raise PaymentStateError(
                "External reference is required", "EXTERNAL_REFERENCE_REQUIRED"
            )

        return cls(
            id=PaymentId.generate(),
            reference=PaymentReference.generate(),
            provider=provider,
            purpose=purpose,
            amount=amount,
            payer=payer,
            app_name=app_name.strip(),
            external_reference=external_reference.strip(),
            redirect_url=redirect_url,
            notification_url=notification_url,
            status=PaymentStatus.PENDING,
            created_at=now,
            verified_at=None,
        )

    @classmethod
    def restore(
        cls,
        *,
        id: PaymentId,
        reference: PaymentReference,
        provider: PaymentProvider,
        purpose: PaymentPurpose,
        amount: Money,
        payer: EmailAddress,
        app_name: str,
        external_reference: str,
        redirect_url: CallbackUrl,
        notification_url: CallbackUrl,
        status: PaymentStatus,
        created_at: datetime,
        verified_at: datetime | None,
    ) -> Payment:
        """Rehydrate a stored payment.

        Raises:
            PaymentStateError: If verified_at disagrees with status.
        """
        if (status in TERMINAL_STATUSES) != (verified_at is not None):
            raise PaymentStateError(
                f"Payment in status {status.value} cannot have verified_at={verified_at}",
                "INCONSISTENT_VERIFICATION",
            )

        return cls(
            id=id,
            reference=reference,
            provider=provider,
            purpose=purpose,
            amount=amount,
            payer=payer,
            app_name=app_name,
            external_reference=external_reference,
            redirect_url=redirect_url,
            notification_url=notification_url,
            status=status,
            created_at=created_at,
            verified_at=verified_at,
        )

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def id(self) -> PaymentId:
        return self._id

    @property
    def reference(self) -> PaymentReference:
        return self._reference

    @property
    def provider(self) -> PaymentProvider:
        return self._provider

    @property
    def purpose(self) -> PaymentPurpose:
        return self._purpose

    @property
    def amount(self) -> Money:
        return self._amount

    @property
    def payer(self) -> EmailAddress:
        return self._payer

    @property
    def app_name(self) -> str:
        return self._app_name

    @property
    def external_reference(self) -> str:
        return self._external_reference

    @property
    def redirect_url(self) -> CallbackUrl:
        return self._redirect_url

    @property
    def notification_url(self) -> CallbackUrl:
        return self._notification_url

    @property
    def status(self) -> PaymentStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def verified_at(self) -> datetime | None:
        return self._verified_at

    @property
    def is_pending(self) -> bool:
        return self._status == PaymentStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self._status in TERMINAL_STATUSES

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def process_successful_payment(
        self, received_amount: Money, now: datetime
    ) -> PaymentProcessingResult:
        """Reconcile a provider-reported successful charge.

        The received amount must equal the stored amount (same currency,
        same value); anything else fails the payment. This is what stops a
        forged or under-paid webhook from settling a payment.

        Args:
            received_amount: Amount the provider reports as charged.
            now: Current timestamp (UTC).

        Returns:
            SUCCESS if the amounts match, AMOUNT_MISMATCH otherwise.

        Raises:
            PaymentStateError: ALREADY_PROCESSED if not PENDING. State is unchanged.
        """
        if self._status != PaymentStatus.PENDING:
            raise PaymentStateError(
                f"Payment {self._reference} already processed "
                f"(status={self._status.value})",
                "ALREADY_PROCESSED",
            )

        if received_amount != self._amount:
            self._transition(PaymentStatus.FAILED, now)
            return PaymentProcessingResult.AMOUNT_MISMATCH

        self._transition(PaymentStatus.SUCCESS, now)
        return PaymentProcessingResult.SUCCESS

    def mark_initialization_failed(self, now: datetime) -> None:
        """Fail a payment whose provider checkout could not be created.

        No-op unless PENDING.
        """
        if self._status != PaymentStatus.PENDING:
            return

        self._transition(PaymentStatus.FAILED, now)

    def _transition(self, status: PaymentStatus, now: datetime) -> None:
        self._status = status
        self._verified_at = now

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Payment):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Payment(reference={self._reference.value!r}, status={self._status.value}, "
            f"amount={self._amount}, app_name={self._app_name!r}, "
            f"external_reference={self._external_reference!r})"
        )

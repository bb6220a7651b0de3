from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from paybridge.application.results import ErrorCode, WebhookOutcome
from paybridge.domain.entities import PaymentProcessingResult
from paybridge.domain.exceptions import InvalidPaymentReferenceError, PaymentStateError
from paybridge.domain.value_objects import PaymentReference

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from paybridge.application.gateway_registry import GatewayRegistry
    from paybridge.application.ports import (
        LockProvider,
        NotificationSink,
        PaymentRepository,
        TimeProvider,
    )
    from paybridge.domain.entities import Payment
    from paybridge.domain.value_objects import Money

logger = structlog.get_logger(__name__)


class HandleWebhookUseCase:
    """Reconciles a provider webhook against the stored payment.

    Order of checks (each step only runs on input that passed the previous):
    1. Resolve the gateway for the provider name
    2. Verify the signature over the raw bytes
    3. Parse the event; non-payment events are IGNORED
    4. Look up the payment; unknown references are IGNORED
    5. Apply the amount check under a per-reference lock and save
    6. Notify the originating app (best effort) when the payment succeeded

    Redelivered webhooks are idempotent by construction: the payment is no
    longer PENDING, so the state machine rejects the second transition and
    the outcome is IGNORED.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        lock_provider: LockProvider,
        payment_repository: PaymentRepository,
        gateways: GatewayRegistry,
        notification_sink: NotificationSink,
    ) -> None:
        self._time_provider = time_provider
        self._lock_provider = lock_provider
        self._payment_repo = payment_repository
        self._gateways = gateways
        self._notification_sink = notification_sink

    def execute(self, provider_name: str, raw_payload: bytes, signature: str | None) -> WebhookOutcome:
        log = logger.bind(provider=provider_name, payload_length=len(raw_payload))

        # Step 1: Resolve gateway
        gateway = self._gateways.resolve(provider_name)
        if gateway is None:
            log.warning("webhook_provider_unsupported")
            return WebhookOutcome.failed(f"Unsupported provider: {provider_name}")

        # Step 2: Authenticate. Nothing below runs on unverified input.
        try:
            verification = gateway.verify_signature(raw_payload, signature or "")
        except Exception:
            log.exception("webhook_signature_check_raised")
            return WebhookOutcome.failed("Signature verification failed: internal error")

        if verification.is_failure or not verification.value:
            log.warning("webhook_signature_invalid", error_code=verification.error_code)
            return WebhookOutcome.failed(f"Signature verification failed: {verification.error}")

        # Step 3: Parse
        try:
            parsed = gateway.parse_webhook(raw_payload)
        except Exception:
            log.exception("webhook_parse_raised")
            return WebhookOutcome.failed("Invalid webhook payload: internal error")

        if parsed.is_failure:
            if parsed.error_code == ErrorCode.UNSUPPORTED_EVENT:
                log.info("webhook_event_ignored", reason=parsed.error)
                return WebhookOutcome.ignored(parsed.error or "Unsupported event")
            log.warning("webhook_payload_invalid", error_code=parsed.error_code, error=parsed.error)
            return WebhookOutcome.failed(f"Invalid webhook payload: {parsed.error}")

        verification_result = parsed.value
        log = log.bind(payment_reference=verification_result.reference)

        # Step 4: Only our own references can match a payment
        try:
            reference = PaymentReference.create(verification_result.reference)
        except InvalidPaymentReferenceError:
            log.info("webhook_reference_foreign")
            return WebhookOutcome.ignored(
                f"Reference {verification_result.reference} is not a PayBridge reference"
            )

        # Step 5: Reconcile under lock
        with self._lock_provider.acquire(reference.value):
            outcome, settled_payment = self._reconcile_within_lock(
                reference, verification_result.amount, log
            )

        # Step 6: Notify outside the lock, after the state is committed
        if settled_payment is not None:
            self._notify(settled_payment, log)

        return outcome

    def _reconcile_within_lock(
        self,
        reference: PaymentReference,
        received_amount: Money,
        log: FilteringBoundLogger,
    ) -> tuple[WebhookOutcome, Payment | None]:
        try:
            payment = self._payment_repo.get_by_reference(reference)
        except Exception:
            log.exception("webhook_payment_lookup_failed")
            return WebhookOutcome.failed("Database lookup failed"), None

        if payment is None:
            log.info("webhook_payment_not_found")
            return WebhookOutcome.ignored(f"Payment {reference.value} not found"), None

        now = self._time_provider.now()
        try:
            result = payment.process_successful_payment(received_amount, now)
        except PaymentStateError as e:
            log.info("webhook_payment_already_processed", status=payment.status.value)
            return WebhookOutcome.ignored(e.message), None

        try:
            self._payment_repo.save()
        except Exception:
            log.exception("webhook_payment_save_failed", result=result.value)
            return WebhookOutcome.failed("Database save failed"), None

        if result == PaymentProcessingResult.SUCCESS:
            log.info("webhook_payment_succeeded")
            return WebhookOutcome.processed(), payment

        if result == PaymentProcessingResult.AMOUNT_MISMATCH:
            log.warning(
                "webhook_amount_mismatch",
                expected=str(payment.amount),
                received=str(received_amount),
            )
            return WebhookOutcome.failed(
                f"Amount mismatch: expected {payment.amount}, received {received_amount}"
            ), None

        return WebhookOutcome.ignored(f"Unhandled processing result: {result.value}"), None

    def _notify(self, payment: Payment, log: FilteringBoundLogger) -> None:
        try:
            self._notification_sink.notify(payment)
        except Exception:
            # Payment is already settled; the provider must still get its ack.
            log.exception("webhook_notification_failed")

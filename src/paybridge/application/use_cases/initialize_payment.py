from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from paybridge.application.exceptions import DuplicatePaymentError, StalePaymentError
from paybridge.application.results import ErrorCode, Result
from paybridge.domain.entities import Payment
from paybridge.domain.exceptions import DomainException
from paybridge.domain.value_objects import CallbackUrl, EmailAddress, Money

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from paybridge.application.dtos import InitializePaymentRequest, PaymentInitResult
    from paybridge.application.gateway_registry import GatewayRegistry
    from paybridge.application.ports import (
        LockProvider,
        PaymentGateway,
        PaymentRepository,
        TimeProvider,
    )

logger = structlog.get_logger(__name__)


class InitializePaymentUseCase:
    """Orchestrates payment initialization.

    Responsibilities:
    - Idempotency FIRST: reuse the payment already recorded for
      (app_name, external_reference) instead of creating another
    - Validate input by building value objects and the Payment aggregate
    - Persist BEFORE calling the provider, so the provider never sees a
      reference that is not durably stored
    - Fail the payment when the provider call fails, so it does not stay
      PENDING forever, unless a webhook settled it while the provider call
      was in flight

    Every failure is returned as a Result; nothing is raised to the caller.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        payment_repository: PaymentRepository,
        gateways: GatewayRegistry,
        lock_provider: LockProvider,
    ) -> None:
        self._time_provider = time_provider
        self._payment_repo = payment_repository
        self._gateways = gateways
        self._lock_provider = lock_provider

    def execute(self, request: InitializePaymentRequest) -> Result[PaymentInitResult]:
        app_name = (request.app_name or "").strip()
        external_reference = (request.external_reference or "").strip()
        log = logger.bind(
            app_name=app_name,
            external_reference=external_reference,
            provider=request.provider.name,
        )

        # Step 1: Idempotency lookup
        try:
            existing = self._payment_repo.get_by_external_reference(app_name, external_reference)
        except Exception:
            log.exception("payment_lookup_failed")
            return Result.failure("Database lookup failed", ErrorCode.DATABASE_ERROR)

        if existing is not None:
            return self._handle_existing(existing, log)

        # Step 2: Validate and create
        try:
            payment = self._create_payment(request)
        except DomainException as e:
            log.info("payment_request_rejected", error_code=e.error_code, error=e.message)
            return Result.failure(e.message, e.error_code)

        log = log.bind(payment_reference=payment.reference.value)

        # Step 3: Persist before touching the provider
        try:
            self._payment_repo.add(payment)
            self._payment_repo.save()
        except DuplicatePaymentError:
            log.warning("payment_duplicate_key")
            return Result.failure(
                f"A payment already exists for {app_name}/{external_reference}",
                ErrorCode.DUPLICATE_KEY,
            )
        except Exception:
            log.exception("payment_save_failed")
            return Result.failure("Database save failed", ErrorCode.DATABASE_ERROR)

        log.info("payment_created", amount=str(payment.amount.amount), currency=payment.amount.currency)

        return self._initialize_with_gateway(payment, log)

    def _handle_existing(
        self, payment: Payment, log: FilteringBoundLogger
    ) -> Result[PaymentInitResult]:
        """Replay path for a caller that retries the same order."""
        log = log.bind(payment_reference=payment.reference.value)

        if payment.is_terminal:
            log.info("payment_already_settled", status=payment.status.value)
            return Result.failure(
                f"Payment {payment.reference.value} is already {payment.status.value}",
                ErrorCode.ALREADY_PROCESSED,
            )

        log.info("payment_reinitializing")
        return self._initialize_with_gateway(payment, log)

    def _create_payment(self, request: InitializePaymentRequest) -> Payment:
        return Payment.create(
            provider=request.provider,
            purpose=request.purpose,
            amount=Money.create(request.amount, request.currency),
            payer=EmailAddress.create(request.external_user_id),
            app_name=request.app_name,
            external_reference=request.external_reference,
            redirect_url=CallbackUrl.create(request.redirect_url),
            notification_url=CallbackUrl.create(request.notification_url),
            now=self._time_provider.now(),
        )

    def _initialize_with_gateway(
        self, payment: Payment, log: FilteringBoundLogger
    ) -> Result[PaymentInitResult]:
        gateway = self._gateways.get(payment.provider)
        if gateway is None:
            log.warning("payment_provider_unsupported")
            self._mark_initialization_failed(payment, log)
            return Result.failure(
                f"Provider {payment.provider.name} is not supported",
                ErrorCode.UNSUPPORTED_PROVIDER,
            )

        result = self._call_gateway(gateway, payment, log)
        if result.is_failure:
            log.warning(
                "payment_initialization_failed",
                error_code=result.error_code,
                error=result.error,
            )
            self._mark_initialization_failed(payment, log)
            return result

        log.info("payment_initialized")
        return result

    def _call_gateway(
        self, gateway: PaymentGateway, payment: Payment, log: FilteringBoundLogger
    ) -> Result[PaymentInitResult]:
        try:
            return gateway.initialize(payment)
        except Exception:
            log.exception("payment_gateway_raised")
            return Result.failure("Payment provider call failed", ErrorCode.GATEWAY_ERROR)

    def _mark_initialization_failed(self, payment: Payment, log: FilteringBoundLogger) -> None:
        """Best effort: a failure here is logged, the gateway error still wins.

        Runs under the same per-reference lock as webhook reconciliation. The
        tracked copy may predate a settlement; the repository refuses that
        stale write and the settled outcome stands.
        """
        with self._lock_provider.acquire(payment.reference.value):
            payment.mark_initialization_failed(self._time_provider.now())
            try:
                self._payment_repo.save()
            except StalePaymentError:
                log.info("payment_settled_concurrently")
            except Exception:
                log.exception("payment_mark_failed_save_failed")

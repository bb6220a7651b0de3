from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from paybridge.application.ports import NotificationSink

if TYPE_CHECKING:
    from paybridge.domain.entities import Payment

logger = structlog.get_logger(__name__)


def build_notification_body(payment: Payment) -> dict[str, Any]:
    """JSON body posted to the originating application's notification_url."""
    return {
        "paymentReference": payment.reference.value,
        "externalReference": payment.external_reference,
        "status": payment.status.value,
        "amount": str(payment.amount.amount),
    }


class HttpNotificationSink(NotificationSink):
    """Posts the payment outcome to payment.notification_url.

    Never raises: non-2xx responses, timeouts and transport errors are logged
    and dropped. Redelivery, if wanted, belongs to a separate retry process.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def notify(self, payment: Payment) -> None:
        log = logger.bind(
            payment_reference=payment.reference.value,
            url=payment.notification_url.value,
        )
        log.info("app_notification_sending")

        try:
            response = self._http.post(
                payment.notification_url.value, json=build_notification_body(payment)
            )
        except httpx.TimeoutException:
            log.error("app_notification_timeout")
            return
        except httpx.HTTPError:
            log.exception("app_notification_transport_error")
            return

        if response.is_success:
            log.info("app_notification_sent", status_code=response.status_code)
            return

        log.warning(
            "app_notification_rejected",
            status_code=response.status_code,
            body=response.text[:500],
        )

    def close(self) -> None:
        self._http.close()


class BackgroundNotificationSink(NotificationSink):
    """Runs another sink's notify() on a thread pool.

    notify() returns immediately, so the webhook acknowledgement never waits
    on the client application. Errors raised by the wrapped sink are logged
    from the worker thread.
    """

    def __init__(self, sink: NotificationSink, max_workers: int = 4) -> None:
        self._sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="paybridge-notify"
        )

    def notify(self, payment: Payment) -> None:
        future = self._executor.submit(self._sink.notify, payment)
        future.add_done_callback(
            lambda f: _log_failure(f, payment.reference.value)
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with wait=True, drain queued notifications first."""
        self._executor.shutdown(wait=wait)


def _log_failure(future: Future[None], payment_reference: str) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "app_notification_failed",
            payment_reference=payment_reference,
            error=str(exc),
            exc_info=exc,
        )

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

if TYPE_CHECKING:
    from types import TracebackType

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.paystack.co/"


class PaystackClient:
    """Thin HTTP client for the Paystack REST API.

    Returns raw httpx responses; interpreting status codes and bodies is the
    gateway's job. Transport errors (httpx.RequestError and subclasses)
    propagate.

    The underlying httpx.Client is safe to share between threads, so one
    client serves all requests for the life of the process.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {secret_key}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def initialize_transaction(self, payload: dict[str, Any]) -> httpx.Response:
        logger.debug("paystack_initialize_transaction", reference=payload.get("reference"))
        return self._http.post("transaction/initialize", json=payload)

    def verify_transaction(self, reference: str) -> httpx.Response:
        logger.debug("paystack_verify_transaction", reference=reference)
        return self._http.get(f"transaction/verify/{reference}")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> PaystackClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

"""Structured logging configuration.

Every module logs through ``structlog.get_logger(__name__)`` with snake_case
event names and key/value context (payment_reference, provider, error_code).
This module only wires the processors; call configure_logging() once at
process start.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from paybridge.config import Settings

SERVICE_NAME = "paybridge"


def add_service_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]  # noqa: ARG001
) -> dict[str, Any]:
    event_dict["service"] = SERVICE_NAME
    return event_dict


def configure_logging(settings: Settings) -> None:
    """Configure structlog on top of stdlib logging.

    JSON lines when settings.log_json is set, human-readable console output
    otherwise.
    """
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

"""
Structured logging setup using structlog.

Every event carries the service name; request events also carry the trace id
bound by the API middleware.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .settings import settings


def service_name_processor(service_name: str) -> Processor:
    """Processor adding service=<service_name> unless the event sets its own."""

    def add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def configure_logging(level: Optional[str] = None, service_name: Optional[str] = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        level: Log level override (default: SCENARIO_MATCHER_LOG_LEVEL)
        service_name: Service name override (default: SCENARIO_MATCHER_SERVICE_NAME)
    """
    log_level = getattr(logging, (level or settings.scenario_matcher_log_level).upper())

    structlog.configure(
        processors=[
            # trace_id and request fields live in contextvars and are cleared per request
            structlog.contextvars.merge_contextvars,
            service_name_processor(service_name or settings.scenario_matcher_service_name),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_trace_id(trace_id: str) -> None:
    """Start a fresh request context holding only the trace id."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()

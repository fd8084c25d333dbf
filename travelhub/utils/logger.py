"""Structured logging configuration using structlog.

Request and booking identifiers are carried in structlog contextvars, so every
line logged while serving a request names the request it belongs to.
"""

import logging
import sys
import uuid
from decimal import Decimal
from typing import Any, Literal

import structlog
from structlog.typing import Processor


def setup_logging(
    level: str = "INFO",
    format_type: Literal["json", "console"] = "console",
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_type: Output format - 'json' for production, 'console' for development
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if format_type == "json":
        # Production: JSON output, Decimal amounts rendered as strings
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.JSONRenderer(default=_json_default),
        ]
    else:
        # Development: Pretty console output
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.rich_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Also configure standard library logging (uvicorn, httpx)
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name (usually module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def bind_request_context(**values: Any) -> None:
    """
    Attach identifiers to every log line in the current context.

    Args:
        values: e.g. request_id, path, booking_code
    """
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def _json_default(value: object) -> str:
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)

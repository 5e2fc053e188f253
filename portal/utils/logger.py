"""Structured logging configuration."""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Optional

import structlog

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Return the request id bound to the current context, if any."""
    return _request_id.get()


def set_request_id(request_id: Optional[str]) -> None:
    _request_id.set(request_id)


def _add_request_id(logger: Any, method_name: str, event_dict: dict) -> dict:
    request_id = _request_id.get()
    if request_id and "request_id" not in event_dict:
        event_dict["request_id"] = request_id
    return event_dict


def configure_logging(log_level: str = "INFO", debug: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Debug mode renders human-readable console output; otherwise one JSON object
    per line.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer: Any = (
        structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _add_request_id,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Quiet noisy libraries
    for name in ("LiteLLM", "httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name)


def truncate(value: Any, max_length: int = 500) -> str:
    """Stringify and shorten a value for log output."""
    text = str(value)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... [{len(text) - max_length} more chars]"

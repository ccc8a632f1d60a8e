"""
Central logging configuration for ZinaSite.

Provides:
- Structured logging (JSON in production, human-readable in development)
- Log context carried in contextvars: the gateway request ID and the backend
  that serves the current data call
- Environment-aware log levels

Usage:
    from zinasite.logging_config import get_logger, log_context
    logger = get_logger(__name__)
    with log_context(backend="gateway"):
        logger.info("Fetched articles", extra={"resource": "articles", "count": 3})
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from pydantic_core import to_jsonable_python

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
backend_var: ContextVar[Optional[str]] = ContextVar("backend", default=None)

CONTEXT_VARS: Dict[str, ContextVar[Optional[str]]] = {
    "request_id": request_id_var,
    "backend": backend_var,
}

_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"} | set(CONTEXT_VARS)

# Client libraries under the hosted backend and the gateway that log every request
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "hpack", "postgrest", "supabase")


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, if set."""
    return request_id_var.get()


@contextmanager
def log_context(**values: Optional[str]) -> Iterator[None]:
    """
    Bind context fields (request_id, backend) for the enclosed block.

    Nested blocks override only the fields they name; everything is restored
    on exit.
    """
    tokens = [(CONTEXT_VARS[name], CONTEXT_VARS[name].set(value)) for name, value in values.items()]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class ContextFilter(logging.Filter):
    """Copies the bound context fields onto every record ("-" when unbound)."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in CONTEXT_VARS.items():
            setattr(record, name, var.get() or "-")
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_VARS:
            value = getattr(record, name, None)
            if value and value != "-":
                log_obj[name] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and value is not None
        }
        # Records and timestamps go through pydantic's encoder; the rest become strings
        log_obj.update(to_jsonable_python(extra, fallback=str))
        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s via=%(backend)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'development' or 'production'
        debug: If True, use DEBUG level regardless of log_level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = old_factory(*args, **kwargs)
        for name in CONTEXT_VARS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return record

    logging.setLogRecordFactory(record_factory)

    root = logging.getLogger()
    root.setLevel(level)

    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if environment == "production" else _create_dev_formatter())
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Logs include request_id and backend when bound. Use extra={} for structured fields:
        logger.warning("Table missing", extra={"resource": "events"})
    """
    return logging.getLogger(name)

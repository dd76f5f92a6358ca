"""Opt-in log output for the ``netdispatch`` logger namespace.

The library itself only emits records. Applications that want them rendered
with the bound request fields call ``configure_logging``, which touches the
``netdispatch`` logger alone and never the root logger.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

from . import fields
from .context import bind_context, get_context

LIBRARY_LOGGER = "netdispatch"

_INSTALLED_MARKER = "_netdispatch_handler"


class ContextFilter(logging.Filter):
    """Attach the current request fields to each record as ``record.context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    context = getattr(record, "context", None)
    return context if isinstance(context, dict) else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: core fields plus request fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **_record_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Text lines ending in sorted ``key=value`` request fields."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = " ".join(
            f"{key}={value}" for key, value in sorted(_record_context(record).items())
        )
        return f"{line} {pairs}" if pairs else line


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: IO[str] | None = None,
    propagate: bool = False,
) -> logging.Logger:
    """Attach one handler to the ``netdispatch`` logger and return that logger.

    Calling again replaces the handler installed by the previous call; other
    handlers, including the application's own, are left in place.
    """
    logger = logging.getLogger(LIBRARY_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, _INSTALLED_MARKER, False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    setattr(handler, _INSTALLED_MARKER, True)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = propagate

    bind_context(**{fields.SERVICE: service, fields.ENVIRONMENT: environment})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger using Python's standard logging hierarchy."""
    return logging.getLogger(name)

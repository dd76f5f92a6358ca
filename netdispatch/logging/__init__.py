"""Logging helpers for netdispatch.

Records are emitted under the ``netdispatch`` logger namespace and carry the
fields of the request in flight through ``log_context``.
"""

from .config import (
    LIBRARY_LOGGER,
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_logging,
    get_logger,
)
from .context import bind_context, get_context, log_context

__all__ = [
    "bind_context",
    "configure_logging",
    "ContextFilter",
    "get_context",
    "get_logger",
    "JsonFormatter",
    "LIBRARY_LOGGER",
    "log_context",
    "PlainFormatter",
]

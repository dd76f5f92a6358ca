"""Per-dispatch logging fields carried in a ``contextvars`` variable.

Every asyncio task runs with its own copy of the context, so fields bound
while one request is in flight never appear on another request's records.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

_FIELDS: ContextVar[Mapping[str, str]] = ContextVar(
    "netdispatch_log_fields", default=MappingProxyType({})
)


def _stringified(values: Mapping[str, object]) -> dict[str, str]:
    return {str(key): str(value) for key, value in values.items() if value is not None}


def get_context() -> dict[str, str]:
    """Return the fields bound in the current task."""
    return dict(_FIELDS.get())


def bind_context(**values: object) -> None:
    """Merge ``values`` into the current task's fields; ``None`` is skipped."""
    _FIELDS.set(MappingProxyType({**_FIELDS.get(), **_stringified(values)}))


@contextmanager
def log_context(
    values: Mapping[str, object] | None = None, **extra: object
) -> Iterator[dict[str, str]]:
    """Bind fields for the duration of a block and yield the merged view."""
    merged = {**_FIELDS.get(), **_stringified({**(values or {}), **extra})}
    token = _FIELDS.set(MappingProxyType(merged))
    try:
        yield dict(merged)
    finally:
        _FIELDS.reset(token)

"""Tests for library logging configuration and context propagation."""

from __future__ import annotations

import asyncio
import contextvars
import io
import json
import logging
from collections.abc import Iterator

import pytest

from netdispatch.logging import (
    LIBRARY_LOGGER,
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    bind_context,
    configure_logging,
    get_context,
    log_context,
)


@pytest.fixture(autouse=True)
def _restore_library_logger() -> Iterator[None]:
    logger = logging.getLogger(LIBRARY_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _isolated(func, *args, **kwargs):
    """Run ``func`` in a fresh copy of the current context."""
    return contextvars.copy_context().run(func, *args, **kwargs)


def _record(message: str) -> logging.LogRecord:
    record = logging.LogRecord(
        name="netdispatch.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    ContextFilter().filter(record)
    return record


def test_log_context_binds_and_restores_fields() -> None:
    """Scoped context should apply inside the block and reset after it."""

    def _check() -> None:
        bind_context(service="api")
        with log_context({"url": "https://api.example.test", "status_code": 404}):
            assert get_context() == {
                "service": "api",
                "url": "https://api.example.test",
                "status_code": "404",
            }
        assert get_context() == {"service": "api"}

    _isolated(_check)


def test_bind_context_skips_none_values() -> None:
    """``None`` values never become fields."""

    def _check() -> dict[str, str]:
        bind_context(url="u", error_kind=None, http_method="GET")
        return get_context()

    assert _isolated(_check) == {"url": "u", "http_method": "GET"}


def test_log_context_accepts_keyword_fields() -> None:
    """Fields may be passed as keywords alongside a mapping."""

    def _check() -> dict[str, str]:
        with log_context({"url": "u"}, status_code=200) as bound:
            return bound

    assert _isolated(_check) == {"url": "u", "status_code": "200"}


def test_json_formatter_includes_context_fields() -> None:
    """JSON log lines should carry the core fields plus bound context."""
    with log_context({"http_method": "POST", "status_code": 201}):
        record = _record("[201] Response from URL")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "netdispatch.test"
    assert payload["message"] == "[201] Response from URL"
    assert payload["http_method"] == "POST"
    assert payload["status_code"] == "201"


def test_plain_formatter_appends_sorted_context() -> None:
    """Plain log lines should end with sorted key=value context pairs."""
    with log_context({"url": "https://x.test", "http_method": "GET"}):
        record = _record("Request to URL")

    line = PlainFormatter().format(record)

    assert line.endswith("Request to URL http_method=GET url=https://x.test")


def test_configure_logging_leaves_root_logger_untouched() -> None:
    """Configuration attaches to the library logger and never to root."""
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level

    logger = _isolated(configure_logging, level="debug", stream=io.StringIO())

    assert logger.name == LIBRARY_LOGGER
    assert root.handlers == root_handlers
    assert root.level == root_level
    assert logger.propagate is False


def test_configure_logging_replaces_only_its_own_handler() -> None:
    """Repeated calls keep one installed handler beside the application's own."""
    logger = logging.getLogger(LIBRARY_LOGGER)
    own = logging.NullHandler()
    logger.addHandler(own)

    def _configure() -> None:
        configure_logging(level="debug", json_output=False, stream=io.StringIO())
        configure_logging(level="warning", json_output=True, stream=io.StringIO())

    _isolated(_configure)

    installed = [handler for handler in logger.handlers if handler is not own]
    assert own in logger.handlers
    assert len(installed) == 1
    assert isinstance(installed[0].formatter, JsonFormatter)
    assert logger.level == logging.WARNING


def test_configured_output_carries_service_and_request_fields() -> None:
    """Records below the library logger render with seeded and scoped fields."""
    stream = io.StringIO()

    def _emit() -> None:
        configure_logging(stream=stream, service="svc", environment="test")
        with log_context({"http_method": "GET", "url": "https://x.test/items"}):
            logging.getLogger("netdispatch.http.dispatcher").info("Request sent")

    _isolated(_emit)

    payload = json.loads(stream.getvalue().strip())
    assert payload["message"] == "Request sent"
    assert payload["logger"] == "netdispatch.http.dispatcher"
    assert payload["service"] == "svc"
    assert payload["environment"] == "test"
    assert payload["http_method"] == "GET"
    assert payload["url"] == "https://x.test/items"


def test_context_is_isolated_between_concurrent_tasks() -> None:
    """Fields bound in one task should not leak into another."""

    async def _task(name: str) -> dict[str, str]:
        with log_context({"url": name}):
            await asyncio.sleep(0)
            return get_context()

    async def _run() -> list[dict[str, str]]:
        return await asyncio.gather(_task("a"), _task("b"))

    assert asyncio.run(_run()) == [{"url": "a"}, {"url": "b"}]

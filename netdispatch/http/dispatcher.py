"""Execute wire messages over httpx and classify their outcome."""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import ValidationError

from netdispatch.codec import decode_json
from netdispatch.logging import fields, get_logger, log_context

from .errors import DecodingError, error_for_status, normalize_error
from .request import WireMessage

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 10.0


def default_http_client(
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    follow_redirects: bool = False,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the transport used when a dispatcher is given none."""
    return httpx.AsyncClient(
        timeout=timeout_seconds,
        headers=dict(headers or {}),
        follow_redirects=follow_redirects,
        transport=transport,
    )


def _status_code(response: object) -> int:
    """Return the response status, or 0 when it carries no valid metadata."""
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        return status_code
    return 0


class Dispatcher:
    """Send one wire message and return its decoded body or raise ``RequestError``.

    Holds no per-call state, so one instance serves any number of concurrent
    dispatches.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        follow_redirects: bool = False,
        headers: dict[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create a dispatcher over an injected or freshly built ``httpx.AsyncClient``."""
        self._owns_client = client is None
        self._client = client or default_http_client(
            timeout_seconds=timeout_seconds,
            follow_redirects=follow_redirects,
            headers=headers,
            transport=transport,
        )
        self._logger = logger or get_logger(__name__)

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Transport handle shared by every dispatch."""
        return self._client

    @property
    def logger(self) -> logging.Logger:
        """Logger receiving request/response diagnostics."""
        return self._logger

    async def aclose(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Dispatcher:
        """Enter async context manager scope."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Exit async context manager scope and close client."""
        await self.aclose()

    async def dispatch(self, message: WireMessage, response_shape: type[T]) -> T:
        """Execute ``message`` and decode a 2xx body into ``response_shape``.

        Raises exactly one ``RequestError`` subclass on any failure. Nothing is
        retried.
        """
        with log_context(
            {fields.HTTP_METHOD: message.method.value, fields.URL: str(message.url)}
        ):
            self._logger.info(
                "[%s] Request to URL: %s", message.method.value, message.url
            )
            try:
                return await self._execute(message, response_shape)
            except Exception as exc:
                error = normalize_error(exc)
                with log_context({fields.ERROR_KIND: error.kind.value}):
                    self._logger.error("Error occurred: %s", error.message)
                if error is exc:
                    raise
                raise error from exc

    async def _execute(self, message: WireMessage, response_shape: type[T]) -> T:
        request = self._client.build_request(
            message.method.value,
            message.url,
            headers=dict(message.headers),
            content=message.content,
        )
        response = await self._client.send(request)
        status_code = _status_code(response)

        with log_context({fields.STATUS_CODE: status_code}):
            self._logger.info("[%s] Response from URL: %s", status_code, message.url)
            if not 200 <= status_code <= 299:
                error = error_for_status(status_code)
                self._logger.error(
                    "[%s] %s (%s)", status_code, error.message, message.url
                )
                raise error

        return _decode_body(response.content, response_shape)


def _decode_body(content: bytes, response_shape: type[T]) -> T:
    """Decode a success body into its shape; ``bytes`` passes through untouched."""
    try:
        return decode_json(content, response_shape)
    except ValidationError as exc:
        raise DecodingError(detail=_validation_summary(exc)) from exc


def _validation_summary(exc: ValidationError) -> str:
    """Render a pydantic validation failure as one readable line."""
    parts: list[str] = []
    for item in exc.errors(include_url=False):
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts) or str(exc)


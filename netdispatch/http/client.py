"""Client facade binding a base URL to a dispatcher."""

from __future__ import annotations

import logging
from typing import TypeVar

from netdispatch.config import ClientSettings
from netdispatch.logging import get_logger

from .dispatcher import Dispatcher
from .errors import RequestError, normalize_error
from .request import RequestDescriptor, resolve_request

T = TypeVar("T")


class Client:
    """Resolve request descriptors against one base URL and dispatch them."""

    def __init__(
        self,
        base_url: str,
        dispatcher: Dispatcher | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create a client; a default dispatcher is built when none is given."""
        self._base_url = base_url
        self._logger = logger or get_logger(__name__)
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or Dispatcher(logger=self._logger)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        logger: logging.Logger | None = None,
    ) -> Client:
        """Build a client and its owned transport from ``ClientSettings``."""
        dispatcher = Dispatcher(
            timeout_seconds=settings.timeout_seconds,
            follow_redirects=settings.follow_redirects,
            headers=settings.headers,
            logger=logger,
        )
        client = cls(settings.base_url, dispatcher, logger=logger)
        client._owns_dispatcher = True
        return client

    @property
    def base_url(self) -> str:
        """Base URL every descriptor path is appended to."""
        return self._base_url

    @property
    def dispatcher(self) -> Dispatcher:
        """Dispatcher executing resolved messages."""
        return self._dispatcher

    async def aclose(self) -> None:
        """Close the dispatcher when this client created it."""
        if self._owns_dispatcher:
            await self._dispatcher.aclose()

    async def __aenter__(self) -> Client:
        """Enter async context manager scope."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Exit async context manager scope and close owned resources."""
        await self.aclose()

    async def dispatch(self, request: RequestDescriptor[T]) -> T:
        """Resolve, send, and decode one request.

        Returns a value of ``request.response_shape`` or raises a
        ``RequestError``. Resolution failures are raised before the dispatcher
        or the network is involved.
        """
        try:
            message = resolve_request(request, self._base_url, logger=self._logger)
            return await self._dispatcher.dispatch(message, request.response_shape)
        except RequestError:
            raise
        except Exception as exc:
            raise normalize_error(exc) from exc

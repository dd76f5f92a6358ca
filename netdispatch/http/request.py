"""Request descriptors and their conversion into wire messages.

A descriptor says *what* to request: path, method, headers, query
parameters, body, and the shape the decoded response must take. Resolving it
against a base URL yields a ``WireMessage`` ready for the transport.
Resolution is a pure function of descriptor and base URL; it only logs.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol, TypeVar, Union

import httpx
from pydantic_core import PydanticSerializationError

from netdispatch.codec import encode_json
from netdispatch.logging import get_logger

from .errors import InvalidRequestError, RequestEncodingError
from .methods import HttpMethod

ResponseT = TypeVar("ResponseT")

QueryValue = Union[str, int, float, bool, None]

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {"Content-Type": "application/json"}
)

_ALLOWED_SCHEMES = frozenset({"http", "https"})

# RFC 3986 unreserved, reserved, and percent characters.
_URL_CHARACTERS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_HOST_LABEL = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class WireMessage:
    """One fully resolved HTTP request."""

    method: HttpMethod
    url: httpx.URL
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes | None = None


class RequestDescriptor(Protocol[ResponseT]):
    """Description of one logical HTTP call and its expected response shape.

    Classes that subclass this protocol explicitly inherit the defaults below
    and ``as_wire_message``. Structural implementers must provide every
    attribute and are resolved with ``resolve_request``.
    """

    path: str
    response_shape: type[ResponseT]
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] | None = DEFAULT_HEADERS
    query_params: Mapping[str, QueryValue] | None = None
    body: Any | None = None

    def as_wire_message(self, base_url: str) -> WireMessage:
        """Resolve this descriptor against ``base_url``."""
        return resolve_request(self, base_url)


@dataclass(frozen=True)
class RequestRouter(RequestDescriptor[ResponseT]):
    """Field-driven descriptor, so endpoints need no dedicated class."""

    path: str
    response_shape: type[ResponseT]
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] | None = field(
        default_factory=lambda: dict(DEFAULT_HEADERS)
    )
    query_params: Mapping[str, QueryValue] | None = None
    body: Any | None = None

    @classmethod
    def get(
        cls,
        path: str,
        response_shape: type[ResponseT],
        *,
        query_params: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestRouter[ResponseT]:
        """Build one GET descriptor."""
        return cls._build(
            HttpMethod.GET, path, response_shape, headers, query_params, None
        )

    @classmethod
    def post(
        cls,
        path: str,
        response_shape: type[ResponseT],
        *,
        body: Any | None = None,
        query_params: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestRouter[ResponseT]:
        """Build one POST descriptor."""
        return cls._build(
            HttpMethod.POST, path, response_shape, headers, query_params, body
        )

    @classmethod
    def put(
        cls,
        path: str,
        response_shape: type[ResponseT],
        *,
        body: Any | None = None,
        query_params: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestRouter[ResponseT]:
        """Build one PUT descriptor."""
        return cls._build(
            HttpMethod.PUT, path, response_shape, headers, query_params, body
        )

    @classmethod
    def delete(
        cls,
        path: str,
        response_shape: type[ResponseT],
        *,
        query_params: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestRouter[ResponseT]:
        """Build one DELETE descriptor."""
        return cls._build(
            HttpMethod.DELETE, path, response_shape, headers, query_params, None
        )

    @classmethod
    def _build(
        cls,
        method: HttpMethod,
        path: str,
        response_shape: type[ResponseT],
        headers: Mapping[str, str] | None,
        query_params: Mapping[str, QueryValue] | None,
        body: Any | None,
    ) -> RequestRouter[ResponseT]:
        return cls(
            path=path,
            response_shape=response_shape,
            method=method,
            headers=dict(DEFAULT_HEADERS) if headers is None else dict(headers),
            query_params=query_params,
            body=body,
        )


def resolve_request(
    descriptor: RequestDescriptor[Any],
    base_url: str,
    *,
    logger: logging.Logger | None = None,
) -> WireMessage:
    """Convert ``descriptor`` into a wire message rooted at ``base_url``.

    Raises ``InvalidRequestError`` when base URL, path, and query items do not
    form an absolute http(s) URL, and ``RequestEncodingError`` when the body
    has no JSON representation. Neither touches the network.
    """
    log = logger or _LOGGER
    url = _build_url(base_url, descriptor.path, descriptor.query_params)
    headers = dict(descriptor.headers or {})

    log.info("Request URL: %s", url)
    log.info("Request Headers: %s", headers or "None")

    content: bytes | None = None
    if descriptor.body is not None:
        try:
            content = encode_json(descriptor.body)
        except (PydanticSerializationError, ValueError) as exc:
            log.error("Error encoding body: %s", exc)
            raise RequestEncodingError(detail=str(exc)) from exc
        log.info("Request Body: %s", content.decode("utf-8", errors="replace"))

    try:
        method = HttpMethod(descriptor.method)
    except ValueError as exc:
        raise InvalidRequestError(
            message=f"Invalid request: unsupported method {descriptor.method!r}."
        ) from exc

    return WireMessage(
        method=method,
        url=url,
        headers=headers,
        content=content,
    )


def _build_url(
    base_url: str,
    path: str,
    query_params: Mapping[str, QueryValue] | None,
) -> httpx.URL:
    """Join base URL and path, then append query items in insertion order."""
    raw = base_url + path
    if not _URL_CHARACTERS.fullmatch(raw) or _BAD_PERCENT_ESCAPE.search(raw):
        raise InvalidRequestError()

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidRequestError() from exc

    if url.scheme not in _ALLOWED_SCHEMES or not _is_valid_host(url.raw_host):
        raise InvalidRequestError()

    if not query_params:
        return url

    for name, value in query_params.items():
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise InvalidRequestError(
                message=f"Invalid request: query parameter {name!r} "
                f"has unsupported type {type(value).__name__}."
            )
    try:
        return url.copy_merge_params(dict(query_params))
    except httpx.InvalidURL as exc:
        raise InvalidRequestError() from exc


def _is_valid_host(raw_host: bytes) -> bool:
    """Accept IP literals and dotted DNS names of LDH labels."""
    host = raw_host.decode("ascii", errors="replace").strip("[]")
    if not host:
        return False
    try:
        ipaddress.ip_address(host)
    except ValueError:
        labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
        return all(_HOST_LABEL.fullmatch(label) for label in labels)
    return True

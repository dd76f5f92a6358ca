"""Typed HTTP request dispatch over httpx."""

from .client import Client
from .dispatcher import DEFAULT_TIMEOUT_SECONDS, Dispatcher, default_http_client
from .errors import (
    BadRequestError,
    ClientStatusError,
    DecodingError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    RequestEncodingError,
    RequestError,
    RequestErrorKind,
    RequestTimeoutError,
    ServerError,
    ServerStatusError,
    TransportFailedError,
    UnauthorizedError,
    UnknownRequestError,
    error_for_status,
    normalize_error,
)
from .methods import HttpMethod
from .request import (
    DEFAULT_HEADERS,
    QueryValue,
    RequestDescriptor,
    RequestRouter,
    WireMessage,
    resolve_request,
)

__all__ = [
    "BadRequestError",
    "Client",
    "ClientStatusError",
    "DecodingError",
    "DEFAULT_HEADERS",
    "DEFAULT_TIMEOUT_SECONDS",
    "default_http_client",
    "Dispatcher",
    "error_for_status",
    "ForbiddenError",
    "HttpMethod",
    "InvalidRequestError",
    "normalize_error",
    "NotFoundError",
    "QueryValue",
    "RequestDescriptor",
    "RequestEncodingError",
    "RequestError",
    "RequestErrorKind",
    "RequestRouter",
    "RequestTimeoutError",
    "resolve_request",
    "ServerError",
    "ServerStatusError",
    "TransportFailedError",
    "UnauthorizedError",
    "UnknownRequestError",
    "WireMessage",
]

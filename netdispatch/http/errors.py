"""Typed error taxonomy for request dispatch.

Every failure of the resolve/send/classify/decode pipeline surfaces to
callers as exactly one ``RequestError`` subclass. Each subclass carries a
ready-to-display ``message`` and only the data its kind needs.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass
from enum import Enum
from typing import ClassVar

import httpx


class RequestErrorKind(str, Enum):
    """Stable names for each failure kind, suitable for branching and logs."""

    INVALID_REQUEST = "invalid_request"
    ENCODING_ERROR = "encoding_error"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    SERVER_STATUS_ERROR = "server_status_error"
    DECODING_ERROR = "decoding_error"
    TRANSPORT_FAILED = "transport_failed"
    TIMEOUT = "timeout"
    UNKNOWN_ERROR = "unknown_error"


@dataclass(eq=False)
class RequestError(Exception):
    """Base error type for every dispatch failure."""

    message: str = "Unknown error occurred."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.UNKNOWN_ERROR

    def __setattr__(self, name: str, value: object) -> None:
        # Fields are write-once; dunders such as __traceback__ stay assignable.
        if name in self.__dataclass_fields__ and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.message

    @property
    def description(self) -> str:
        """Return the display text for this failure."""
        return self.message


@dataclass(eq=False)
class InvalidRequestError(RequestError):
    """Base URL, path, or query items do not form a valid absolute URL."""

    message: str = "Invalid request."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.INVALID_REQUEST


@dataclass(eq=False)
class RequestEncodingError(RequestError):
    """Request body could not be serialized to JSON."""

    message: str = ""
    detail: str = ""

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.ENCODING_ERROR

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", f"Encoding error: {self.detail}")


@dataclass(eq=False)
class BadRequestError(RequestError):
    """HTTP 400."""

    message: str = "Bad request."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.BAD_REQUEST


@dataclass(eq=False)
class UnauthorizedError(RequestError):
    """HTTP 401."""

    message: str = "Unauthorized access."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.UNAUTHORIZED


@dataclass(eq=False)
class ForbiddenError(RequestError):
    """HTTP 403."""

    message: str = "Forbidden access."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.FORBIDDEN


@dataclass(eq=False)
class NotFoundError(RequestError):
    """HTTP 404."""

    message: str = "Resource not found."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.NOT_FOUND


@dataclass(eq=False)
class ClientStatusError(RequestError):
    """HTTP 402 or 405-499."""

    message: str = ""
    status_code: int = 0

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.CLIENT_ERROR

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", f"Client error: {self.status_code}")


@dataclass(eq=False)
class ServerError(RequestError):
    """HTTP 500."""

    message: str = "Server error."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.SERVER_ERROR


@dataclass(eq=False)
class ServerStatusError(RequestError):
    """HTTP 501-599."""

    message: str = ""
    status_code: int = 0

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.SERVER_STATUS_ERROR

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", f"Server error: {self.status_code}")


@dataclass(eq=False)
class DecodingError(RequestError):
    """Successful response body did not parse into the expected shape."""

    message: str = ""
    detail: str = ""

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.DECODING_ERROR

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", f"Decoding error: {self.detail}")


@dataclass(eq=False)
class TransportFailedError(RequestError):
    """Transport raised before producing a response (DNS, TLS, refused, timeout)."""

    message: str = ""
    cause: Exception | None = None

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.TRANSPORT_FAILED

    def __post_init__(self) -> None:
        if not self.message:
            detail = str(self.cause) if self.cause is not None else "no detail"
            object.__setattr__(self, "message", f"Transport failed: {detail}")


@dataclass(eq=False)
class RequestTimeoutError(RequestError):
    """Explicit timeout signal; transport timeouts surface as transport failures."""

    message: str = "Request timed out."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.TIMEOUT


@dataclass(eq=False)
class UnknownRequestError(RequestError):
    """Status outside every known range, or an unrecognized failure."""

    message: str = "Unknown error occurred."

    kind: ClassVar[RequestErrorKind] = RequestErrorKind.UNKNOWN_ERROR


def error_for_status(status_code: int) -> RequestError:
    """Map one non-success status code to its typed error.

    Code ``0`` stands for a response without valid HTTP metadata.
    """
    if status_code == 400:
        return BadRequestError()
    if status_code == 401:
        return UnauthorizedError()
    if status_code == 403:
        return ForbiddenError()
    if status_code == 404:
        return NotFoundError()
    if status_code == 402 or 405 <= status_code <= 499:
        return ClientStatusError(status_code=status_code)
    if status_code == 500:
        return ServerError()
    if 501 <= status_code <= 599:
        return ServerStatusError(status_code=status_code)
    return UnknownRequestError()


def normalize_error(exc: BaseException) -> RequestError:
    """Collapse any exception into the ``RequestError`` taxonomy."""
    if isinstance(exc, RequestError):
        return exc
    if isinstance(exc, httpx.RequestError):
        return TransportFailedError(cause=exc)
    return UnknownRequestError()

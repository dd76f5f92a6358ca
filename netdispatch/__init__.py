"""Typed client-side HTTP request dispatch."""

from .http import (
    Client,
    Dispatcher,
    HttpMethod,
    RequestDescriptor,
    RequestError,
    RequestRouter,
    WireMessage,
)

__all__ = [
    "Client",
    "Dispatcher",
    "HttpMethod",
    "RequestDescriptor",
    "RequestError",
    "RequestRouter",
    "WireMessage",
]

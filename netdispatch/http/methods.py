"""HTTP verbs supported by request descriptors."""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    """Closed set of request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

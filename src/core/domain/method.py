"""HTTP methods accepted in request files.

Keeping the enum in the domain layer lets the parser, the runner and the
echo server share a single source of truth.
"""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    """Request methods a request file may use."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def parse(cls, value: str) -> "HttpMethod | None":
        """Case-insensitive lookup; `None` when the token is not a method."""

        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    def allows_body(self) -> bool:
        return self not in (HttpMethod.HEAD, HttpMethod.TRACE)

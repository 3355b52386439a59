"""Contract for sending parsed requests.

Why Protocol:
- Structural typing (duck typing) without rigid inheritance.
- Lets the runner use httpx in production and an in-memory stub in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from core.domain.models import HttpRequestSpec


@dataclass(frozen=True)
class RawResponse:
    """Transport-neutral view of a fully read response."""

    status_code: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@runtime_checkable
class RequestSender(Protocol):
    """Minimal contract for a request transport.

    Design rules:
    - `send` blocks until the whole body has been read.
    - Transport failures raise `SendRequestError`, body failures `ResponseBodyError`.
    """

    def send(self, request: HttpRequestSpec) -> RawResponse:
        """Send `request` and return the fully read response."""

        ...

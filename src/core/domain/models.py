"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- Free JSON serialization for run reports.

Note:
- These models describe *what* a request or a result is, not *how* it is sent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from core.domain.method import HttpMethod


class HttpRequestSpec(BaseModel):
    """A single request parsed from a request file."""

    name: str | None = Field(
        default=None,
        description="Name written after the `###` separator, if any.",
    )
    method: HttpMethod = Field(
        ...,
        description="Request method.",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="Absolute http(s) URL, placeholders already resolved.",
    )
    http_version: str | None = Field(
        default=None,
        description="Protocol token from the request line (e.g. 'HTTP/1.1'), informational.",
    )
    headers: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Headers in file order; duplicates are kept.",
    )
    body: bytes | None = Field(
        default=None,
        description="Request body, with `< file` includes already expanded.",
    )
    line_number: int = Field(
        default=1,
        ge=1,
        description="1-based line of the request line in the source file.",
    )

    def header(self, name: str) -> str | None:
        """First value of header `name` (case-insensitive)."""

        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None


class ResponseSummary(BaseModel):
    """What the runner observed for one request."""

    request_name: str | None = Field(default=None)
    method: HttpMethod = Field(...)
    url: str = Field(...)
    status_code: int = Field(..., ge=100, le=999)
    reason: str = Field(default="")
    elapsed_ms: float = Field(
        ...,
        ge=0,
        description="Wall time from send to the full body being read.",
    )
    content_length: int = Field(
        ...,
        ge=0,
        description="Content-Length header value, else the body size.",
    )
    content_type: str | None = Field(default=None)
    headers: dict[str, str] = Field(default_factory=dict)
    saved_to: Path | None = Field(
        default=None,
        description="Where the body was written, when it was saved.",
    )

    def summary_line(self) -> str:
        seconds = self.elapsed_ms / 1000.0
        status = f"{self.status_code} {self.reason}".strip()
        return (
            f"Response code: {status}; "
            f"Time: {int(self.elapsed_ms)}ms ({seconds:.6f}s); "
            f"Content length: {self.content_length} bytes "
            f"({self.content_length / 1_000_000:.2f} MB)"
        )


class RunReport(BaseModel):
    """Aggregate of one `httper send` invocation."""

    source_file: Path = Field(...)
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    requests: list[HttpRequestSpec] = Field(default_factory=list)
    results: list[ResponseSummary] = Field(default_factory=list)

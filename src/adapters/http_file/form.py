"""Body helpers for form and multipart payloads."""

from __future__ import annotations

from typing import Iterable

FORM_URLENCODED = "application/x-www-form-urlencoded"


def media_type(content_type: str | None) -> str:
    """`text/html; charset=utf-8` -> `text/html` (lowercased)."""

    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_form_urlencoded(content_type: str | None) -> bool:
    return media_type(content_type) == FORM_URLENCODED


def is_multipart(content_type: str | None) -> bool:
    return media_type(content_type).startswith("multipart/")


def join_form_lines(lines: Iterable[str]) -> str:
    """Join a multi-line form body into a single `a=1&b=2` string.

    Each line may start with `&`; blank lines are ignored.
    """

    fields: list[str] = []
    for raw in lines:
        line = raw.strip().lstrip("&").strip()
        if line:
            fields.append(line)
    return "&".join(fields)

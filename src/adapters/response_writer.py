"""Saves response bodies to disk based on their Content-Type.

Rules:
- Generic types (octet-stream, plain UTF-8 text) are not saved.
- The extension comes from the MIME type; unknown types are not saved.
- Write failures are logged, never raised: saving is a side effect of a run.
"""

from __future__ import annotations

import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_GENERIC_TYPES = ("application/octet-stream", "text/plain")


def parse_content_type(value: str) -> tuple[str, dict[str, str]]:
    """`text/plain; charset=UTF-8` -> ("text/plain", {"charset": "utf-8"})."""

    media, _, rest = value.partition(";")
    params: dict[str, str] = {}
    for item in rest.split(";"):
        key, sep, param = item.partition("=")
        if sep and key.strip():
            params[key.strip().lower()] = param.strip().strip('"').lower()
    return media.strip().lower(), params


def savable_media_type(content_type: str | None) -> str | None:
    """Media type worth saving, or `None` for missing/generic/malformed values."""

    if not content_type:
        return None
    media, params = parse_content_type(content_type)
    if "/" not in media:
        return None
    if media == "application/octet-stream":
        return None
    if media == "text/plain" and params.get("charset", "utf-8") == "utf-8":
        return None
    return media


def extension_for(media_type: str) -> str | None:
    ext = mimetypes.guess_extension(media_type, strict=False)
    if not ext:
        return None
    return ext.lstrip(".")


def default_filename(extension: str, *, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"response-{now.strftime('%Y-%m-%dT%H%M%SZ')}.{extension}"


def save_response_body(
    *,
    content: bytes,
    content_type: str | None,
    output: Path | None = None,
    directory: Path | None = None,
    now: datetime | None = None,
) -> Path | None:
    """Write `content` when its type warrants it; return the path written."""

    media = savable_media_type(content_type)
    if media is None:
        return None
    extension = extension_for(media)
    if extension is None:
        logger.debug("No file extension known for %s; body not saved", media)
        return None

    if output is not None:
        target = output
    else:
        target = (directory or Path.cwd()) / default_filename(extension, now=now)

    try:
        target.write_bytes(content)
    except OSError as exc:
        logger.error("Failed to write response to file %s: %s", target, exc)
        return None
    return target

"""Reads request files from disk.

`< file` includes are resolved relative to the directory of the request file,
not the current working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from adapters.http_file.parser import parse_requests
from core.domain.models import HttpRequestSpec


def load_request_file(
    path: Path,
    *,
    variables: Mapping[str, str] | None = None,
) -> list[HttpRequestSpec]:
    raw = path.read_text(encoding="utf-8")
    base_dir = path.resolve().parent
    return parse_requests(raw, base_dir=base_dir, variables=variables)

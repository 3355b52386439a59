"""Parser for `.http` request files.

Format (subset of the JetBrains/VS Code REST client syntax):

    @host = localhost:8080

    ### create item
    POST https://{{host}}/items HTTP/1.1
    Content-Type: application/json

    < ./payload.json

Rules:
- `###` starts a new request; text after it is the request name.
- `#` and `//` lines are comments until the request line, and inside headers.
- First remaining line is `METHOD URL [HTTP/x.y]`, then headers until a blank
  line, then the body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping
from urllib.parse import urlsplit

from adapters.http_file.form import is_form_urlencoded, is_multipart, join_form_lines
from adapters.http_file.variables import VariableResolver, parse_definition
from core.domain.method import HttpMethod
from core.domain.models import HttpRequestSpec
from core.errors import (
    BodyFileError,
    EmptyRequestError,
    InvalidHeaderError,
    InvalidMethodError,
    InvalidUrlError,
    NoRequestLineError,
    NotEnoughPartsError,
)

logger = logging.getLogger(__name__)

SEPARATOR = "###"
_COMMENT_PREFIXES = ("#", "//")
_FILE_INCLUDE = "< "


@dataclass
class _Block:
    name: str | None
    lines: list[tuple[int, str]] = field(default_factory=list)


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT_PREFIXES)


def split_blocks(content: str) -> list[_Block]:
    """Split file content on `###` lines, keeping 1-based line numbers."""

    blocks = [_Block(name=None)]
    for number, line in enumerate(content.splitlines(), start=1):
        if line.startswith(SEPARATOR):
            name = line[len(SEPARATOR):].strip() or None
            blocks.append(_Block(name=name))
            continue
        blocks[-1].lines.append((number, line))
    return blocks


def validate_url(url: str) -> None:
    try:
        parts = urlsplit(url)
        # Accessing `port` validates it.
        _ = parts.port
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    if not parts.scheme:
        raise InvalidUrlError(url, "relative URL without a base")
    if parts.scheme.lower() not in ("http", "https"):
        raise InvalidUrlError(url, f"unsupported scheme '{parts.scheme}'")
    if not parts.hostname:
        raise InvalidUrlError(url, "empty host")


def parse_request_line(line: str) -> tuple[HttpMethod, str, str | None]:
    parts = line.split()
    if len(parts) < 2:
        raise NotEnoughPartsError(line.strip())

    method = HttpMethod.parse(parts[0])
    if method is None:
        raise InvalidMethodError(parts[0])

    if len(parts) > 3:
        url = " ".join(parts[1:])
        raise InvalidUrlError(url, "URL must not contain whitespace")

    url = parts[1]
    validate_url(url)
    version = parts[2] if len(parts) == 3 else None
    return method, url, version


def parse_header(line: str) -> tuple[str, str]:
    if ":" not in line:
        raise InvalidHeaderError(line.strip())
    name, value = line.split(":", 1)
    name = name.strip()
    if not name or any(ch.isspace() for ch in name):
        raise InvalidHeaderError(line.strip())
    return name, value.strip()


def _read_include(raw_path: str, base_dir: Path) -> bytes:
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    try:
        return path.read_bytes()
    except OSError as exc:
        raise BodyFileError(raw_path, exc) from exc


def build_body(
    lines: list[str],
    *,
    content_type: str | None,
    base_dir: Path,
    resolver: VariableResolver,
) -> bytes | None:
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    if not lines:
        return None

    if is_form_urlencoded(content_type):
        return resolver.resolve(join_form_lines(lines)).encode("utf-8")

    newline = b"\r\n" if is_multipart(content_type) else b"\n"
    chunks: list[bytes] = []
    for line in lines:
        if line.startswith(_FILE_INCLUDE):
            chunks.append(_read_include(resolver.resolve(line[len(_FILE_INCLUDE):].strip()), base_dir))
        else:
            chunks.append(resolver.resolve(line).encode("utf-8"))
    return newline.join(chunks)


def _parse_block(block: _Block, *, base_dir: Path, resolver: VariableResolver) -> HttpRequestSpec | None:
    lines = block.lines
    index = 0

    # Preamble: blanks, comments and variable definitions.
    while index < len(lines):
        _, text = lines[index]
        if not text.strip() or _is_comment(text):
            index += 1
            continue
        definition = parse_definition(text)
        if definition is not None:
            resolver.define(*definition)
            index += 1
            continue
        break
    else:
        return None

    line_number, request_line = lines[index]
    method, url, version = parse_request_line(resolver.resolve(request_line))
    index += 1

    headers: list[tuple[str, str]] = []
    while index < len(lines):
        _, text = lines[index]
        index += 1
        if not text.strip():
            break
        if _is_comment(text):
            continue
        headers.append(parse_header(resolver.resolve(text)))

    content_type = next((value for name, value in headers if name.lower() == "content-type"), None)
    body = build_body(
        [text for _, text in lines[index:]],
        content_type=content_type,
        base_dir=base_dir,
        resolver=resolver,
    )
    if body is not None and not method.allows_body():
        logger.warning("Line %d: %s request carries a body", line_number, method.value)

    return HttpRequestSpec(
        name=block.name,
        method=method,
        url=url,
        http_version=version,
        headers=headers,
        body=body,
        line_number=line_number,
    )


def parse_requests(
    content: str,
    *,
    base_dir: Path,
    variables: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[HttpRequestSpec]:
    """Parse every request in `content`.

    Raises:
        EmptyRequestError: content is blank.
        NoRequestLineError: no block contains a request line.
    """

    if not content.strip():
        raise EmptyRequestError()

    resolver = VariableResolver(overrides=variables, environ=environ)
    requests: list[HttpRequestSpec] = []
    for block in split_blocks(content):
        request = _parse_block(block, base_dir=base_dir, resolver=resolver)
        if request is not None:
            requests.append(request)

    if not requests:
        raise NoRequestLineError()
    logger.debug("Parsed %d request(s)", len(requests))
    return requests

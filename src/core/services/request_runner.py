"""Request file execution.

This module owns the send/measure/save loop so the CLI only deals with
presentation. UI layers plug in through `RunHooks` (verbose printing,
progress) and tests through the `RequestSender` protocol.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

import httpx

from adapters.http_client import HttpxSender, build_client
from adapters.http_file import load_request_file
from adapters.response_writer import save_response_body
from core.config import AppSettings
from core.domain.models import HttpRequestSpec, ResponseSummary, RunReport
from core.interfaces.sender import RawResponse, RequestSender

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Where response bodies go."""

    output: Path | None = None
    save_dir: Path | None = None
    variables: Mapping[str, str] = field(default_factory=dict)


@dataclass
class RunHooks:
    """Optional callbacks for UI layers."""

    before_send: Callable[[HttpRequestSpec], None] | None = None
    after_response: Callable[[ResponseSummary, bytes], None] | None = None


def content_length_of(raw: RawResponse) -> int:
    header = raw.header("Content-Length")
    if header is not None:
        try:
            return max(int(header), 0)
        except ValueError:
            logger.debug("Ignoring malformed Content-Length %r", header)
    return len(raw.content)


def summarize(
    request: HttpRequestSpec,
    raw: RawResponse,
    *,
    elapsed_ms: float,
    saved_to: Path | None = None,
) -> ResponseSummary:
    return ResponseSummary(
        request_name=request.name,
        method=request.method,
        url=request.url,
        status_code=raw.status_code,
        reason=raw.reason,
        elapsed_ms=elapsed_ms,
        content_length=content_length_of(raw),
        content_type=raw.header("Content-Type"),
        headers=dict(raw.headers),
        saved_to=saved_to,
    )


def run_requests(
    *,
    requests: Sequence[HttpRequestSpec],
    sender: RequestSender,
    options: RunOptions | None = None,
    hooks: RunHooks | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> list[ResponseSummary]:
    """Send `requests` in order; the first failure stops the run."""

    options = options or RunOptions()
    hooks = hooks or RunHooks()

    results: list[ResponseSummary] = []
    for request in requests:
        if hooks.before_send:
            hooks.before_send(request)

        start = clock()
        raw = sender.send(request)
        elapsed_ms = max((clock() - start) * 1000.0, 0.0)

        saved_to = save_response_body(
            content=raw.content,
            content_type=raw.header("Content-Type"),
            output=options.output,
            directory=options.save_dir,
        )
        summary = summarize(request, raw, elapsed_ms=elapsed_ms, saved_to=saved_to)
        results.append(summary)

        if hooks.after_response:
            hooks.after_response(summary, raw.content)
    return results


def run_request_file(
    *,
    path: Path,
    settings: AppSettings,
    options: RunOptions | None = None,
    hooks: RunHooks | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RunReport:
    options = options or RunOptions()
    requests = load_request_file(path, variables=options.variables)
    report = RunReport(source_file=path, requests=requests)

    with build_client(settings, transport=transport) as client:
        report.results = run_requests(
            requests=requests,
            sender=HttpxSender(client),
            options=options,
            hooks=hooks,
        )
    return report

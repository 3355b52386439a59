"""
Tests for core.services.request_runner and adapters.http_client.

Transport is faked with httpx.MockTransport or an in-memory RequestSender.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest

from adapters.http_client import HttpxSender, build_client
from adapters.json_exporter import export_run_report
from core.config import AppSettings
from core.domain.method import HttpMethod
from core.domain.models import HttpRequestSpec, ResponseSummary
from core.errors import ResponseBodyError, SendRequestError
from core.interfaces.sender import RawResponse, RequestSender
from core.services.request_runner import (
    RunHooks,
    RunOptions,
    content_length_of,
    run_request_file,
    run_requests,
)


def _echo_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        content=request.content,
        headers={"Content-Type": request.headers.get("content-type", "application/octet-stream")},
    )


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "requests.http"
    path.write_text(content, encoding="utf-8")
    return path


class _StubSender(RequestSender):
    def __init__(self, response: RawResponse) -> None:
        self.response = response
        self.sent: list[HttpRequestSpec] = []

    def send(self, request: HttpRequestSpec) -> RawResponse:
        self.sent.append(request)
        return self.response


def _fake_clock(*values: float):
    ticks: Iterator[float] = iter(values)
    return lambda: next(ticks)


def test_summary_line_format() -> None:
    """Test the per-request summary line."""
    summary = ResponseSummary(
        method=HttpMethod.GET,
        url="http://a.test",
        status_code=200,
        reason="OK",
        elapsed_ms=1500.0,
        content_length=2_500_000,
    )
    assert summary.summary_line() == (
        "Response code: 200 OK; Time: 1500ms (1.500000s); "
        "Content length: 2500000 bytes (2.50 MB)"
    )


def test_run_requests_measures_and_prefers_content_length_header() -> None:
    """Test elapsed time and Content-Length come from the clock and header."""
    sender = _StubSender(RawResponse(200, "OK", {"Content-Length": "42"}, b"abc"))
    request = HttpRequestSpec(method=HttpMethod.GET, url="http://a.test")
    [summary] = run_requests(requests=[request], sender=sender, clock=_fake_clock(1.0, 1.25))
    assert summary.elapsed_ms == pytest.approx(250.0)
    assert summary.content_length == 42
    assert sender.sent == [request]


def test_content_length_falls_back_to_body_size() -> None:
    """Test malformed or missing Content-Length uses the body size."""
    assert content_length_of(RawResponse(200, headers={"content-length": "nope"}, content=b"abcd")) == 4
    assert content_length_of(RawResponse(200, content=b"ab")) == 2


def test_hooks_are_called_in_order() -> None:
    """Test before_send and after_response wrap each request."""
    events: list[str] = []
    hooks = RunHooks(
        before_send=lambda request: events.append(f"send {request.url}"),
        after_response=lambda summary, content: events.append(f"done {summary.status_code} {content!r}"),
    )
    sender = _StubSender(RawResponse(204, "No Content"))
    requests = [
        HttpRequestSpec(method=HttpMethod.GET, url="http://a.test/1"),
        HttpRequestSpec(method=HttpMethod.GET, url="http://a.test/2"),
    ]
    run_requests(requests=requests, sender=sender, hooks=hooks)
    assert events == [
        "send http://a.test/1",
        "done 204 b''",
        "send http://a.test/2",
        "done 204 b''",
    ]


def test_run_request_file_end_to_end(tmp_path: Path, settings: AppSettings) -> None:
    """Test parsing, sending, summarizing and saving typed bodies."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _echo_handler(request)

    path = _write(
        tmp_path,
        "### json\n"
        "POST http://echo.test/items\n"
        "Content-Type: application/json\n"
        "\n"
        '{"a": 1}\n'
        "### text\n"
        "POST http://echo.test/text\n"
        "Content-Type: text/plain\n"
        "User-Agent: custom/1.0\n"
        "\n"
        "hello\n",
    )
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    report = run_request_file(
        path=path,
        settings=settings,
        options=RunOptions(save_dir=out_dir),
        transport=httpx.MockTransport(handler),
    )

    assert [r.name for r in report.requests] == ["json", "text"]
    first, second = report.results
    assert first.status_code == 200
    assert first.reason == "OK"
    assert first.content_length == len(b'{"a": 1}')
    assert first.saved_to is not None
    assert first.saved_to.parent == out_dir
    assert first.saved_to.suffix == ".json"
    assert first.saved_to.read_bytes() == b'{"a": 1}'
    assert second.saved_to is None

    assert seen[0].headers["user-agent"] == settings.user_agent
    assert seen[1].headers["user-agent"] == "custom/1.0"


def test_transport_failure_stops_the_run(tmp_path: Path, settings: AppSettings) -> None:
    """Test a connection error raises SendRequestError and skips the rest."""
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        raise httpx.ConnectError("connection refused", request=request)

    path = _write(tmp_path, "GET http://down.test/1\n###\nGET http://down.test/2\n")
    with pytest.raises(SendRequestError, match="connection refused"):
        run_request_file(path=path, settings=settings, transport=httpx.MockTransport(handler))
    assert calls == ["http://down.test/1"]


class _BrokenStream(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        raise httpx.ReadError("stream reset")


def test_body_failure_raises_response_body_error(settings: AppSettings) -> None:
    """Test errors while reading the body raise ResponseBodyError."""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, stream=_BrokenStream()))
    with build_client(settings, transport=transport) as client:
        sender = HttpxSender(client)
        with pytest.raises(ResponseBodyError, match="stream reset"):
            sender.send(HttpRequestSpec(method=HttpMethod.GET, url="http://a.test"))


def test_redirects_are_not_followed(settings: AppSettings) -> None:
    """Test a 302 is reported as-is."""
    transport = httpx.MockTransport(
        lambda request: httpx.Response(302, headers={"Location": "http://elsewhere.test/"})
    )
    with build_client(settings, transport=transport) as client:
        raw = HttpxSender(client).send(HttpRequestSpec(method=HttpMethod.GET, url="http://a.test"))
    assert raw.status_code == 302
    assert raw.header("location") == "http://elsewhere.test/"


def test_export_run_report(tmp_path: Path, settings: AppSettings) -> None:
    """Test the JSON report keeps results and drops raw bodies."""
    path = _write(tmp_path, "POST http://echo.test/x\nContent-Type: text/plain\n\nhi\n")
    report = run_request_file(path=path, settings=settings, transport=httpx.MockTransport(_echo_handler))

    out = export_run_report(report=report, output_path=tmp_path / "reports" / "run.json")
    payload = json.loads(out.read_text(encoding="utf-8"))

    assert payload["source_file"] == str(path)
    assert "body" not in payload["requests"][0]
    assert payload["requests"][0]["body_size"] == 2
    assert payload["requests"][0]["method"] == "POST"
    assert payload["results"][0]["status_code"] == 200
    assert payload["results"][0]["saved_to"] is None


def test_non_standard_status_code_is_summarized(tmp_path: Path, settings: AppSettings) -> None:
    """Test codes outside the registry still produce a summary line."""
    path = _write(tmp_path, "GET http://odd.test/\n")
    report = run_request_file(
        path=path,
        settings=settings,
        transport=httpx.MockTransport(lambda request: httpx.Response(999)),
    )
    [summary] = report.results
    assert summary.status_code == 999
    assert summary.summary_line().startswith("Response code: 999;")

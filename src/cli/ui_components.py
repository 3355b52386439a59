"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets `send`, `serve` and `doctor` share panels and tables.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.http_file.form import media_type
from core.domain.models import HttpRequestSpec, ResponseSummary

SEPARATOR_WIDTH = 80


def print_banner(console: Console, *, address: str) -> None:
    """Welcome banner for the echo server."""

    title = Text("httper echo", style="bold cyan")
    subtitle = Text(f"Listening on {address}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _decode(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def print_request(console: Console, request: HttpRequestSpec) -> None:
    """Verbose view of an outgoing request, followed by a separator line."""

    line = f"{request.method.value} {request.url}"
    if request.http_version:
        line += f" {request.http_version}"
    console.print()
    if request.name:
        console.print(Text(f"### {request.name}", style="dim"))
    console.print(Text(line, style="bold"))
    for name, value in request.headers:
        console.print(Text(f"{name}: {value}"))
    if request.body is not None:
        console.print(Text(_decode(request.body)))
    console.print("-" * SEPARATOR_WIDTH)


def print_response_details(console: Console, summary: ResponseSummary, content: bytes) -> None:
    """Verbose view of a response: headers, content type and text content."""

    table = Table(title="Headers", show_header=False)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in summary.headers.items():
        table.add_row(name, value)
    console.print(table)

    if summary.content_type:
        if not media_type(summary.content_type).startswith("image/"):
            console.print(Text("Content: ", style="bold") + Text(_decode(content)))
        console.print(Text(f"Content type: {summary.content_type}", style="dim"))


def print_summary(console: Console, summary: ResponseSummary) -> None:
    console.print()
    console.print(Text(summary.summary_line()))
    if summary.saved_to is not None:
        console.print(Text(f"Saved response to {summary.saved_to}", style="green"))


def build_results_table(results: Sequence[ResponseSummary]) -> Table:
    table = Table(title="Results")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Request", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Saved to", style="magenta")

    for index, summary in enumerate(results, start=1):
        label = summary.request_name or f"{summary.method.value} {summary.url}"
        style = "green" if summary.status_code < 400 else "red"
        table.add_row(
            str(index),
            label,
            Text(str(summary.status_code), style=style),
            f"{summary.elapsed_ms:.0f}",
            str(summary.content_length),
            str(summary.saved_to) if summary.saved_to else "",
        )
    return table

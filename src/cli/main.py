"""`httper` CLI.

Commands:
- `send`   : send every request in a `.http` file and report the responses.
- `serve`  : run the echo server (same as the `server` script).
- `doctor` : environment checks.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import export_run_report
from cli import doctor, server
from cli.ui_components import build_results_table, print_request, print_response_details, print_summary
from core.config import AppSettings
from core.domain.models import ResponseSummary
from core.errors import HttperError
from core.logging_config import configure_logging
from core.services.request_runner import RunHooks, RunOptions, run_request_file

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Send HTTP request files and run the echo server.",
)
app.add_typer(doctor.app, name="doctor")
app.command(name="serve")(server.serve)

_console = Console()


def parse_variables(values: List[str]) -> dict[str, str]:
    """`["a=1", "b=x=y"]` -> {"a": "1", "b": "x=y"}."""

    variables: dict[str, str] = {}
    for value in values:
        name, sep, raw = value.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected name=value, got '{value}'", param_hint="--var")
        variables[name.strip()] = raw
    return variables


@app.command()
def send(
    file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="File containing the HTTP request(s).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print verbose output."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file for the response body."),
    var: Optional[List[str]] = typer.Option(None, "--var", help="Variable override, name=value (repeatable)."),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON run report to this path."),
) -> None:
    """Send the requests in FILE, in order."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    variables = parse_variables(var or [])

    def after_response(summary: ResponseSummary, content: bytes) -> None:
        if verbose:
            print_response_details(_console, summary, content)
        print_summary(_console, summary)

    hooks = RunHooks(
        before_send=(lambda request: print_request(_console, request)) if verbose else None,
        after_response=after_response,
    )

    try:
        result = run_request_file(
            path=file,
            settings=settings,
            options=RunOptions(output=output, variables=variables),
            hooks=hooks,
        )
    except HttperError as exc:
        _console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if len(result.results) > 1:
        _console.print()
        _console.print(build_results_table(result.results))

    if report is not None:
        path = export_run_report(report=result, output_path=report)
        _console.print(f"[green]Report written to:[/green] {path}")


def run() -> None:
    app()

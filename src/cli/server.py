"""`server` command: runs the echo service.

The container entrypoint calls `server` with no arguments, so every option
defaults to the `HTTPER_*` settings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.echo_server import EchoServer
from cli.ui_components import print_banner
from core.config import AppSettings
from core.errors import HttperError
from core.logging_config import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Run the HTTP echo server.")

_console = Console()


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default: HTTPER_HOST or 0.0.0.0)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", min=0, max=65535, help="TCP port (default: HTTPER_PORT or 8080)."),
    certs_dir: Optional[Path] = typer.Option(
        None,
        "--certs-dir",
        file_okay=False,
        help="Directory with cert.pem/key.pem (default: HTTPER_CERTS_DIR or ./certs).",
    ),
    require_tls: bool = typer.Option(
        False,
        "--require-tls",
        help="Fail instead of serving plain HTTP when certificates are missing (default: HTTPER_REQUIRE_TLS).",
    ),
) -> None:
    """Echo every request body back to the client."""

    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if certs_dir is not None:
        overrides["certs_dir"] = certs_dir
    if require_tls:
        overrides["require_tls"] = True
    settings = AppSettings().model_copy(update=overrides)

    configure_logging(settings.log_level)

    try:
        server = EchoServer(settings)
    except HttperError as exc:
        _console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        _console.print(f"[red]Cannot listen on {settings.host}:{settings.port}: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    print_banner(_console, address=f"{server.scheme}://{server.host}:{server.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")


app.command()(serve)


def run() -> None:
    app()

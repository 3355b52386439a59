"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from adapters.tls import load_tls_context, missing_cert_files
from core.config import AppSettings
from core.errors import CertificateError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _probe_host(host: str) -> str:
    # A wildcard bind is reachable through loopback.
    return "127.0.0.1" if host in ("0.0.0.0", "", "::") else host


def _check_certs(settings: AppSettings) -> tuple[str, str]:
    missing = missing_cert_files(settings)
    if missing:
        status = "FAIL" if settings.require_tls else "MISSING"
        return status, "Missing: " + ", ".join(str(path) for path in missing)
    try:
        load_tls_context(settings)
    except CertificateError as exc:
        return "FAIL", str(exc)
    return "OK", f"{settings.cert_path} + {settings.key_path}"


def _check_listener(settings: AppSettings, scheme: str) -> tuple[bool, str]:
    url = f"{scheme}://{_probe_host(settings.host)}:{settings.port}/healthz"
    try:
        with build_client(settings) as client:
            response = client.get(url)
        return True, f"{url} -> HTTP {response.status_code}"
    except Exception as exc:
        return False, f"{url}: {exc}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="httper Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Bind address", "OK", f"{settings.host}:{settings.port}")
    table.add_row("Certs dir", "OK" if settings.certs_dir.is_dir() else "MISSING", str(settings.certs_dir))

    # TLS
    cert_status, cert_detail = _check_certs(settings)
    table.add_row("TLS certificate", cert_status, cert_detail)

    # Connectivity (best-effort)
    scheme = "https" if cert_status == "OK" else "http"
    ok_listener, detail_listener = _check_listener(settings, scheme)
    table.add_row("Echo listener", "OK" if ok_listener else "DOWN", detail_listener)

    _console.print(table)

    if cert_status != "OK":
        _console.print(
            "\n[yellow]Note:[/yellow] Without cert.pem/key.pem in the certs dir the server speaks plain HTTP."
        )

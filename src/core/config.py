"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (echo server, HTTP client) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "httper"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "httper"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "httper"
    return Path.home() / ".config" / "httper"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking logic into the core.
    - One configuration contract shared by the server, the client and the CLI.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTPER_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    # Echo server
    host: str = Field(
        default="0.0.0.0",
        min_length=1,
        description="Interface the echo server binds to.",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="TCP port the echo server listens on.",
    )
    certs_dir: Path = Field(
        default=Path("certs"),
        description="Directory holding the TLS certificate material.",
    )
    cert_file: str = Field(
        default="cert.pem",
        min_length=1,
        description="Certificate chain file name inside `certs_dir`.",
    )
    key_file: str = Field(
        default="key.pem",
        min_length=1,
        description="Private key file name inside `certs_dir`.",
    )
    require_tls: bool = Field(
        default=False,
        description="Refuse to start without certificate material (no plain HTTP fallback).",
    )
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=0,
        description="Largest request body the echo server accepts.",
    )

    # Request client
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    verify_tls: bool = Field(
        default=False,
        description="Verify server certificates. Off so self-signed echo servers work.",
    )
    user_agent: str = Field(
        default="httper/0.1",
        min_length=1,
        description="User-Agent sent when the request file does not set one.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...).",
    )

    @property
    def cert_path(self) -> Path:
        return self.certs_dir / self.cert_file

    @property
    def key_path(self) -> Path:
        return self.certs_dir / self.key_file

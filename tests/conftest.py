"""Shared fixtures: isolated settings and a live echo server."""

from __future__ import annotations

import ipaddress
import os
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from adapters.echo_server import EchoServer
from core.config import AppSettings

_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep proxies and HTTPER_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("HTTPER_") or name in _PROXY_VARS:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings pointing at an empty certs dir, bound to loopback."""
    return AppSettings(
        _env_file=None,
        host="127.0.0.1",
        certs_dir=tmp_path / "certs",
    )


@pytest.fixture
def echo_server(settings: AppSettings) -> Iterator[EchoServer]:
    """Plain-HTTP echo server on an ephemeral port."""
    with EchoServer(settings, port=0) as server:
        yield server


def write_self_signed_pair(cert_path: Path, key_path: Path) -> None:
    """Write a throwaway certificate/key for 127.0.0.1."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "127.0.0.1")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(
            x509.SubjectAlternativeName([x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    cert_path.parent.mkdir(parents=True, exist_ok=True)
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )


@pytest.fixture
def tls_settings(settings: AppSettings) -> AppSettings:
    """Settings whose certs dir holds a loadable cert.pem/key.pem."""
    write_self_signed_pair(settings.cert_path, settings.key_path)
    return settings

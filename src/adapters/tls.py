"""TLS material for the echo server.

Policy:
- cert + key present  -> HTTPS.
- missing, `require_tls` off -> plain HTTP, with a warning.
- missing, `require_tls` on  -> `CertificateError`.
- present but unloadable -> `CertificateError`, whatever `require_tls` says.
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path

from core.config import AppSettings
from core.errors import CertificateError

logger = logging.getLogger(__name__)


def missing_cert_files(settings: AppSettings) -> list[Path]:
    return [path for path in (settings.cert_path, settings.key_path) if not path.is_file()]


def load_tls_context(settings: AppSettings) -> ssl.SSLContext | None:
    missing = missing_cert_files(settings)
    if missing:
        names = ", ".join(str(path) for path in missing)
        if settings.require_tls:
            raise CertificateError(f"missing {names}")
        logger.warning("No certificate material (%s missing); serving plain HTTP", names)
        return None

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    try:
        context.load_cert_chain(certfile=str(settings.cert_path), keyfile=str(settings.key_path))
    except (ssl.SSLError, OSError) as exc:
        raise CertificateError(
            f"cannot load {settings.cert_path} / {settings.key_path}: {exc}"
        ) from exc
    logger.info("Loaded TLS certificate %s", settings.cert_path)
    return context

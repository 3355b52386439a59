"""Logging setup for the CLI entry points.

Library modules only call `logging.getLogger(__name__)`; handlers are
installed once here, rendered through Rich so log lines match the console UI.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_NOISY_LOGGERS = ("werkzeug", "httpx", "httpcore")


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # The echo server and the CLI report each request themselves.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

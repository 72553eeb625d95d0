"""Logging setup for the command line and web server."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from .constants import ENV_LOG_LEVEL


def configure_logging(console: Console, level_override: str | None = None) -> None:
    """Route log records through a RichHandler on ``console``.

    ``level_override`` wins over the LOG_LEVEL env var; the default is WARNING
    so normal command output stays clean.
    """
    level_name = (level_override or os.getenv(ENV_LOG_LEVEL, "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(
        RichHandler(console=console, show_path=False, rich_tracebacks=True, markup=False)
    )

    for name in ("googleapiclient", "google.auth", "google_auth_oauthlib", "urllib3"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

"""Logging setup for one CLI invocation.

Level comes from ``--log-level`` or ``$MFI_CLI_LOG`` (default
``WARNING``).  Records go to stderr through Rich when it is installed.
"""

from __future__ import annotations

import logging
import os
import sys

from mfi_cli.cli.console import get_rich_console
from mfi_cli.exceptions import EnvironmentError

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL: str = "WARNING"


def resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("MFI_CLI_LOG") or DEFAULT_LOG_LEVEL).upper()
    if name not in LOG_LEVELS:
        name = DEFAULT_LOG_LEVEL
    return getattr(logging, name)


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler

        return RichHandler(console=get_rich_console(), show_path=False)
    except (ModuleNotFoundError, EnvironmentError):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        return handler


def configure_logging(level: str | None = None) -> None:
    """Install a single stderr handler on the root logger."""
    logging.basicConfig(
        level=resolve_level(level),
        format="%(message)s",
        handlers=[_build_handler()],
        force=True,
    )

"""Process exit statuses returned by :func:`mfi_cli.cli.app.main`."""

from __future__ import annotations

SUCCESS: int = 0
"""Command finished; for mutating commands the transaction was confirmed."""

GENERAL_ERROR: int = 1
"""An MfiCliError was reported, including a declined consent prompt."""

UNEXPECTED_ERROR: int = 2
"""A non-domain exception reached the error boundary.

Argument-parse failures also exit 2, raised by argparse itself.
"""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""

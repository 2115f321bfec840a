"""Entry point for ``python -m mfi_cli``; same behaviour as the ``mfi`` script."""

from __future__ import annotations

from mfi_cli.cli.app import cli

if __name__ == "__main__":
    cli()

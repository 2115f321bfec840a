"""``mfi doctor``: environment diagnostics command.

Gathers runtime and profile information and renders a Rich table
summarising whether the environment can run mfi-cli commands.

This module lives in the CLI layer: it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import importlib
import platform
import sys

from mfi_cli.cli import exit_codes
from mfi_cli.cli.console import console
from mfi_cli.core.protocols import ProfileStore
from mfi_cli.exceptions import ConfigurationError, NoActiveProfileError
from mfi_cli.infra.keypair import load_keypair
from mfi_cli.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _module_check(label: str, module_name: str) -> Check:
    """Return (label, value, status) for an importable dependency."""
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return label, "NOT INSTALLED", "[red]FAIL[/red]"
    version = getattr(module, "__version__", None) or "unknown"
    return label, str(version), "[green]OK[/green]"


def _profile_check(store: ProfileStore) -> Check:
    """Return (label, value, status) for the active profile row."""
    try:
        profile = store.load_active()
    except NoActiveProfileError:
        return "Profile", "none active", "[yellow]WARN[/yellow]"
    except ConfigurationError as exc:
        return "Profile", str(exc), "[red]FAIL[/red]"
    return "Profile", f"{profile.name} ({profile.cluster})", "[green]OK[/green]"


def _keypair_check(store: ProfileStore) -> Check:
    """Return (label, value, status) for the active profile's signer row."""
    try:
        profile = store.load_active()
    except ConfigurationError:
        return "Keypair", "no profile", "[yellow]WARN[/yellow]"
    try:
        keypair = load_keypair(profile.keypair_path)
    except ConfigurationError:
        return "Keypair", profile.keypair_path, "[yellow]WARN[/yellow]"
    return "Keypair", str(keypair.pubkey()), "[green]OK[/green]"


def _mfi_version_check() -> Check:
    """Return (label, value, status) for the mfi-cli version row."""
    return "mfi-cli", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\nmfi doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<44} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<44} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(store: ProfileStore) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.  Warnings (no active
        profile, unreadable keypair) do not fail the run.
    """
    checks = [
        _mfi_version_check(),
        _python_version_check(),
        _module_check("solders", "solders"),
        _module_check("solana-py", "solana"),
        _module_check("rich", "rich"),
        _profile_check(store),
        _keypair_check(store),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="mfi doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS

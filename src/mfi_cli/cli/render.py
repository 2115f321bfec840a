"""Human-readable rendering of command results.

All display-related logic lives here: no business logic, no RPC, no
profile storage.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mfi_cli.cli.console import out
from mfi_cli.core.models import AccountView, Profile, TransactionReceipt
from mfi_cli.exceptions import EnvironmentError


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for result rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms: no I/O themselves)
# ---------------------------------------------------------------------------

def _or_dash(value: object | None) -> str:
    if value is None:
        return "-"
    return str(value)


def profile_rows(profile: Profile) -> list[tuple[str, str]]:
    return [
        ("Name", profile.name),
        ("Cluster", str(profile.cluster)),
        ("Keypair", profile.keypair_path),
        ("RPC URL", profile.rpc_url),
        ("Program ID", _or_dash(profile.program_id)),
        ("Commitment", _or_dash(profile.commitment)),
        ("Marginfi group", _or_dash(profile.marginfi_group)),
    ]


def account_rows(view: AccountView) -> list[tuple[str, str]]:
    rows = [
        ("Address", str(view.address)),
        ("Type", view.kind),
        ("Lamports", str(view.lamports)),
        ("Data length", str(view.data_len)),
    ]
    rows.extend((key, str(value)) for key, value in view.fields.items())
    return rows


def _key_value_table(title: str, rows: Sequence[tuple[str, str]]) -> Any:
    table_class = _import_rich_table()
    table = table_class(title=title, show_header=False, border_style="dim")
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    return table


# ---------------------------------------------------------------------------
# Public renderers
# ---------------------------------------------------------------------------

def render_profile(profile: Profile, *, title: str = "Profile") -> None:
    out.print(_key_value_table(title, profile_rows(profile)))


def render_profile_list(names: Sequence[str], active: str | None) -> None:
    if not names:
        out.print("No profiles found.")
        return
    for name in names:
        marker = "*" if name == active else " "
        out.print(f"{marker} {name}", markup=False)


def render_account(view: AccountView) -> None:
    out.print(_key_value_table(view.kind, account_rows(view)))


def render_accounts(views: Sequence[AccountView], kind: str) -> None:
    if not views:
        out.print(f"No {kind} accounts found.")
        return
    table_class = _import_rich_table()
    table = table_class(title=f"{kind} accounts ({len(views)})", border_style="dim")
    table.add_column("Address", style="bold")
    field_names = list(views[0].fields)
    for name in field_names:
        table.add_column(name)
    for view in views:
        table.add_row(str(view.address), *(str(view.fields.get(n)) for n in field_names))
    out.print(table)


def render_receipt(receipt: TransactionReceipt) -> None:
    out.print(f"[bold green]Transaction confirmed.[/bold green]  {receipt.signature}")
    for role, address in receipt.created.items():
        out.print(f"  {role}: {address}")

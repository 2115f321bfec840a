"""Consent classification for Group and Bank commands.

Read-only commands run without operator confirmation; every other
Group/Bank variant changes on-chain state and must be confirmed.
Profile commands never reach this module.
"""

from __future__ import annotations

from mfi_cli.core.commands import (
    BankCommand,
    BankGet,
    BankGetAll,
    BankUpdate,
    GroupAddBank,
    GroupCommand,
    GroupCreate,
    GroupGet,
    GroupGetAll,
    GroupUpdate,
)

READ_ONLY_COMMANDS: tuple[type, ...] = (GroupGet, GroupGetAll, BankGet, BankGetAll)
MUTATING_COMMANDS: tuple[type, ...] = (GroupCreate, GroupUpdate, GroupAddBank, BankUpdate)


def requires_consent(cmd: GroupCommand | BankCommand) -> bool:
    """Return ``True`` when *cmd* must be confirmed by the operator.

    Classification looks only at the command's type, never its payload.

    Raises
    ------
    TypeError
        For anything that is not a known Group/Bank command, so a new
        variant cannot silently skip the check.
    """
    if isinstance(cmd, READ_ONLY_COMMANDS):
        return False
    if isinstance(cmd, MUTATING_COMMANDS):
        return True
    raise TypeError(f"Unclassified command: {type(cmd).__name__}")

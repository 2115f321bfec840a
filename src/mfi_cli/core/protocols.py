"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends only on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from solders.pubkey import Pubkey

from mfi_cli.core.models import (
    AccountView,
    BankConfig,
    BankConfigOpt,
    Config,
    Profile,
    TransactionReceipt,
)


class ProfileStore(Protocol):
    """Contract for persisted connection profiles.

    Exactly one profile may be marked active.  Implementations must map
    storage errors to :class:`~mfi_cli.exceptions.MfiCliError`
    subclasses.
    """

    def load_active(self) -> Profile:
        """Return the active profile.

        Raises
        ------
        NoActiveProfileError
            When no profile is marked active.
        MalformedProfileError
            When the stored record cannot be decoded.
        """
        ...  # pragma: no cover

    def active_name(self) -> str | None:
        """Name of the active profile, or ``None``."""
        ...  # pragma: no cover

    def get(self, name: str) -> Profile:
        """Return profile *name* or raise ``ProfileNotFoundError``."""
        ...  # pragma: no cover

    def list_names(self) -> list[str]:
        """Names of every stored profile, sorted."""
        ...  # pragma: no cover

    def save(self, profile: Profile) -> None:
        """Insert or replace *profile*."""
        ...  # pragma: no cover

    def set_active(self, name: str) -> None:
        """Mark *name* as the active profile."""
        ...  # pragma: no cover


class Processor(Protocol):
    """Contract for the remote side of every Group/Bank command.

    A processor is bound to one resolved :class:`Config`.  Reads return
    :class:`AccountView` values, writes a :class:`TransactionReceipt`.
    Implementations must map transport and RPC failures to
    :class:`~mfi_cli.exceptions.ProcessorError`.
    """

    def group_get(self, marginfi_group: Pubkey | None) -> AccountView:
        ...  # pragma: no cover

    def group_get_all(self) -> list[AccountView]:
        ...  # pragma: no cover

    def group_create(
        self,
        profile: Profile,
        admin: Pubkey | None,
        override_existing_profile_group: bool,
    ) -> TransactionReceipt:
        ...  # pragma: no cover

    def group_configure(self, profile: Profile, admin: Pubkey | None) -> TransactionReceipt:
        ...  # pragma: no cover

    def group_add_bank(
        self,
        profile: Profile,
        bank_mint: Pubkey,
        bank_config: BankConfig,
    ) -> TransactionReceipt:
        ...  # pragma: no cover

    def bank_get(self, bank: Pubkey | None) -> AccountView:
        ...  # pragma: no cover

    def bank_get_all(self, marginfi_group: Pubkey | None) -> list[AccountView]:
        ...  # pragma: no cover

    def bank_configure(
        self,
        profile: Profile,
        bank: Pubkey,
        bank_config_opt: BankConfigOpt,
    ) -> TransactionReceipt:
        ...  # pragma: no cover


ProcessorFactory = Callable[[Config], Processor]
"""Builds a processor bound to a resolved configuration."""

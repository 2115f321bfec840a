"""Command routing: profile resolution, consent gating, processor calls.

Group and Bank commands resolve the active profile exactly once,
classify the sub-command, ask for consent when it mutates on-chain
state, convert arguments, and call the processor.  Profile commands
only touch the local profile store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TextIO

from mfi_cli.cli import exit_codes, render
from mfi_cli.cli.consent import confirm
from mfi_cli.core.classifier import requires_consent
from mfi_cli.core.commands import (
    BankCmd,
    BankCommand,
    BankGet,
    BankGetAll,
    BankUpdate,
    Command,
    GroupAddBank,
    GroupCmd,
    GroupCommand,
    GroupCreate,
    GroupGet,
    GroupGetAll,
    GroupUpdate,
    ProfileCmd,
    ProfileCommand,
    ProfileCreate,
    ProfileList,
    ProfileSet,
    ProfileShow,
    ProfileUpdate,
)
from mfi_cli.core.conversions import build_bank_config, build_bank_config_opt
from mfi_cli.core.models import GlobalOptions, Profile
from mfi_cli.core.profile_service import ProfileService
from mfi_cli.core.protocols import ProcessorFactory, ProfileStore
from mfi_cli.core.resolver import resolve

logger = logging.getLogger(__name__)

ConsentGate = Callable[..., None]


class Dispatcher:
    """Route one parsed command to its handler.

    Parameters
    ----------
    store:
        Profile store used for resolution and profile commands.
    processor_factory:
        Builds a processor from the resolved configuration.
    consent:
        Consent gate; called as ``consent(cmd, profile, stream=stdin)``.
    stdin:
        Stream the consent gate reads from.  ``None`` means ``sys.stdin``.
    """

    def __init__(
        self,
        store: ProfileStore,
        processor_factory: ProcessorFactory,
        *,
        consent: ConsentGate = confirm,
        stdin: TextIO | None = None,
    ) -> None:
        self._store = store
        self._processor_factory = processor_factory
        self._consent = consent
        self._stdin = stdin

    def run(self, command: Command, overrides: GlobalOptions) -> int:
        if isinstance(command, GroupCmd):
            self._group(command.subcmd, overrides)
        elif isinstance(command, BankCmd):
            self._bank(command.subcmd, overrides)
        elif isinstance(command, ProfileCmd):
            self._profile(command.subcmd)
        else:
            raise TypeError(f"Unknown command: {type(command).__name__}")
        return exit_codes.SUCCESS

    def _gate(self, subcmd: GroupCommand | BankCommand, profile: Profile) -> None:
        if requires_consent(subcmd):
            self._consent(subcmd, profile, stream=self._stdin)

    # ------------------------------------------------------------------
    # group
    # ------------------------------------------------------------------

    def _group(self, subcmd: GroupCommand, overrides: GlobalOptions) -> None:
        profile, config = resolve(self._store, overrides)
        self._gate(subcmd, profile)
        processor = self._processor_factory(config)

        if isinstance(subcmd, GroupGet):
            group = (
                subcmd.marginfi_group
                if subcmd.marginfi_group is not None
                else profile.marginfi_group
            )
            render.render_account(processor.group_get(group))
        elif isinstance(subcmd, GroupGetAll):
            render.render_accounts(processor.group_get_all(), "MarginfiGroup")
        elif isinstance(subcmd, GroupCreate):
            render.render_receipt(
                processor.group_create(
                    profile, subcmd.admin, subcmd.override_existing_profile_group,
                )
            )
        elif isinstance(subcmd, GroupUpdate):
            render.render_receipt(processor.group_configure(profile, subcmd.admin))
        elif isinstance(subcmd, GroupAddBank):
            render.render_receipt(
                processor.group_add_bank(profile, subcmd.bank_mint, build_bank_config(subcmd))
            )
        else:
            raise TypeError(f"Unknown group command: {type(subcmd).__name__}")

    # ------------------------------------------------------------------
    # bank
    # ------------------------------------------------------------------

    def _bank(self, subcmd: BankCommand, overrides: GlobalOptions) -> None:
        profile, config = resolve(self._store, overrides)
        self._gate(subcmd, profile)
        processor = self._processor_factory(config)

        if isinstance(subcmd, BankGet):
            render.render_account(processor.bank_get(subcmd.bank))
        elif isinstance(subcmd, BankGetAll):
            render.render_accounts(processor.bank_get_all(subcmd.marginfi_group), "Bank")
        elif isinstance(subcmd, BankUpdate):
            render.render_receipt(
                processor.bank_configure(profile, subcmd.bank_pk, build_bank_config_opt(subcmd))
            )
        else:
            raise TypeError(f"Unknown bank command: {type(subcmd).__name__}")

    # ------------------------------------------------------------------
    # profile
    # ------------------------------------------------------------------

    def _profile(self, subcmd: ProfileCommand) -> None:
        service = ProfileService(self._store)

        if isinstance(subcmd, ProfileCreate):
            render.render_profile(service.create(subcmd), title="Profile created")
        elif isinstance(subcmd, ProfileShow):
            render.render_profile(service.show())
        elif isinstance(subcmd, ProfileList):
            render.render_profile_list(*service.list_profiles())
        elif isinstance(subcmd, ProfileSet):
            render.render_profile(service.set_active(subcmd.name), title="Active profile")
        elif isinstance(subcmd, ProfileUpdate):
            render.render_profile(service.update(subcmd), title="Profile updated")
        else:
            raise TypeError(f"Unknown profile command: {type(subcmd).__name__}")

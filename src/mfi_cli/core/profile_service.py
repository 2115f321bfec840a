"""Profile management: create, show, list, switch and update profiles.

These operations touch only the local profile store; they never build a
remote :class:`~mfi_cli.core.models.Config` and never require operator
consent.
"""

from __future__ import annotations

import dataclasses
import logging

from solders.pubkey import Pubkey

from mfi_cli.core.commands import ProfileCreate, ProfileUpdate
from mfi_cli.core.models import Profile
from mfi_cli.core.protocols import ProfileStore
from mfi_cli.exceptions import InvalidArgumentError, ProfileExistsError

logger = logging.getLogger(__name__)


class ProfileService:
    """Thin orchestration over a :class:`ProfileStore`.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`ProfileStore` protocol.
    """

    def __init__(self, store: ProfileStore) -> None:
        self._store: ProfileStore = store

    def create(self, cmd: ProfileCreate) -> Profile:
        """Create a new profile.  The first profile ever created becomes active.

        Raises
        ------
        ProfileExistsError
            If a profile with the same name already exists.
        """
        name = cmd.name.strip()
        if not name:
            raise InvalidArgumentError("Profile name must not be empty.")
        if name in self._store.list_names():
            raise ProfileExistsError(
                f"Profile {name!r} already exists.",
                hint="Use `mfi profile update` to change it.",
            )

        profile = Profile(
            name=name,
            cluster=cmd.cluster,
            keypair_path=cmd.keypair_path,
            rpc_url=cmd.rpc_url,
            program_id=cmd.program_id,
            commitment=cmd.commitment,
            marginfi_group=cmd.group,
        )
        self._store.save(profile)
        if self._store.active_name() is None:
            self._store.set_active(name)
            logger.info("Profile %s created and set active", name)
        else:
            logger.info("Profile %s created", name)
        return profile

    def show(self) -> Profile:
        """Return the active profile."""
        return self._store.load_active()

    def list_profiles(self) -> tuple[list[str], str | None]:
        """Return every profile name and the active one (if any)."""
        return self._store.list_names(), self._store.active_name()

    def set_active(self, name: str) -> Profile:
        """Make *name* the active profile.

        Raises
        ------
        ProfileNotFoundError
            If no such profile exists.
        """
        profile = self._store.get(name)
        self._store.set_active(profile.name)
        logger.info("Active profile set to %s", profile.name)
        return profile

    def update(self, cmd: ProfileUpdate) -> Profile:
        """Apply the supplied fields of *cmd*; absent fields stay unchanged."""
        current = self._store.get(cmd.name)
        changes = {
            "cluster": cmd.cluster,
            "keypair_path": cmd.keypair_path,
            "rpc_url": cmd.rpc_url,
            "program_id": cmd.program_id,
            "commitment": cmd.commitment,
            "marginfi_group": cmd.group,
        }
        updated = dataclasses.replace(
            current,
            **{key: value for key, value in changes.items() if value is not None},
        )
        self._store.save(updated)
        logger.info("Profile %s updated", updated.name)
        return updated

    def link_group(self, profile: Profile, marginfi_group: Pubkey) -> Profile:
        """Store *marginfi_group* as the default group of *profile*."""
        updated = dataclasses.replace(profile, marginfi_group=marginfi_group)
        self._store.save(updated)
        logger.info("Profile %s linked to group %s", profile.name, marginfi_group)
        return updated

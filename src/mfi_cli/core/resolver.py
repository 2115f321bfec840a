"""Profile resolution: the active profile merged with per-call overrides."""

from __future__ import annotations

import logging

from mfi_cli.core.models import Config, GlobalOptions, Profile
from mfi_cli.core.protocols import ProfileStore

logger = logging.getLogger(__name__)


def resolve(
    store: ProfileStore,
    overrides: GlobalOptions | None = None,
) -> tuple[Profile, Config]:
    """Load the active profile and derive the effective :class:`Config`.

    Both values are returned: the profile is needed later as the
    consent token and for defaulting omitted group references.

    Raises
    ------
    NoActiveProfileError
        If the store has no active profile.  There is no implicit
        fallback configuration.
    """
    profile = store.load_active()
    config = profile.get_config(overrides)
    logger.debug(
        "Resolved profile %s: cluster=%s rpc=%s program=%s commitment=%s",
        profile.name,
        config.cluster,
        config.rpc_url,
        config.program_id,
        config.commitment,
    )
    return profile, config

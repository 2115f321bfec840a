"""JSON-file backed implementation of :class:`~mfi_cli.core.protocols.ProfileStore`.

Layout under the configuration directory::

    <root>/config.json            {"profile": "<active name>"}
    <root>/profiles/<name>.json   one file per profile

The root is ``$MFI_CLI_HOME`` when set, ``~/.config/mfi-cli`` otherwise.
Every decoding problem is reported as
:class:`~mfi_cli.exceptions.MalformedProfileError`; raw ``OSError`` /
``json`` errors never leave this module.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from mfi_cli.core.models import Cluster, CommitmentLevel, Profile, parse_pubkey
from mfi_cli.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    MalformedProfileError,
    MfiCliError,
    NoActiveProfileError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def default_config_dir() -> Path:
    """Return the configuration directory for the current user."""
    override = os.environ.get("MFI_CLI_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "mfi-cli"


# ---------------------------------------------------------------------------
# (De)serialisation
# ---------------------------------------------------------------------------

def profile_to_dict(profile: Profile) -> dict[str, Any]:
    return {
        "name": profile.name,
        "cluster": str(profile.cluster),
        "keypair_path": profile.keypair_path,
        "rpc_url": profile.rpc_url,
        "program_id": str(profile.program_id) if profile.program_id is not None else None,
        "commitment": profile.commitment.value if profile.commitment is not None else None,
        "marginfi_group": (
            str(profile.marginfi_group) if profile.marginfi_group is not None else None
        ),
    }


def profile_from_dict(data: Any, *, source: str = "profile") -> Profile:
    """Decode a stored profile record.

    Raises
    ------
    MalformedProfileError
        If a required field is missing or any field has the wrong type.
    """
    if not isinstance(data, dict):
        raise MalformedProfileError(f"{source}: expected a JSON object.")

    def required(key: str) -> str:
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise MalformedProfileError(f"{source}: missing or invalid {key!r}.")
        return value

    def optional(key: str) -> str | None:
        value = data.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise MalformedProfileError(f"{source}: invalid {key!r}.")
        return value

    try:
        program_id = optional("program_id")
        commitment = optional("commitment")
        group = optional("marginfi_group")
        return Profile(
            name=required("name"),
            cluster=Cluster.parse(required("cluster")),
            keypair_path=required("keypair_path"),
            rpc_url=required("rpc_url"),
            program_id=parse_pubkey(program_id) if program_id else None,
            commitment=CommitmentLevel.parse(commitment) if commitment else None,
            marginfi_group=parse_pubkey(group) if group else None,
        )
    except MalformedProfileError:
        raise
    except MfiCliError as exc:
        raise MalformedProfileError(f"{source}: {exc}") from exc


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class JsonProfileStore:
    """Concrete :class:`ProfileStore` persisting profiles as JSON files.

    This class satisfies the :class:`~mfi_cli.core.protocols.ProfileStore`
    protocol structurally: no explicit inheritance required.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root: Path = root if root is not None else default_config_dir()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def _profiles_dir(self) -> Path:
        return self._root / "profiles"

    @property
    def _config_file(self) -> Path:
        return self._root / "config.json"

    def _path_for(self, name: str) -> Path:
        if not _NAME_PATTERN.match(name):
            raise InvalidArgumentError(
                f"Invalid profile name: {name!r}",
                hint="Use letters, digits, '.', '_' or '-'.",
            )
        return self._profiles_dir / f"{name}.json"

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def active_name(self) -> str | None:
        if not self._config_file.exists():
            return None
        data = self._read_json(self._config_file)
        if not isinstance(data, dict):
            raise MalformedProfileError(f"{self._config_file}: expected a JSON object.")
        name = data.get("profile")
        if name is None:
            return None
        if not isinstance(name, str):
            raise MalformedProfileError(f"{self._config_file}: invalid 'profile'.")
        return name

    def load_active(self) -> Profile:
        name = self.active_name()
        if name is None:
            raise NoActiveProfileError(
                "No active profile.",
                hint="Create one with `mfi profile create` or pick one with "
                "`mfi profile set --name <name>`.",
            )
        return self.get(name)

    def get(self, name: str) -> Profile:
        path = self._path_for(name)
        if not path.exists():
            raise ProfileNotFoundError(
                f"Profile {name!r} does not exist.",
                hint="List profiles with `mfi profile list`.",
            )
        return profile_from_dict(self._read_json(path), source=str(path))

    def list_names(self) -> list[str]:
        if not self._profiles_dir.is_dir():
            return []
        return sorted(path.stem for path in self._profiles_dir.glob("*.json"))

    def save(self, profile: Profile) -> None:
        path = self._path_for(profile.name)
        self._write_json(path, profile_to_dict(profile))
        logger.debug("Wrote profile %s to %s", profile.name, path)

    def set_active(self, name: str) -> None:
        if not self._path_for(name).exists():
            raise ProfileNotFoundError(f"Profile {name!r} does not exist.")
        self._write_json(self._config_file, {"profile": name})

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MalformedProfileError(f"{path}: invalid JSON ({exc}).") from exc
        except OSError as exc:
            raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    @staticmethod
    def _write_json(path: Path, data: dict[str, Any]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise ConfigurationError(f"Cannot write {path}: {exc}") from exc

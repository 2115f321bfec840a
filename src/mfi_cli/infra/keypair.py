"""Signer loading from ``solana-keygen`` JSON keypair files."""

from __future__ import annotations

import json
from pathlib import Path

from solders.keypair import Keypair

from mfi_cli.exceptions import ConfigurationError


def load_keypair(path: str) -> Keypair:
    """Read a keypair file (a JSON array of 64 byte values).

    Raises
    ------
    ConfigurationError
        If the file is missing or does not hold a valid keypair.
    """
    resolved = Path(path).expanduser()
    try:
        raw = json.loads(resolved.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Keypair file not found: {resolved}",
            hint="Check the profile's keypair_path or pass --keypair-path.",
        ) from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read keypair {resolved}: {exc}") from exc

    if not isinstance(raw, list) or len(raw) != 64:
        raise ConfigurationError(f"{resolved} is not a 64-byte keypair file.")
    try:
        return Keypair.from_bytes(bytes(raw))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{resolved} holds an invalid keypair: {exc}") from exc

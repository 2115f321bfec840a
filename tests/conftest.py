"""Shared pytest fixtures and configuration for the mfi-cli test suite.

Guidelines
----------
* No network access in any test: the Solana RPC client is always mocked.
* Profile storage uses a temporary directory, never ``~/.config``.
* Core tests must be pure: no side effects.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from solders.pubkey import Pubkey

from mfi_cli.core.models import Cluster, CommitmentLevel, Profile
from mfi_cli.infra.profile_store import JsonProfileStore

GROUP = Pubkey.new_unique()
PROGRAM = Pubkey.new_unique()


def make_profile(**overrides: Any) -> Profile:
    defaults: dict[str, Any] = {
        "name": "alice",
        "cluster": Cluster.parse("devnet"),
        "keypair_path": "~/.config/solana/id.json",
        "rpc_url": "https://rpc.example.org",
        "program_id": PROGRAM,
        "commitment": CommitmentLevel.FINALIZED,
        "marginfi_group": GROUP,
    }
    defaults.update(overrides)
    return Profile(**defaults)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MFI_CLI_HOME", str(tmp_path / "mfi-home"))
    monkeypatch.delenv("MFI_CLI_LOG", raising=False)


@pytest.fixture
def store(tmp_path: Path) -> JsonProfileStore:
    return JsonProfileStore(tmp_path / "profiles-root")


@pytest.fixture
def active_store(store: JsonProfileStore) -> JsonProfileStore:
    """Store holding the ``alice`` profile, marked active."""
    store.save(make_profile())
    store.set_active("alice")
    return store

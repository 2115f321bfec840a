"""Tests for keypair file loading (infra/keypair.py)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from solders.keypair import Keypair

from mfi_cli.exceptions import ConfigurationError
from mfi_cli.infra.keypair import load_keypair


def test_loads_solana_keygen_file(tmp_path: Path) -> None:
    keypair = Keypair()
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))), encoding="utf-8")
    assert load_keypair(str(path)).pubkey() == keypair.pubkey()


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found") as exc_info:
        load_keypair(str(tmp_path / "nope.json"))
    assert exc_info.value.hint is not None


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps([1, 2, 3]), json.dumps({"secret": []}), json.dumps([300] * 64)],
)
def test_invalid_contents(tmp_path: Path, content: str) -> None:
    path = tmp_path / "id.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_keypair(str(path))

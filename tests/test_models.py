"""Tests for domain models (core/models.py) and command enums."""

from __future__ import annotations

import dataclasses
from typing import Any

import pytest
from solders.pubkey import Pubkey

from mfi_cli.core.commands import BankOperationalStateArg, GroupGet
from mfi_cli.core.models import (
    DEFAULT_COMMITMENT,
    DEFAULT_PROGRAM_ID,
    BankConfigOpt,
    BankOperationalState,
    Cluster,
    CommitmentLevel,
    GlobalOptions,
    Profile,
    parse_pubkey,
)
from mfi_cli.exceptions import InvalidArgumentError


def _profile(**overrides: Any) -> Profile:
    defaults: dict[str, Any] = {
        "name": "alice",
        "cluster": Cluster.parse("devnet"),
        "keypair_path": "/keys/alice.json",
        "rpc_url": "https://rpc.example.org",
    }
    defaults.update(overrides)
    return Profile(**defaults)


class TestCluster:
    @pytest.mark.parametrize(
        ("raw", "name"),
        [
            ("devnet", "devnet"),
            ("d", "devnet"),
            ("Mainnet", "mainnet"),
            ("mainnet-beta", "mainnet"),
            ("m", "mainnet"),
            ("l", "localnet"),
            ("testnet", "testnet"),
        ],
    )
    def test_monikers(self, raw: str, name: str) -> None:
        assert Cluster.parse(raw).name == name

    def test_known_cluster_url(self) -> None:
        assert Cluster.parse("localnet").url == "http://127.0.0.1:8899"

    def test_custom_url(self) -> None:
        cluster = Cluster.parse("https://my.rpc.example/abc")
        assert cluster.name == "custom"
        assert cluster.url == "https://my.rpc.example/abc"
        assert str(cluster) == "https://my.rpc.example/abc"

    def test_str_is_moniker_for_known(self) -> None:
        assert str(Cluster.parse("d")) == "devnet"

    def test_unknown_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown cluster"):
            Cluster.parse("moonnet")


class TestCommitment:
    def test_parse_case_insensitive(self) -> None:
        assert CommitmentLevel.parse("Finalized") is CommitmentLevel.FINALIZED

    def test_unknown_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            CommitmentLevel.parse("max")
        assert exc_info.value.hint is not None
        assert "processed" in exc_info.value.hint


class TestParsePubkey:
    def test_valid(self) -> None:
        key = Pubkey.new_unique()
        assert parse_pubkey(str(key)) == key

    def test_invalid(self) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_pubkey("definitely not base58!")


class TestGetConfig:
    def test_no_overrides_uses_profile(self) -> None:
        program = Pubkey.new_unique()
        profile = _profile(program_id=program, commitment=CommitmentLevel.PROCESSED)
        config = profile.get_config(GlobalOptions())
        assert config.cluster == profile.cluster
        assert config.rpc_url == profile.rpc_url
        assert config.program_id == program
        assert config.commitment is CommitmentLevel.PROCESSED
        assert config.keypair_path == profile.keypair_path

    def test_none_overrides_same_as_empty(self) -> None:
        profile = _profile()
        assert profile.get_config(None) == profile.get_config(GlobalOptions())

    def test_missing_program_id_falls_back_to_published_id(self) -> None:
        assert _profile().get_config().program_id == DEFAULT_PROGRAM_ID

    def test_missing_commitment_falls_back_to_default(self) -> None:
        assert _profile().get_config().commitment is DEFAULT_COMMITMENT

    def test_no_cross_field_validation(self) -> None:
        config = _profile().get_config(
            GlobalOptions(cluster=Cluster.parse("mainnet")),
        )
        assert config.cluster.name == "mainnet"
        assert config.rpc_url == "https://rpc.example.org"


class TestImmutability:
    def test_profile_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            _profile().name = "bob"  # type: ignore[misc]

    def test_command_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            GroupGet().marginfi_group = None  # type: ignore[misc]


class TestBankOperationalState:
    @pytest.mark.parametrize(
        ("arg", "state"),
        [
            (BankOperationalStateArg.PAUSED, BankOperationalState.PAUSED),
            (BankOperationalStateArg.OPERATIONAL, BankOperationalState.OPERATIONAL),
            (BankOperationalStateArg.REDUCE_ONLY, BankOperationalState.REDUCE_ONLY),
        ],
    )
    def test_arg_maps_one_to_one(
        self, arg: BankOperationalStateArg, state: BankOperationalState,
    ) -> None:
        assert arg.to_state() is state

    def test_cli_spelling(self) -> None:
        assert BankOperationalStateArg("reduce-only") is BankOperationalStateArg.REDUCE_ONLY

    def test_on_chain_ordinals(self) -> None:
        assert [int(s) for s in BankOperationalState] == [0, 1, 2]

    def test_bank_config_opt_defaults_to_absent(self) -> None:
        opt = BankConfigOpt()
        assert all(getattr(opt, f.name) is None for f in dataclasses.fields(opt))

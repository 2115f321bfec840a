"""Tests for profile management (core/profile_service.py) and its CLI surface."""

from __future__ import annotations

from typing import Any

import pytest
from solders.pubkey import Pubkey

from mfi_cli.cli import exit_codes
from mfi_cli.cli.app import main
from mfi_cli.core.commands import ProfileCreate, ProfileUpdate
from mfi_cli.core.models import Cluster, CommitmentLevel
from mfi_cli.core.profile_service import ProfileService
from mfi_cli.exceptions import (
    InvalidArgumentError,
    ProfileExistsError,
    ProfileNotFoundError,
)
from mfi_cli.infra.profile_store import JsonProfileStore


def _create(**overrides: Any) -> ProfileCreate:
    defaults: dict[str, Any] = {
        "name": "alice",
        "cluster": Cluster.parse("devnet"),
        "keypair_path": "/keys/alice.json",
        "rpc_url": "https://rpc.example.org",
    }
    defaults.update(overrides)
    return ProfileCreate(**defaults)


class TestProfileService:
    def test_first_profile_becomes_active(self, store: JsonProfileStore) -> None:
        ProfileService(store).create(_create())
        assert store.active_name() == "alice"

    def test_second_profile_does_not_steal_active(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        service.create(_create())
        service.create(_create(name="bob"))
        assert store.active_name() == "alice"

    def test_create_duplicate(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        service.create(_create())
        with pytest.raises(ProfileExistsError):
            service.create(_create())

    def test_create_blank_name(self, store: JsonProfileStore) -> None:
        with pytest.raises(InvalidArgumentError):
            ProfileService(store).create(_create(name="  "))

    def test_create_maps_group(self, store: JsonProfileStore) -> None:
        group = Pubkey.new_unique()
        profile = ProfileService(store).create(_create(group=group))
        assert profile.marginfi_group == group

    def test_set_active(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        service.create(_create())
        service.create(_create(name="bob"))
        service.set_active("bob")
        assert service.show().name == "bob"

    def test_set_unknown(self, store: JsonProfileStore) -> None:
        with pytest.raises(ProfileNotFoundError):
            ProfileService(store).set_active("ghost")

    def test_list_profiles(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        service.create(_create(name="bob"))
        service.create(_create(name="alice"))
        assert service.list_profiles() == (["alice", "bob"], "bob")

    def test_update_only_supplied_fields(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        original = service.create(_create())
        updated = service.update(
            ProfileUpdate(name="alice", commitment=CommitmentLevel.PROCESSED),
        )
        assert updated.commitment is CommitmentLevel.PROCESSED
        assert updated.rpc_url == original.rpc_url
        assert updated.cluster == original.cluster
        assert store.get("alice") == updated

    def test_update_unknown(self, store: JsonProfileStore) -> None:
        with pytest.raises(ProfileNotFoundError):
            ProfileService(store).update(ProfileUpdate(name="ghost"))

    def test_link_group(self, store: JsonProfileStore) -> None:
        service = ProfileService(store)
        profile = service.create(_create())
        group = Pubkey.new_unique()
        service.link_group(profile, group)
        assert store.get("alice").marginfi_group == group


class TestProfileCLI:
    def test_create_show_list_set_update(
        self, store: JsonProfileStore, capsys: pytest.CaptureFixture[str],
    ) -> None:
        base = ["--keypair-path", "/k.json", "--rpc-url", "https://r.example"]
        assert main(
            ["profile", "create", "--name", "alice", "--cluster", "devnet", *base],
            store=store,
        ) == exit_codes.SUCCESS
        assert main(
            ["profile", "create", "--name", "bob", "--cluster", "mainnet", *base],
            store=store,
        ) == exit_codes.SUCCESS

        assert main(["profile", "set", "--name", "bob"], store=store) == exit_codes.SUCCESS
        assert store.active_name() == "bob"

        assert main(
            ["profile", "update", "--name", "bob", "--commitment", "finalized"],
            store=store,
        ) == exit_codes.SUCCESS
        assert store.get("bob").commitment is CommitmentLevel.FINALIZED

        capsys.readouterr()
        assert main(["profile", "list"], store=store) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "* bob" in out
        assert "  alice" in out

        assert main(["profile", "show"], store=store) == exit_codes.SUCCESS
        assert "mainnet" in capsys.readouterr().out

    def test_create_requires_rpc_url(self, store: JsonProfileStore) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(
                ["profile", "create", "--name", "a", "--cluster", "devnet",
                 "--keypair-path", "/k.json"],
                store=store,
            )
        assert exc_info.value.code == 2

    def test_profile_commands_do_not_need_active_profile(
        self, store: JsonProfileStore,
    ) -> None:
        assert main(["profile", "list"], store=store) == exit_codes.SUCCESS

    @pytest.mark.parametrize(
        "argv",
        [
            ["profile", "--rpc-url", "http://x:1", "show"],
            ["--rpc-url", "http://x:1", "profile", "show"],
            ["--commitment", "processed", "profile", "list"],
            ["--cluster", "devnet", "doctor"],
        ],
    )
    def test_connection_overrides_rejected(
        self, argv: list[str], active_store: JsonProfileStore,
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv, store=active_store)
        assert exc_info.value.code == 2

    def test_log_level_still_accepted(self, active_store: JsonProfileStore) -> None:
        argv = ["profile", "--log-level", "debug", "show"]
        assert main(argv, store=active_store) == exit_codes.SUCCESS

"""Tests for consent classification (core/classifier.py)."""

from __future__ import annotations

import pytest
from solders.pubkey import Pubkey

from mfi_cli.core.classifier import requires_consent
from mfi_cli.core.commands import (
    BankGet,
    BankGetAll,
    BankOperationalStateArg,
    BankUpdate,
    GroupAddBank,
    GroupCreate,
    GroupGet,
    GroupGetAll,
    GroupUpdate,
    ProfileShow,
)

KEY = Pubkey.new_unique()


def _add_bank() -> GroupAddBank:
    return GroupAddBank(
        bank_mint=KEY,
        deposit_weight_init=1.0,
        deposit_weight_maint=1.0,
        liability_weight_init=1.0,
        liability_weight_maint=1.0,
        max_capacity=1,
        pyth_oracle=KEY,
        optimal_utilization_rate=0.8,
        plateau_interest_rate=0.1,
        max_interest_rate=1.0,
        insurance_fee_fixed_apr=0.0,
        insurance_ir_fee=0.0,
        protocol_fixed_fee_apr=0.0,
        protocol_ir_fee=0.0,
    )


class TestRequiresConsent:
    @pytest.mark.parametrize(
        "cmd",
        [
            GroupGet(),
            GroupGet(KEY),
            GroupGetAll(),
            BankGet(),
            BankGet(KEY),
            BankGetAll(),
            BankGetAll(KEY),
        ],
    )
    def test_read_only_commands_are_exempt(self, cmd: object) -> None:
        assert requires_consent(cmd) is False  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "cmd",
        [
            GroupCreate(),
            GroupCreate(KEY, override_existing_profile_group=True),
            GroupUpdate(),
            GroupUpdate(KEY),
            _add_bank(),
            BankUpdate(KEY),
            BankUpdate(KEY, max_capacity=0),
            BankUpdate(KEY, operational_state=BankOperationalStateArg.PAUSED),
        ],
    )
    def test_mutating_commands_require_consent(self, cmd: object) -> None:
        assert requires_consent(cmd) is True  # type: ignore[arg-type]

    def test_profile_command_is_not_classified(self) -> None:
        with pytest.raises(TypeError):
            requires_consent(ProfileShow())  # type: ignore[arg-type]

    def test_unknown_object_is_not_exempt(self) -> None:
        with pytest.raises(TypeError):
            requires_consent(object())  # type: ignore[arg-type]

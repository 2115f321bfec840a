"""Argument conversion from parsed commands to processor parameters.

Weights and rates arrive as floats from the command line and leave as
:class:`~mfi_cli.core.fixed.I80F48` values.  Absent optional inputs
stay absent; no defaults are introduced here.
"""

from __future__ import annotations

import struct

from mfi_cli.core.commands import BankUpdate, GroupAddBank
from mfi_cli.core.fixed import I80F48
from mfi_cli.core.models import BankConfig, BankConfigOpt, InterestRateConfig
from mfi_cli.exceptions import InvalidArgumentError


def optional_fixed(value: float | None) -> I80F48 | None:
    """Convert *value* to I80F48, passing ``None`` through."""
    if value is None:
        return None
    return I80F48.from_num(value)


def narrow_f32(value: float | None) -> float | None:
    """Round *value* to the nearest single-precision float.

    ``bank update`` weights are single precision; ``group add-bank``
    arguments stay double precision.

    Raises
    ------
    InvalidArgumentError
        If *value* is finite but too large for single precision.
    """
    if value is None:
        return None
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError as exc:
        raise InvalidArgumentError(
            f"{value} does not fit in a single-precision weight.",
        ) from exc


def build_bank_config_opt(cmd: BankUpdate) -> BankConfigOpt:
    """Build the partial update for ``bank update``.

    Weights are narrowed to single precision before conversion.  The
    oracle is never set on this path.
    """
    return BankConfigOpt(
        deposit_weight_init=optional_fixed(narrow_f32(cmd.deposit_weight_init)),
        deposit_weight_maint=optional_fixed(narrow_f32(cmd.deposit_weight_maint)),
        liability_weight_init=optional_fixed(narrow_f32(cmd.liability_weight_init)),
        liability_weight_maint=optional_fixed(narrow_f32(cmd.liability_weight_maint)),
        max_capacity=cmd.max_capacity,
        operational_state=(
            cmd.operational_state.to_state()
            if cmd.operational_state is not None
            else None
        ),
        oracle=None,
    )


def build_bank_config(cmd: GroupAddBank) -> BankConfig:
    """Build the full configuration for ``group add-bank``."""
    return BankConfig(
        deposit_weight_init=I80F48.from_num(cmd.deposit_weight_init),
        deposit_weight_maint=I80F48.from_num(cmd.deposit_weight_maint),
        liability_weight_init=I80F48.from_num(cmd.liability_weight_init),
        liability_weight_maint=I80F48.from_num(cmd.liability_weight_maint),
        max_capacity=cmd.max_capacity,
        pyth_oracle=cmd.pyth_oracle,
        interest_rate_config=InterestRateConfig(
            optimal_utilization_rate=I80F48.from_num(cmd.optimal_utilization_rate),
            plateau_interest_rate=I80F48.from_num(cmd.plateau_interest_rate),
            max_interest_rate=I80F48.from_num(cmd.max_interest_rate),
            insurance_fee_fixed_apr=I80F48.from_num(cmd.insurance_fee_fixed_apr),
            insurance_ir_fee=I80F48.from_num(cmd.insurance_ir_fee),
            protocol_fixed_fee_apr=I80F48.from_num(cmd.protocol_fixed_fee_apr),
            protocol_ir_fee=I80F48.from_num(cmd.protocol_ir_fee),
        ),
    )

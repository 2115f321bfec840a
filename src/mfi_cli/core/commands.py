"""Typed command values produced by the argument parser.

Each sub-command is its own frozen dataclass; the three command groups
are closed unions over those classes.  The top-level :data:`Command`
wraps exactly one sub-command in its group tag, so routing and consent
classification are plain ``isinstance`` dispatch.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from solders.pubkey import Pubkey

from mfi_cli.core.models import BankOperationalState, Cluster, CommitmentLevel


# ---------------------------------------------------------------------------
# Group commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GroupGet:
    marginfi_group: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class GroupGetAll:
    pass


@dataclass(frozen=True, slots=True)
class GroupCreate:
    admin: Pubkey | None = None
    override_existing_profile_group: bool = False


@dataclass(frozen=True, slots=True)
class GroupUpdate:
    admin: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class GroupAddBank:
    bank_mint: Pubkey
    deposit_weight_init: float
    deposit_weight_maint: float
    liability_weight_init: float
    liability_weight_maint: float
    max_capacity: int
    pyth_oracle: Pubkey
    optimal_utilization_rate: float
    plateau_interest_rate: float
    max_interest_rate: float
    insurance_fee_fixed_apr: float
    insurance_ir_fee: float
    protocol_fixed_fee_apr: float
    protocol_ir_fee: float


GroupCommand = Union[GroupGet, GroupGetAll, GroupCreate, GroupUpdate, GroupAddBank]


# ---------------------------------------------------------------------------
# Bank commands
# ---------------------------------------------------------------------------

class BankOperationalStateArg(str, enum.Enum):
    """Command-line spelling of :class:`BankOperationalState`."""

    PAUSED = "paused"
    OPERATIONAL = "operational"
    REDUCE_ONLY = "reduce-only"

    def to_state(self) -> BankOperationalState:
        return _STATE_BY_ARG[self]

    def __str__(self) -> str:
        return self.value


_STATE_BY_ARG: dict[BankOperationalStateArg, BankOperationalState] = {
    BankOperationalStateArg.PAUSED: BankOperationalState.PAUSED,
    BankOperationalStateArg.OPERATIONAL: BankOperationalState.OPERATIONAL,
    BankOperationalStateArg.REDUCE_ONLY: BankOperationalState.REDUCE_ONLY,
}


@dataclass(frozen=True, slots=True)
class BankGet:
    bank: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class BankGetAll:
    marginfi_group: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class BankUpdate:
    bank_pk: Pubkey
    deposit_weight_init: float | None = None
    deposit_weight_maint: float | None = None
    liability_weight_init: float | None = None
    liability_weight_maint: float | None = None
    max_capacity: int | None = None
    operational_state: BankOperationalStateArg | None = None


BankCommand = Union[BankGet, BankGetAll, BankUpdate]


# ---------------------------------------------------------------------------
# Profile commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProfileCreate:
    name: str
    cluster: Cluster
    keypair_path: str
    rpc_url: str
    program_id: Pubkey | None = None
    commitment: CommitmentLevel | None = None
    group: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class ProfileShow:
    pass


@dataclass(frozen=True, slots=True)
class ProfileList:
    pass


@dataclass(frozen=True, slots=True)
class ProfileSet:
    name: str


@dataclass(frozen=True, slots=True)
class ProfileUpdate:
    name: str
    cluster: Cluster | None = None
    keypair_path: str | None = None
    rpc_url: str | None = None
    program_id: Pubkey | None = None
    commitment: CommitmentLevel | None = None
    group: Pubkey | None = None


ProfileCommand = Union[ProfileCreate, ProfileShow, ProfileList, ProfileSet, ProfileUpdate]


# ---------------------------------------------------------------------------
# Top-level command
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GroupCmd:
    subcmd: GroupCommand


@dataclass(frozen=True, slots=True)
class BankCmd:
    subcmd: BankCommand


@dataclass(frozen=True, slots=True)
class ProfileCmd:
    subcmd: ProfileCommand


Command = Union[GroupCmd, BankCmd, ProfileCmd]

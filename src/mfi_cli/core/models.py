"""Domain models for mfi-cli.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access and the profile/override merge.  Account
addresses are :class:`solders.pubkey.Pubkey` values; everything else is
plain Python.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from solders.pubkey import Pubkey

from mfi_cli.core.fixed import I80F48
from mfi_cli.exceptions import InvalidArgumentError

DEFAULT_PROGRAM_ID: Pubkey = Pubkey.from_string(
    "MFv2hWf31Z9kbCa1snEPYctwafyhdvnV7FZnsebVacA",
)
"""Published marginfi v2 program id, used when a profile sets none."""


def parse_pubkey(value: str) -> Pubkey:
    """Parse a base58 account address.

    Raises
    ------
    InvalidArgumentError
        If *value* is not a valid 32-byte base58 public key.
    """
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid public key: {value!r}",
            hint="Public keys are 32-byte base58 strings.",
        ) from exc


# ---------------------------------------------------------------------------
# Cluster / commitment
# ---------------------------------------------------------------------------

_KNOWN_CLUSTERS: dict[str, str] = {
    "localnet": "http://127.0.0.1:8899",
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}

_CLUSTER_ALIASES: dict[str, str] = {
    "l": "localnet",
    "d": "devnet",
    "t": "testnet",
    "m": "mainnet",
    "mainnet-beta": "mainnet",
}


@dataclass(frozen=True, slots=True)
class Cluster:
    """A named Solana cluster or a custom endpoint."""

    name: str
    """``localnet``, ``devnet``, ``testnet``, ``mainnet`` or ``custom``."""

    url: str
    """Default JSON-RPC endpoint for this cluster."""

    @classmethod
    def parse(cls, value: str) -> Cluster:
        """Parse a cluster moniker, alias, or ``http(s)://`` URL."""
        raw = value.strip()
        lowered = raw.lower()
        canonical = _CLUSTER_ALIASES.get(lowered, lowered)
        if canonical in _KNOWN_CLUSTERS:
            return cls(name=canonical, url=_KNOWN_CLUSTERS[canonical])
        if lowered.startswith(("http://", "https://")):
            return cls(name="custom", url=raw)
        raise InvalidArgumentError(
            f"Unknown cluster: {value!r}",
            hint="Use localnet, devnet, testnet, mainnet, or an http(s) URL.",
        )

    def __str__(self) -> str:
        return self.url if self.name == "custom" else self.name


class CommitmentLevel(str, enum.Enum):
    """Commitment level requested from the RPC node."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @classmethod
    def parse(cls, value: str) -> CommitmentLevel:
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(level.value for level in cls)
            raise InvalidArgumentError(
                f"Unknown commitment level: {value!r}",
                hint=f"Choose one of: {choices}.",
            ) from exc

    def __str__(self) -> str:
        return self.value


DEFAULT_COMMITMENT: CommitmentLevel = CommitmentLevel.CONFIRMED


# ---------------------------------------------------------------------------
# Configuration layers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Per-invocation overrides.  ``None`` means "use the profile value"."""

    cluster: Cluster | None = None
    rpc_url: str | None = None
    program_id: Pubkey | None = None
    commitment: CommitmentLevel | None = None
    keypair_path: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Effective connection configuration for one command execution.

    Built fresh per invocation and never persisted.  The signer keypair
    is loaded from :attr:`keypair_path` only when a transaction has to
    be signed.
    """

    cluster: Cluster
    rpc_url: str
    program_id: Pubkey
    commitment: CommitmentLevel
    keypair_path: str


@dataclass(frozen=True, slots=True)
class Profile:
    """A named, persisted connection profile."""

    name: str
    cluster: Cluster
    keypair_path: str
    rpc_url: str
    program_id: Pubkey | None = None
    commitment: CommitmentLevel | None = None
    marginfi_group: Pubkey | None = None

    def get_config(self, overrides: GlobalOptions | None = None) -> Config:
        """Merge this profile with *overrides*; a present override wins.

        The merge is field-independent: no cross-field validation is
        performed (a devnet cluster with a mainnet program id is
        accepted as given).
        """
        opts = overrides if overrides is not None else GlobalOptions()
        program_id = _first(opts.program_id, self.program_id)
        commitment = _first(opts.commitment, self.commitment)
        return Config(
            cluster=_first(opts.cluster, self.cluster),
            rpc_url=_first(opts.rpc_url, self.rpc_url),
            program_id=program_id if program_id is not None else DEFAULT_PROGRAM_ID,
            commitment=commitment if commitment is not None else DEFAULT_COMMITMENT,
            keypair_path=_first(opts.keypair_path, self.keypair_path),
        )


def _first(override: Any, fallback: Any) -> Any:
    return override if override is not None else fallback


# ---------------------------------------------------------------------------
# Bank configuration
# ---------------------------------------------------------------------------

class BankOperationalState(enum.IntEnum):
    """Administrative lifecycle state of a bank (on-chain ordinal)."""

    PAUSED = 0
    OPERATIONAL = 1
    REDUCE_ONLY = 2


@dataclass(frozen=True, slots=True)
class BankConfigOpt:
    """Partial bank update.  ``None`` fields are left untouched on-chain."""

    deposit_weight_init: I80F48 | None = None
    deposit_weight_maint: I80F48 | None = None
    liability_weight_init: I80F48 | None = None
    liability_weight_maint: I80F48 | None = None
    max_capacity: int | None = None
    operational_state: BankOperationalState | None = None
    oracle: Pubkey | None = None


@dataclass(frozen=True, slots=True)
class InterestRateConfig:
    """Interest-rate curve and fee schedule of a bank."""

    optimal_utilization_rate: I80F48
    plateau_interest_rate: I80F48
    max_interest_rate: I80F48
    insurance_fee_fixed_apr: I80F48
    insurance_ir_fee: I80F48
    protocol_fixed_fee_apr: I80F48
    protocol_ir_fee: I80F48


@dataclass(frozen=True, slots=True)
class BankConfig:
    """Complete configuration a new bank is created with."""

    deposit_weight_init: I80F48
    deposit_weight_maint: I80F48
    liability_weight_init: I80F48
    liability_weight_maint: I80F48
    max_capacity: int
    pyth_oracle: Pubkey
    interest_rate_config: InterestRateConfig


# ---------------------------------------------------------------------------
# Processor results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AccountView:
    """Decoded snapshot of one program account."""

    address: Pubkey
    kind: str
    """Account type name, e.g. ``MarginfiGroup`` or ``Bank``."""

    lamports: int
    data_len: int
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TransactionReceipt:
    """Outcome of a confirmed write."""

    signature: str
    created: dict[str, Pubkey] = field(default_factory=dict)
    """Addresses of accounts created by the transaction, by role."""

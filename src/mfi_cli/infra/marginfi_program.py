"""Anchor wire format of the marginfi program.

Instruction data is an 8-byte Anchor discriminator
(``sha256("global:<name>")[:8]``) followed by Borsh-encoded arguments.
Accounts start with an 8-byte discriminator
(``sha256("account:<Type>")[:8]``).  Only the layouts this tool reads
or writes are described here.
"""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Callable
from typing import Any, TypeVar

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import RENT

from mfi_cli.core.fixed import I80F48
from mfi_cli.core.models import BankConfig, BankConfigOpt
from mfi_cli.exceptions import InvalidArgumentError, ProcessorError

T = TypeVar("T")

TOKEN_PROGRAM_ID: Pubkey = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")

GROUP_ACCOUNT: str = "MarginfiGroup"
BANK_ACCOUNT: str = "Bank"

BANK_MINT_OFFSET: int = 8
BANK_MINT_DECIMALS_OFFSET: int = 40
BANK_GROUP_OFFSET: int = 41
GROUP_ADMIN_OFFSET: int = 8

_U64_MAX: int = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Discriminators
# ---------------------------------------------------------------------------

def instruction_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


def account_discriminator(type_name: str) -> bytes:
    return hashlib.sha256(f"account:{type_name}".encode()).digest()[:8]


# ---------------------------------------------------------------------------
# Borsh encoding
# ---------------------------------------------------------------------------

def encode_u8(value: int) -> bytes:
    return struct.pack("<B", value)


def encode_u64(value: int) -> bytes:
    if not 0 <= value <= _U64_MAX:
        raise InvalidArgumentError(f"{value} does not fit in an unsigned 64-bit integer.")
    return struct.pack("<Q", value)


def encode_pubkey(value: Pubkey) -> bytes:
    return bytes(value)


def encode_fixed(value: I80F48) -> bytes:
    return value.to_bytes()


def encode_option(value: T | None, encoder: Callable[[T], bytes]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + encoder(value)


def encode_bank_config(config: BankConfig) -> bytes:
    rates = config.interest_rate_config
    return b"".join(
        (
            encode_fixed(config.deposit_weight_init),
            encode_fixed(config.deposit_weight_maint),
            encode_fixed(config.liability_weight_init),
            encode_fixed(config.liability_weight_maint),
            encode_u64(config.max_capacity),
            encode_pubkey(config.pyth_oracle),
            encode_fixed(rates.optimal_utilization_rate),
            encode_fixed(rates.plateau_interest_rate),
            encode_fixed(rates.max_interest_rate),
            encode_fixed(rates.insurance_fee_fixed_apr),
            encode_fixed(rates.insurance_ir_fee),
            encode_fixed(rates.protocol_fixed_fee_apr),
            encode_fixed(rates.protocol_ir_fee),
        )
    )


def encode_bank_config_opt(opt: BankConfigOpt) -> bytes:
    return b"".join(
        (
            encode_option(opt.deposit_weight_init, encode_fixed),
            encode_option(opt.deposit_weight_maint, encode_fixed),
            encode_option(opt.liability_weight_init, encode_fixed),
            encode_option(opt.liability_weight_maint, encode_fixed),
            encode_option(opt.max_capacity, encode_u64),
            encode_option(
                int(opt.operational_state) if opt.operational_state is not None else None,
                encode_u8,
            ),
            encode_option(opt.oracle, encode_pubkey),
        )
    )


# ---------------------------------------------------------------------------
# Program-derived addresses
# ---------------------------------------------------------------------------

VAULT_SEEDS: dict[str, bytes] = {
    "liquidity_vault_authority": b"liquidity_vault_auth",
    "liquidity_vault": b"liquidity_vault",
    "insurance_vault_authority": b"insurance_vault_auth",
    "insurance_vault": b"insurance_vault",
    "fee_vault_authority": b"fee_vault_auth",
    "fee_vault": b"fee_vault",
}


def bank_vault_address(program_id: Pubkey, bank: Pubkey, role: str) -> Pubkey:
    address, _bump = Pubkey.find_program_address([VAULT_SEEDS[role], bytes(bank)], program_id)
    return address


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------

def group_initialize_ix(program_id: Pubkey, group: Pubkey, admin: Pubkey) -> Instruction:
    return Instruction(
        program_id,
        instruction_discriminator("marginfi_group_initialize"),
        [
            AccountMeta(group, is_signer=True, is_writable=True),
            AccountMeta(admin, is_signer=True, is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        ],
    )


def group_configure_ix(
    program_id: Pubkey,
    group: Pubkey,
    admin: Pubkey,
    new_admin: Pubkey | None,
) -> Instruction:
    data = instruction_discriminator("marginfi_group_configure") + encode_option(
        new_admin, encode_pubkey,
    )
    return Instruction(
        program_id,
        data,
        [
            AccountMeta(group, is_signer=False, is_writable=True),
            AccountMeta(admin, is_signer=True, is_writable=False),
        ],
    )


def add_bank_ix(
    program_id: Pubkey,
    group: Pubkey,
    admin: Pubkey,
    bank_mint: Pubkey,
    bank: Pubkey,
    config: BankConfig,
) -> Instruction:
    def vault(role: str, writable: bool) -> AccountMeta:
        return AccountMeta(
            bank_vault_address(program_id, bank, role),
            is_signer=False,
            is_writable=writable,
        )

    data = instruction_discriminator("lending_pool_add_bank") + encode_bank_config(config)
    return Instruction(
        program_id,
        data,
        [
            AccountMeta(group, is_signer=False, is_writable=False),
            AccountMeta(admin, is_signer=True, is_writable=True),
            AccountMeta(bank_mint, is_signer=False, is_writable=False),
            AccountMeta(bank, is_signer=True, is_writable=True),
            vault("liquidity_vault_authority", False),
            vault("liquidity_vault", True),
            vault("insurance_vault_authority", False),
            vault("insurance_vault", True),
            vault("fee_vault_authority", False),
            vault("fee_vault", True),
            AccountMeta(RENT, is_signer=False, is_writable=False),
            AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(config.pyth_oracle, is_signer=False, is_writable=False),
        ],
    )


def configure_bank_ix(
    program_id: Pubkey,
    group: Pubkey,
    admin: Pubkey,
    bank: Pubkey,
    opt: BankConfigOpt,
) -> Instruction:
    data = instruction_discriminator("lending_pool_configure_bank") + encode_bank_config_opt(opt)
    return Instruction(
        program_id,
        data,
        [
            AccountMeta(group, is_signer=False, is_writable=False),
            AccountMeta(admin, is_signer=True, is_writable=False),
            AccountMeta(bank, is_signer=False, is_writable=True),
        ],
    )


# ---------------------------------------------------------------------------
# Account decoding
# ---------------------------------------------------------------------------

def _check_discriminator(data: bytes, type_name: str, min_len: int) -> None:
    if len(data) < min_len or data[:8] != account_discriminator(type_name):
        raise ProcessorError(f"Account data is not a {type_name} account.")


def decode_group(data: bytes) -> dict[str, Any]:
    _check_discriminator(data, GROUP_ACCOUNT, GROUP_ADMIN_OFFSET + 32)
    admin = Pubkey.from_bytes(data[GROUP_ADMIN_OFFSET:GROUP_ADMIN_OFFSET + 32])
    return {"admin": admin}


def decode_bank(data: bytes) -> dict[str, Any]:
    _check_discriminator(data, BANK_ACCOUNT, BANK_GROUP_OFFSET + 32)
    return {
        "mint": Pubkey.from_bytes(data[BANK_MINT_OFFSET:BANK_MINT_OFFSET + 32]),
        "mint_decimals": data[BANK_MINT_DECIMALS_OFFSET],
        "group": Pubkey.from_bytes(data[BANK_GROUP_OFFSET:BANK_GROUP_OFFSET + 32]),
    }

"""Solana RPC backed implementation of :class:`~mfi_cli.core.protocols.Processor`.

This module is the **only** place in the codebase that talks to a
Solana node.  Every solana-py / transport exception is caught here and
re-raised as :class:`~mfi_cli.exceptions.ProcessorError` with the
original exception chained as ``__cause__``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import base58
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solana.rpc.types import MemcmpOpts, TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from mfi_cli.core.models import (
    AccountView,
    BankConfig,
    BankConfigOpt,
    Config,
    Profile,
    TransactionReceipt,
)
from mfi_cli.core.profile_service import ProfileService
from mfi_cli.core.protocols import ProfileStore
from mfi_cli.exceptions import InvalidArgumentError, MfiCliError, ProcessorError
from mfi_cli.infra import marginfi_program as program
from mfi_cli.infra.keypair import load_keypair

logger = logging.getLogger(__name__)


class SolanaProcessor:
    """Concrete :class:`Processor` bound to one resolved :class:`Config`.

    Parameters
    ----------
    config:
        Effective connection configuration.
    store:
        Profile store, used to link a newly created group to its profile.
    client:
        Optional pre-built RPC client (tests inject a mock).
    signer_loader:
        Loads the signing keypair from ``config.keypair_path``.
    """

    def __init__(
        self,
        config: Config,
        store: ProfileStore,
        *,
        client: Any | None = None,
        signer_loader: Callable[[str], Keypair] = load_keypair,
    ) -> None:
        self._config: Config = config
        self._store: ProfileStore = store
        self._commitment = Commitment(config.commitment.value)
        self._client: Any = (
            client
            if client is not None
            else Client(config.rpc_url, commitment=self._commitment)
        )
        self._signer_loader = signer_loader

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def group_get(self, marginfi_group: Pubkey | None) -> AccountView:
        if marginfi_group is None:
            raise InvalidArgumentError(
                "No marginfi group given and the profile has no default group.",
                hint="Pass a group address or set one with `mfi profile update --group`.",
            )
        return self._fetch_view(marginfi_group, program.GROUP_ACCOUNT, program.decode_group)

    def group_get_all(self) -> list[AccountView]:
        return self._fetch_program_views(program.GROUP_ACCOUNT, program.decode_group, [])

    def bank_get(self, bank: Pubkey | None) -> AccountView:
        if bank is None:
            raise InvalidArgumentError(
                "No bank address given.",
                hint="Use `mfi bank get-all` to list banks.",
            )
        return self._fetch_view(bank, program.BANK_ACCOUNT, program.decode_bank)

    def bank_get_all(self, marginfi_group: Pubkey | None) -> list[AccountView]:
        filters: list[MemcmpOpts] = []
        if marginfi_group is not None:
            filters.append(
                MemcmpOpts(
                    offset=program.BANK_GROUP_OFFSET,
                    bytes=base58.b58encode(bytes(marginfi_group)).decode(),
                )
            )
        return self._fetch_program_views(program.BANK_ACCOUNT, program.decode_bank, filters)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def group_create(
        self,
        profile: Profile,
        admin: Pubkey | None,
        override_existing_profile_group: bool,
    ) -> TransactionReceipt:
        if profile.marginfi_group is not None and not override_existing_profile_group:
            raise InvalidArgumentError(
                f"Profile {profile.name!r} already has marginfi group {profile.marginfi_group}.",
                hint="Pass --override to replace the profile's group.",
            )

        signer = self._signer()
        group_keypair = Keypair()
        group = group_keypair.pubkey()
        pid = self._config.program_id

        instructions = [program.group_initialize_ix(pid, group, signer.pubkey())]
        if admin is not None and admin != signer.pubkey():
            instructions.append(program.group_configure_ix(pid, group, signer.pubkey(), admin))

        signature = self._send(instructions, [signer, group_keypair])
        ProfileService(self._store).link_group(profile, group)
        return TransactionReceipt(signature=signature, created={"marginfi_group": group})

    def group_configure(self, profile: Profile, admin: Pubkey | None) -> TransactionReceipt:
        group = self._profile_group(profile)
        signer = self._signer()
        ix = program.group_configure_ix(self._config.program_id, group, signer.pubkey(), admin)
        return TransactionReceipt(signature=self._send([ix], [signer]))

    def group_add_bank(
        self,
        profile: Profile,
        bank_mint: Pubkey,
        bank_config: BankConfig,
    ) -> TransactionReceipt:
        group = self._profile_group(profile)
        signer = self._signer()
        bank_keypair = Keypair()
        ix = program.add_bank_ix(
            self._config.program_id,
            group,
            signer.pubkey(),
            bank_mint,
            bank_keypair.pubkey(),
            bank_config,
        )
        signature = self._send([ix], [signer, bank_keypair])
        return TransactionReceipt(signature=signature, created={"bank": bank_keypair.pubkey()})

    def bank_configure(
        self,
        profile: Profile,
        bank: Pubkey,
        bank_config_opt: BankConfigOpt,
    ) -> TransactionReceipt:
        group = self._profile_group(profile)
        signer = self._signer()
        ix = program.configure_bank_ix(
            self._config.program_id, group, signer.pubkey(), bank, bank_config_opt,
        )
        return TransactionReceipt(signature=self._send([ix], [signer]))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _profile_group(profile: Profile) -> Pubkey:
        if profile.marginfi_group is None:
            raise InvalidArgumentError(
                f"Profile {profile.name!r} has no marginfi group.",
                hint="Create one with `mfi group create` or set it with "
                "`mfi profile update --group`.",
            )
        return profile.marginfi_group

    def _signer(self) -> Keypair:
        return self._signer_loader(self._config.keypair_path)

    def _rpc(self, action: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call the RPC client and ensure only our exceptions escape."""
        try:
            return fn(*args, **kwargs)
        except MfiCliError:
            raise
        except Exception as exc:
            raise ProcessorError(
                f"RPC {action} failed: {exc}",
                hint=f"Endpoint: {self._config.rpc_url}",
            ) from exc

    def _fetch_view(
        self,
        address: Pubkey,
        kind: str,
        decoder: Callable[[bytes], dict[str, Any]],
    ) -> AccountView:
        resp = self._rpc("getAccountInfo", self._client.get_account_info, address)
        account = resp.value
        if account is None:
            raise ProcessorError(f"{kind} account {address} not found.")
        if account.owner != self._config.program_id:
            raise ProcessorError(
                f"{address} is not owned by program {self._config.program_id}.",
            )
        data = bytes(account.data)
        return AccountView(
            address=address,
            kind=kind,
            lamports=account.lamports,
            data_len=len(data),
            fields=decoder(data),
        )

    def _fetch_program_views(
        self,
        kind: str,
        decoder: Callable[[bytes], dict[str, Any]],
        extra_filters: Sequence[MemcmpOpts],
    ) -> list[AccountView]:
        discriminator = program.account_discriminator(kind)
        filters = [
            MemcmpOpts(offset=0, bytes=base58.b58encode(discriminator).decode()),
            *extra_filters,
        ]
        resp = self._rpc(
            "getProgramAccounts",
            self._client.get_program_accounts,
            self._config.program_id,
            encoding="base64",
            filters=filters,
        )
        views = []
        for keyed in resp.value:
            data = bytes(keyed.account.data)
            views.append(
                AccountView(
                    address=keyed.pubkey,
                    kind=kind,
                    lamports=keyed.account.lamports,
                    data_len=len(data),
                    fields=decoder(data),
                )
            )
        logger.debug("Fetched %d %s accounts", len(views), kind)
        return views

    def _send(self, instructions: list[Instruction], signers: list[Keypair]) -> str:
        payer = signers[0]
        blockhash_resp = self._rpc("getLatestBlockhash", self._client.get_latest_blockhash)
        blockhash = blockhash_resp.value.blockhash
        message = Message.new_with_blockhash(instructions, payer.pubkey(), blockhash)
        tx = Transaction(signers, message, blockhash)

        send_resp = self._rpc(
            "sendTransaction",
            self._client.send_transaction,
            tx,
            opts=TxOpts(preflight_commitment=self._commitment),
        )
        signature = send_resp.value
        logger.info("Sent transaction %s", signature)
        confirm_resp = self._rpc(
            "confirmTransaction",
            self._client.confirm_transaction,
            signature,
            self._commitment,
        )
        status = confirm_resp.value[0] if confirm_resp.value else None
        if status is None:
            raise ProcessorError(f"Transaction {signature} was not confirmed.")
        if status.err:
            logger.warning("Transaction %s failed: %s", signature, status.err)
            raise ProcessorError(
                f"Transaction {signature} failed on-chain: {status.err}",
                hint="Nothing was changed; check the program logs for the failing instruction.",
            )
        return str(signature)

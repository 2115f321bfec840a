"""CLI application entry point and command routing for mfi-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~mfi_cli.exceptions.MfiCliError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* Argument parsing produces typed command values
  (:mod:`mfi_cli.core.commands`); everything after that is delegated to
  :class:`~mfi_cli.cli.dispatch.Dispatcher`.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from typing import Any, TextIO

from mfi_cli.cli import exit_codes
from mfi_cli.cli.console import console
from mfi_cli.cli.log import LOG_LEVELS, configure_logging
from mfi_cli.core import commands as cmds
from mfi_cli.core.models import (
    Cluster,
    CommitmentLevel,
    GlobalOptions,
    parse_pubkey,
)
from mfi_cli.core.protocols import ProcessorFactory, ProfileStore
from mfi_cli.exceptions import ConsentAbortedError, MfiCliError
from mfi_cli.version import __version__

_U64_MAX: int = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------

def _argtype(parse: Callable[[str], Any]) -> Callable[[str], Any]:
    """Adapt a domain parser so argparse reports its errors."""

    def convert(value: str) -> Any:
        try:
            return parse(value)
        except MfiCliError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = parse.__name__
    return convert


pubkey_arg = _argtype(parse_pubkey)
cluster_arg = _argtype(Cluster.parse)
commitment_arg = _argtype(CommitmentLevel.parse)


def u64_arg(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if not 0 <= number <= _U64_MAX:
        raise argparse.ArgumentTypeError(f"{number} is not an unsigned 64-bit integer")
    return number


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _log_level_parser() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=argparse.SUPPRESS,
                        help="Log verbosity (default: $MFI_CLI_LOG or WARNING).")
    return parent


def _global_options_parser() -> argparse.ArgumentParser:
    """Overrides accepted before or after any sub-command."""
    parent = argparse.ArgumentParser(add_help=False, parents=[_log_level_parser()])
    group = parent.add_argument_group("global options")
    group.add_argument("--cluster", type=cluster_arg, default=argparse.SUPPRESS,
                       help="Override the profile's cluster.")
    group.add_argument("--rpc-url", default=argparse.SUPPRESS,
                       help="Override the profile's RPC endpoint.")
    group.add_argument("--program-id", type=pubkey_arg, default=argparse.SUPPRESS,
                       help="Override the marginfi program id.")
    group.add_argument("--commitment", type=commitment_arg, default=argparse.SUPPRESS,
                       help="Override the commitment level.")
    group.add_argument("--keypair-path", default=argparse.SUPPRESS,
                       help="Override the signer keypair file.")
    return parent


def _add_group_parsers(sub: Any, common: argparse.ArgumentParser) -> None:
    group_parser = sub.add_parser("group", help="Marginfi group commands.", parents=[common])
    group_sub = group_parser.add_subparsers(dest="subcommand", metavar="COMMAND", required=True)

    p = group_sub.add_parser("get", parents=[common], help="Show a group (read-only).")
    p.add_argument("marginfi_group", nargs="?", type=pubkey_arg, default=None)
    p.set_defaults(build=lambda ns: cmds.GroupCmd(cmds.GroupGet(ns.marginfi_group)))

    p = group_sub.add_parser("get-all", parents=[common], help="List all groups (read-only).")
    p.set_defaults(build=lambda ns: cmds.GroupCmd(cmds.GroupGetAll()))

    p = group_sub.add_parser("create", parents=[common], help="Create a new group.")
    p.add_argument("admin", nargs="?", type=pubkey_arg, default=None)
    p.add_argument("-f", "--override", dest="override_existing_profile_group",
                   action="store_true",
                   help="Replace the group already linked to the profile.")
    p.set_defaults(
        build=lambda ns: cmds.GroupCmd(
            cmds.GroupCreate(ns.admin, ns.override_existing_profile_group)
        )
    )

    p = group_sub.add_parser("update", parents=[common], help="Update the profile's group.")
    p.add_argument("admin", nargs="?", type=pubkey_arg, default=None)
    p.set_defaults(build=lambda ns: cmds.GroupCmd(cmds.GroupUpdate(ns.admin)))

    p = group_sub.add_parser("add-bank", parents=[common], help="Add a bank to the group.")
    p.add_argument("bank_mint", type=pubkey_arg)
    for name in (
        "deposit_weight_init",
        "deposit_weight_maint",
        "liability_weight_init",
        "liability_weight_maint",
    ):
        p.add_argument(name, type=float)
    p.add_argument("max_capacity", type=u64_arg)
    p.add_argument("pyth_oracle", type=pubkey_arg)
    for name in (
        "optimal_utilization_rate",
        "plateau_interest_rate",
        "max_interest_rate",
        "insurance_fee_fixed_apr",
        "insurance_ir_fee",
        "protocol_fixed_fee_apr",
        "protocol_ir_fee",
    ):
        p.add_argument(name, type=float)
    p.set_defaults(
        build=lambda ns: cmds.GroupCmd(
            cmds.GroupAddBank(
                bank_mint=ns.bank_mint,
                deposit_weight_init=ns.deposit_weight_init,
                deposit_weight_maint=ns.deposit_weight_maint,
                liability_weight_init=ns.liability_weight_init,
                liability_weight_maint=ns.liability_weight_maint,
                max_capacity=ns.max_capacity,
                pyth_oracle=ns.pyth_oracle,
                optimal_utilization_rate=ns.optimal_utilization_rate,
                plateau_interest_rate=ns.plateau_interest_rate,
                max_interest_rate=ns.max_interest_rate,
                insurance_fee_fixed_apr=ns.insurance_fee_fixed_apr,
                insurance_ir_fee=ns.insurance_ir_fee,
                protocol_fixed_fee_apr=ns.protocol_fixed_fee_apr,
                protocol_ir_fee=ns.protocol_ir_fee,
            )
        )
    )


def _add_bank_parsers(sub: Any, common: argparse.ArgumentParser) -> None:
    bank_parser = sub.add_parser("bank", help="Bank commands.", parents=[common])
    bank_sub = bank_parser.add_subparsers(dest="subcommand", metavar="COMMAND", required=True)

    p = bank_sub.add_parser("get", parents=[common], help="Show a bank (read-only).")
    p.add_argument("bank", nargs="?", type=pubkey_arg, default=None)
    p.set_defaults(build=lambda ns: cmds.BankCmd(cmds.BankGet(ns.bank)))

    p = bank_sub.add_parser("get-all", parents=[common], help="List banks (read-only).")
    p.add_argument("marginfi_group", nargs="?", type=pubkey_arg, default=None)
    p.set_defaults(build=lambda ns: cmds.BankCmd(cmds.BankGetAll(ns.marginfi_group)))

    p = bank_sub.add_parser("update", parents=[common], help="Update a bank's configuration.")
    p.add_argument("bank_pk", type=pubkey_arg)
    p.add_argument("--deposit-weight-init", type=float)
    p.add_argument("--deposit-weight-maint", type=float)
    p.add_argument("--liability-weight-init", type=float)
    p.add_argument("--liability-weight-maint", type=float)
    p.add_argument("--max-capacity", type=u64_arg)
    p.add_argument(
        "--operational-state",
        type=cmds.BankOperationalStateArg,
        choices=list(cmds.BankOperationalStateArg),
    )
    p.set_defaults(
        build=lambda ns: cmds.BankCmd(
            cmds.BankUpdate(
                bank_pk=ns.bank_pk,
                deposit_weight_init=ns.deposit_weight_init,
                deposit_weight_maint=ns.deposit_weight_maint,
                liability_weight_init=ns.liability_weight_init,
                liability_weight_maint=ns.liability_weight_maint,
                max_capacity=ns.max_capacity,
                operational_state=ns.operational_state,
            )
        )
    )


def _add_profile_parsers(sub: Any) -> None:
    profile_parser = sub.add_parser(
        "profile", help="Local profile commands.", parents=[_log_level_parser()],
    )
    profile_sub = profile_parser.add_subparsers(
        dest="subcommand", metavar="COMMAND", required=True,
    )
    log_only = _log_level_parser()

    # ``--cluster`` etc. double as global overrides, so profile fields use
    # their own destinations.
    def profile_fields(p: argparse.ArgumentParser, *, required: bool) -> None:
        p.add_argument("--name", dest="profile_name", required=True)
        p.add_argument("--cluster", dest="profile_cluster", type=cluster_arg, required=required)
        p.add_argument("--keypair-path", dest="profile_keypair_path", required=required)
        p.add_argument("--rpc-url", dest="profile_rpc_url", required=required)
        p.add_argument("--program-id", dest="profile_program_id", type=pubkey_arg)
        p.add_argument("--commitment", dest="profile_commitment", type=commitment_arg)
        p.add_argument("--group", dest="profile_group", type=pubkey_arg)

    p = profile_sub.add_parser("create", parents=[log_only], help="Create a profile.")
    profile_fields(p, required=True)
    p.set_defaults(
        build=lambda ns: cmds.ProfileCmd(
            cmds.ProfileCreate(
                name=ns.profile_name,
                cluster=ns.profile_cluster,
                keypair_path=ns.profile_keypair_path,
                rpc_url=ns.profile_rpc_url,
                program_id=ns.profile_program_id,
                commitment=ns.profile_commitment,
                group=ns.profile_group,
            )
        )
    )

    p = profile_sub.add_parser("show", parents=[log_only], help="Show the active profile.")
    p.set_defaults(build=lambda ns: cmds.ProfileCmd(cmds.ProfileShow()))

    p = profile_sub.add_parser("list", parents=[log_only], help="List profiles.")
    p.set_defaults(build=lambda ns: cmds.ProfileCmd(cmds.ProfileList()))

    p = profile_sub.add_parser("set", parents=[log_only], help="Select the active profile.")
    p.add_argument("--name", dest="profile_name", required=True)
    p.set_defaults(build=lambda ns: cmds.ProfileCmd(cmds.ProfileSet(ns.profile_name)))

    p = profile_sub.add_parser("update", parents=[log_only], help="Update fields of a profile.")
    profile_fields(p, required=False)
    p.set_defaults(
        build=lambda ns: cmds.ProfileCmd(
            cmds.ProfileUpdate(
                name=ns.profile_name,
                cluster=ns.profile_cluster,
                keypair_path=ns.profile_keypair_path,
                rpc_url=ns.profile_rpc_url,
                program_id=ns.profile_program_id,
                commitment=ns.profile_commitment,
                group=ns.profile_group,
            )
        )
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``mfi group|bank <command> ...`` : on-chain reads and writes
    * ``mfi profile <command> ...``    : local profile management
    * ``mfi doctor``                   : environment diagnostics
    * ``mfi --version``
    """
    common = _global_options_parser()
    parser = argparse.ArgumentParser(
        prog="mfi",
        description="Administrative CLI for marginfi lending-protocol deployments.",
        parents=[common],
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = parser.add_subparsers(dest="group", metavar="GROUP")
    _add_group_parsers(sub, common)
    _add_bank_parsers(sub, common)
    _add_profile_parsers(sub)
    sub.add_parser("doctor", parents=[_log_level_parser()], help="Check the runtime environment.")
    return parser


def global_options(args: argparse.Namespace) -> GlobalOptions:
    """Collect the override flags present on *args*."""
    return GlobalOptions(
        cluster=getattr(args, "cluster", None),
        rpc_url=getattr(args, "rpc_url", None),
        program_id=getattr(args, "program_id", None),
        commitment=getattr(args, "commitment", None),
        keypair_path=getattr(args, "keypair_path", None),
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _default_store() -> ProfileStore:
    from mfi_cli.infra.profile_store import JsonProfileStore

    return JsonProfileStore()


def _default_processor_factory(store: ProfileStore) -> ProcessorFactory:
    from mfi_cli.infra.rpc_processor import SolanaProcessor

    return lambda config: SolanaProcessor(config, store)


def _handle_doctor(store: ProfileStore) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from mfi_cli.cli.doctor import run_doctor

    return run_doctor(store)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    store: ProfileStore | None = None,
    processor_factory: ProcessorFactory | None = None,
    stdin: TextIO | None = None,
) -> int:
    """Run the mfi CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    store, processor_factory, stdin:
        Collaborators to use instead of the JSON profile store, the
        Solana RPC processor and ``sys.stdin``.  Accepting them enables
        deterministic testing without monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    from mfi_cli.cli.dispatch import Dispatcher

    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "log_level", None))

    if args.group is None:
        parser.print_help()
        return exit_codes.SUCCESS

    overrides = global_options(args)
    if args.group in ("profile", "doctor") and overrides != GlobalOptions():
        parser.error(f"connection overrides do not apply to `{args.group}` commands")

    profile_store = store if store is not None else _default_store()

    if args.group == "doctor":
        return _handle_doctor(profile_store)

    factory = (
        processor_factory
        if processor_factory is not None
        else _default_processor_factory(profile_store)
    )
    dispatcher = Dispatcher(profile_store, factory, stdin=stdin)
    return dispatcher.run(args.build(args), overrides)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ConsentAbortedError:
        console.print("Aborting", markup=False)
        sys.exit(exit_codes.GENERAL_ERROR)
    except MfiCliError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)

"""Infrastructure layer: external system integration.

This layer wraps all interaction with the Solana RPC node, keypair
files and the local profile directory.  Every raw third-party exception
must be caught here and re-raised as a
:class:`~mfi_cli.exceptions.MfiCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from mfi_cli.infra.keypair import load_keypair
from mfi_cli.infra.profile_store import JsonProfileStore, default_config_dir
from mfi_cli.infra.rpc_processor import SolanaProcessor

__all__: list[str] = [
    "JsonProfileStore",
    "SolanaProcessor",
    "default_config_dir",
    "load_keypair",
]

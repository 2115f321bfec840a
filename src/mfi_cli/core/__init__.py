"""Core / service layer: pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Remote and storage access go through :mod:`mfi_cli.core.protocols`.
"""

from mfi_cli.core.classifier import requires_consent
from mfi_cli.core.fixed import I80F48
from mfi_cli.core.models import (
    BankConfig,
    BankConfigOpt,
    BankOperationalState,
    Cluster,
    CommitmentLevel,
    Config,
    GlobalOptions,
    Profile,
)
from mfi_cli.core.profile_service import ProfileService
from mfi_cli.core.protocols import Processor, ProfileStore
from mfi_cli.core.resolver import resolve

__all__: list[str] = [
    "BankConfig",
    "BankConfigOpt",
    "BankOperationalState",
    "Cluster",
    "CommitmentLevel",
    "Config",
    "GlobalOptions",
    "I80F48",
    "Processor",
    "Profile",
    "ProfileService",
    "ProfileStore",
    "requires_consent",
    "resolve",
]

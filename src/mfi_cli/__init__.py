"""mfi-cli: administrative command-line tool for marginfi deployments.

Resolves a named connection profile, gates state-mutating commands
behind an interactive operator confirmation, and dispatches to a
processor that talks to the on-chain program.
"""

from mfi_cli.version import __version__

__all__: list[str] = ["__version__"]

"""Custom exception hierarchy for mfi-cli.

All exceptions that cross layer boundaries must inherit from
:class:`MfiCliError`.  Raw third-party exceptions (e.g. from solana-py
or solders) must NEVER propagate beyond the infrastructure layer: they
must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
MfiCliError
├── ConfigurationError
│   ├── NoActiveProfileError
│   ├── ProfileNotFoundError
│   ├── ProfileExistsError
│   └── MalformedProfileError
├── InvalidArgumentError
├── FixedPointError
├── ConsentAbortedError
├── ProcessorError
└── EnvironmentError
"""

from __future__ import annotations


class MfiCliError(Exception):
    """Base exception for all mfi-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration / profiles ---------------------------------------------

class ConfigurationError(MfiCliError):
    """Raised when the local configuration cannot produce a usable Config."""


class NoActiveProfileError(ConfigurationError):
    """Raised when no profile is marked active in the profile store."""


class ProfileNotFoundError(ConfigurationError):
    """Raised when a named profile does not exist in the store."""


class ProfileExistsError(ConfigurationError):
    """Raised when creating a profile whose name is already taken."""


class MalformedProfileError(ConfigurationError):
    """Raised when a stored profile cannot be decoded."""


# --- Arguments / conversions ----------------------------------------------

class InvalidArgumentError(MfiCliError):
    """Raised when a command argument is missing or cannot be interpreted."""


class FixedPointError(MfiCliError, ValueError):
    """Raised when a number cannot be represented as an I80F48 value."""


# --- Operator consent -----------------------------------------------------

class ConsentAbortedError(MfiCliError):
    """Raised when the operator does not type back the active profile name."""


# --- Remote calls ---------------------------------------------------------

class ProcessorError(MfiCliError):
    """Raised when a remote read or write against the program fails."""


# --- Environment / tooling ------------------------------------------------

class EnvironmentError(MfiCliError):
    """Raised when a required runtime dependency is not available."""

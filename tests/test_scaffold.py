"""Smoke tests: verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import pytest

from mfi_cli import __version__
from mfi_cli.cli import exit_codes
from mfi_cli.cli.app import main
from mfi_cli.exceptions import (
    ConfigurationError,
    ConsentAbortedError,
    EnvironmentError,
    FixedPointError,
    InvalidArgumentError,
    MalformedProfileError,
    MfiCliError,
    NoActiveProfileError,
    ProcessorError,
    ProfileExistsError,
    ProfileNotFoundError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            NoActiveProfileError,
            ProfileNotFoundError,
            ProfileExistsError,
            MalformedProfileError,
            InvalidArgumentError,
            FixedPointError,
            ConsentAbortedError,
            ProcessorError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[MfiCliError]
    ) -> None:
        assert issubclass(exc_class, MfiCliError)

    @pytest.mark.parametrize(
        "exc_class",
        [NoActiveProfileError, ProfileNotFoundError, ProfileExistsError, MalformedProfileError],
    )
    def test_profile_errors_are_configuration_errors(
        self, exc_class: type[MfiCliError]
    ) -> None:
        assert issubclass(exc_class, ConfigurationError)

    def test_fixed_point_error_is_value_error(self) -> None:
        assert issubclass(FixedPointError, ValueError)

    def test_hint_is_stored(self) -> None:
        err = MfiCliError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = MfiCliError("boom")
        assert err.hint is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        code = main([])
        assert code == exit_codes.SUCCESS
        assert "group" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_group_requires_subcommand(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["group"])
        assert exc_info.value.code == 2

    def test_invalid_pubkey_is_a_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["bank", "get", "not-a-key"])
        assert exc_info.value.code == 2

    def test_unknown_operational_state_is_a_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([
                "bank", "update", "11111111111111111111111111111111",
                "--operational-state", "frozen",
            ])
        assert exc_info.value.code == 2

"""Operator consent prompt for state-mutating commands.

The operator is shown the full command and the full active profile,
then must type the profile name back.  Anything other than an exact
(whitespace-trimmed, case-sensitive) match aborts the command; there is
no retry loop and no bypass flag.
"""

from __future__ import annotations

import logging
import pprint
import sys
from typing import TextIO

from mfi_cli.cli.console import console
from mfi_cli.core.commands import BankCommand, GroupCommand
from mfi_cli.core.models import Profile
from mfi_cli.exceptions import ConsentAbortedError

logger = logging.getLogger(__name__)


def _pretty(obj: object) -> object:
    """Return a Rich renderable for *obj*, or a ``pprint`` string without Rich."""
    try:
        from rich.pretty import Pretty
    except ModuleNotFoundError:
        return pprint.pformat(obj)
    return Pretty(obj, expand_all=True)


def consent_prompt(profile: Profile) -> str:
    return f"Type the name of the profile [{profile.name}] to continue"


def confirm(
    cmd: GroupCommand | BankCommand,
    profile: Profile,
    *,
    stream: TextIO | None = None,
) -> None:
    """Block until the operator types back ``profile.name``.

    Parameters
    ----------
    cmd:
        The mutating command about to be sent.
    profile:
        The active profile; its name is the consent token.
    stream:
        Input to read one line from.  Defaults to ``sys.stdin``.

    Raises
    ------
    ConsentAbortedError
        On any mismatch, including end of input.
    """
    console.print("Command:")
    console.print(_pretty(cmd))
    console.print(_pretty(profile))
    console.print(consent_prompt(profile), markup=False)

    source = stream if stream is not None else sys.stdin
    answer = source.readline()

    if answer.strip() != profile.name:
        logger.info("Consent declined for %s", type(cmd).__name__)
        raise ConsentAbortedError("Aborting")
    logger.debug("Consent given for %s", type(cmd).__name__)

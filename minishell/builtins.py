"""Builtin commands, run inside the evaluating process so their effects stick."""

from __future__ import annotations

import os
from typing import Optional

from loguru import logger

from .errors import ShellExit


def _target_directory(directory: Optional[str]) -> Optional[str]:
    if directory is None or directory in ("", "~"):
        return os.environ.get("HOME")
    if directory == "-":
        return os.environ.get("OLDPWD")
    return directory


def shell_cd(directory: Optional[str] = None) -> bool:
    """Change the working directory.

    No argument, ``""`` or ``"~"`` go to ``$HOME``; ``"-"`` goes to
    ``$OLDPWD``; anything else is taken as a literal path. On success
    ``OLDPWD`` and ``PWD`` are updated. Returns False and leaves the
    directory unchanged if the change fails.
    """
    target = _target_directory(directory)
    if target is None:
        logger.debug("cd: no target for {!r}, variable unset", directory)
        return False

    try:
        previous: Optional[str] = os.getcwd()
    except OSError:
        previous = os.environ.get("PWD")

    try:
        os.chdir(target)
    except (OSError, ValueError) as exc:
        logger.debug("cd {!r}: {}", target, exc)
        return False

    if previous is not None:
        os.environ["OLDPWD"] = previous
    os.environ["PWD"] = os.getcwd()
    return True


def shell_exit() -> None:
    """Terminate the current process with a success status. Never returns."""
    raise ShellExit(0)


BUILTIN_CD = ("cd",)
BUILTIN_EXIT = ("exit", "quit")

from __future__ import annotations

import os
from typing import Optional

from loguru import logger

from .builtins import BUILTIN_CD, BUILTIN_EXIT, shell_cd, shell_exit
from .models import EXIT_FAILURE, EXIT_SUCCESS, ExecutionContext, SimpleCommand
from .process import fork_child, wait_child
from .redirect import STDERR_FILENO, Redirections


def _report(message: str) -> None:
    # Straight to fd 2 so the line lands wherever stderr was redirected.
    os.write(STDERR_FILENO, (message + "\n").encode(errors="replace"))


def _run_cd(scmd: SimpleCommand) -> int:
    # Targets are created/truncated as requested even though cd writes nothing.
    try:
        Redirections.open(scmd).close()
    except (OSError, ValueError) as exc:
        logger.debug("cd: redirection failed: {}", exc)
        return EXIT_FAILURE
    directory = scmd.params[0].resolve() if scmd.params else None
    return EXIT_SUCCESS if shell_cd(directory) else EXIT_FAILURE


def _assign(name: str, value: str) -> int:
    try:
        os.environ[name] = value
    except (ValueError, OSError) as exc:
        logger.warning("assignment {}= rejected: {}", name, exc)
        return EXIT_FAILURE
    return EXIT_SUCCESS


def _exec_external(scmd: SimpleCommand) -> int:
    """Body of the forked child: attach redirections and replace the image."""
    try:
        Redirections.open(scmd).attach()
    except OSError as exc:
        _report(f"{exc.filename}: {exc.strerror}")
        return EXIT_FAILURE
    except ValueError as exc:
        _report(f"redirection failed: {exc}")
        return EXIT_FAILURE

    argv = scmd.argv()
    try:
        os.execvp(argv[0], argv)
    except (OSError, ValueError):
        _report(f"Execution failed for '{argv[0]}'")
    return EXIT_FAILURE


def execute_simple(scmd: Optional[SimpleCommand], ctx: Optional[ExecutionContext] = None) -> int:
    """Run one leaf of the tree and return its status.

    ``cd``, ``exit``/``quit`` and ``NAME=value`` run in this process. Anything
    else is forked and exec'd, and the parent waits for that child.
    """
    if scmd is None or not scmd.verb.string:
        return EXIT_SUCCESS

    name = scmd.name
    if name in BUILTIN_CD:
        return _run_cd(scmd)
    if name in BUILTIN_EXIT:
        shell_exit()

    assignment = scmd.assignment()
    if assignment is not None:
        return _assign(*assignment)

    depth = ctx.depth if ctx is not None else 0
    logger.debug("exec depth={} argv={}", depth, scmd.argv())
    try:
        pid = fork_child(lambda: _exec_external(scmd), label=name)
    except OSError as exc:
        logger.warning("fork for {!r} failed: {}", name, exc)
        return EXIT_FAILURE

    status = wait_child(pid)
    if status is None:
        return EXIT_FAILURE
    return status

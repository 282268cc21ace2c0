"""Minishell execution engine.

Takes an already parsed command tree and runs it with real processes:
- builtins (``cd``, ``exit``/``quit``) and ``NAME=value`` assignments in-process
- external programs through fork/exec, with file redirections
- ``;``, ``&&``, ``||`` in-process, ``&`` and ``|`` across two child processes

The package logs through loguru and stays silent until
``minishell.log.configure_logging`` enables it.
"""

from loguru import logger

from .errors import MinishellError, ShellExit, TreeFormatError
from .evaluator import evaluate
from .models import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    SHELL_EXIT,
    CommandNode,
    ExecutionContext,
    IOFlags,
    Operator,
    SimpleCommand,
    Word,
)
from .shell_runner import ShellResult, ShellRunner
from .tree_loader import load_tree, parse_tree

logger.disable("minishell")

__all__ = [
    "evaluate",
    "CommandNode",
    "ExecutionContext",
    "IOFlags",
    "Operator",
    "SimpleCommand",
    "Word",
    "ShellRunner",
    "ShellResult",
    "load_tree",
    "parse_tree",
    "MinishellError",
    "ShellExit",
    "TreeFormatError",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "SHELL_EXIT",
]

__version__ = "0.1.0"

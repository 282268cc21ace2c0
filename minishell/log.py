"""Logging setup for the command-line front end."""

from __future__ import annotations

import sys

from loguru import logger

from .config import ShellConfig

_FORMAT = "{time:HH:mm:ss.SSS} | {level:<7} | pid={process} | {name}:{function}:{line} | {message}"


def configure_logging(config: ShellConfig) -> None:
    """Send minishell's records to stderr at the configured level.

    The package is silent until this is called.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=config.log_level,
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    logger.enable("minishell")

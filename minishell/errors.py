from __future__ import annotations


class MinishellError(Exception):
    """Base class for errors raised by minishell outside of command statuses."""


class TreeFormatError(MinishellError, ValueError):
    """A command tree document does not describe a valid tree."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ShellExit(SystemExit):
    """Raised by the exit/quit builtin to end the current process."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)

"""Opening and attaching the redirection targets of a simple command."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List

from .models import IOFlags, SimpleCommand

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

FILE_MODE = 0o644


def _open_for_write(path: str, append: bool) -> int:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    return os.open(path, flags, FILE_MODE)


@dataclass
class Redirections:
    """Descriptors opened for a command, keyed by the standard stream they replace.

    The same descriptor appears under both ``STDOUT_FILENO`` and
    ``STDERR_FILENO`` when output and error name the same file.
    """

    targets: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def open(cls, scmd: SimpleCommand) -> "Redirections":
        redirs = cls()
        try:
            if scmd.stdin is not None:
                redirs.targets[STDIN_FILENO] = os.open(scmd.stdin.resolve(), os.O_RDONLY)

            out_path = scmd.stdout.resolve() if scmd.stdout is not None else None
            err_path = scmd.stderr.resolve() if scmd.stderr is not None else None

            if out_path is not None:
                fd = _open_for_write(out_path, bool(scmd.io_flags & IOFlags.OUT_APPEND))
                redirs.targets[STDOUT_FILENO] = fd
                # one open, one truncation
                if err_path == out_path:
                    redirs.targets[STDERR_FILENO] = fd
            if err_path is not None and STDERR_FILENO not in redirs.targets:
                fd = _open_for_write(err_path, bool(scmd.io_flags & IOFlags.ERR_APPEND))
                redirs.targets[STDERR_FILENO] = fd
        except (OSError, ValueError):
            redirs.close()
            raise
        return redirs

    def _unique_fds(self) -> List[int]:
        seen: List[int] = []
        for fd in self.targets.values():
            if fd not in seen:
                seen.append(fd)
        return seen

    def attach(self) -> None:
        """Duplicate every target onto its standard stream, then close the originals."""
        for stream, fd in self.targets.items():
            if fd != stream:
                os.dup2(fd, stream)
        streams = set(self.targets)
        for fd in self._unique_fds():
            if fd not in streams:
                os.close(fd)
        self.targets.clear()

    def close(self) -> None:
        for fd in self._unique_fds():
            os.close(fd)
        self.targets.clear()

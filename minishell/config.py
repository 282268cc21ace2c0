from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL_ENV = "MINISHELL_LOG_LEVEL"


def parse_log_level(value: Optional[str], default: str = "WARNING") -> str:
    if value is None or not value.strip():
        return default
    level = value.strip().upper()
    if level == "WARN":
        level = "WARNING"
    if level not in LOG_LEVELS:
        raise ValueError(f"invalid log level: {value}")
    return level


@dataclass
class ShellConfig:
    """Settings for the command-line front end.

    The engine itself has no knobs; this only controls diagnostics.
    """

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        env = os.environ if environ is None else environ
        return cls(log_level=parse_log_level(env.get(LOG_LEVEL_ENV)))

    def with_overrides(self, *, log_level: Optional[str] = None) -> "ShellConfig":
        if log_level is None:
            return self
        return ShellConfig(log_level=parse_log_level(log_level))

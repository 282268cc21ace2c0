from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

from .evaluator import evaluate
from .models import CommandNode, ExecutionContext
from .render import render


@dataclass
class ShellResult:
    success: bool
    exit_code: int
    duration_ms: int
    command: str
    cwd: str


class ShellRunner:
    """Evaluate command trees in this process and report a structured result.

    Builtins run here, so a ``cd`` or an assignment inside the tree changes
    this process's working directory or environment, and ``cwd`` in the
    result is the directory after the run. ``env_overrides`` and an explicit
    ``cwd`` only hold for the one run; both are put back afterwards.
    """

    def __init__(self, cwd: Optional[str] = None):
        self.default_cwd = cwd

    def run(
        self,
        tree: CommandNode,
        *,
        cwd: Optional[str] = None,
        env_overrides: Optional[Dict[str, str]] = None,
    ) -> ShellResult:
        start_time = time.time()
        effective_cwd = cwd or self.default_cwd
        previous_cwd = os.getcwd() if effective_cwd else None
        previous_env: Dict[str, Optional[str]] = {
            key: os.environ.get(key) for key in (env_overrides or {})
        }

        try:
            if effective_cwd:
                os.chdir(effective_cwd)
            if env_overrides:
                os.environ.update(env_overrides)
            status = evaluate(tree, ExecutionContext())
            final_cwd = os.getcwd()
        finally:
            for key, value in previous_env.items():
                if value is None:
                    os.environ.pop(key, None)
                else:
                    os.environ[key] = value
            if previous_cwd is not None:
                os.chdir(previous_cwd)

        duration_ms = int((time.time() - start_time) * 1000)
        return ShellResult(
            success=status == 0,
            exit_code=status,
            duration_ms=duration_ms,
            command=render(tree),
            cwd=final_cwd,
        )

from __future__ import annotations

import os
import sys
from typing import Callable, Optional

from loguru import logger

from .models import ABNORMAL_STATUS, EXIT_FAILURE, EXIT_SUCCESS


def flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, OSError, ValueError):
            pass


def exit_code(status: object) -> int:
    """Map an evaluation status onto something a process can exit with."""
    if status is None:
        return EXIT_SUCCESS
    if isinstance(status, int) and 0 <= status <= 255:
        return status
    return EXIT_FAILURE


def fork_child(body: Callable[[], int], label: str = "child") -> int:
    """Fork a process that runs ``body`` and exits with its status.

    Returns the child's pid in the parent. Raises ``OSError`` if the fork
    fails. The child never returns from this call: whatever ``body`` does,
    including raising, it leaves through ``os._exit``.
    """
    flush_std_streams()
    pid = os.fork()
    if pid != 0:
        return pid

    code = EXIT_FAILURE
    try:
        code = exit_code(body())
    except SystemExit as exc:
        code = exit_code(exc.code)
    except BaseException:
        logger.exception("{} pid={} crashed", label, os.getpid())
        code = EXIT_FAILURE
    finally:
        flush_std_streams()
        os._exit(code)


def wait_child(pid: int) -> Optional[int]:
    """Block until ``pid`` terminates.

    Returns its exit code when it exited normally, ``ABNORMAL_STATUS`` when
    it did not, and ``None`` when the wait itself failed.
    """
    try:
        _, status = os.waitpid(pid, 0)
    except OSError as exc:
        logger.error("waitpid({}) failed: {}", pid, exc)
        return None
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        logger.debug("pid={} killed by signal {}", pid, os.WTERMSIG(status))
    return ABNORMAL_STATUS

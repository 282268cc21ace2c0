"""The two operators that fork: PARALLEL (``&``) and PIPE (``|``).

Each activation starts exactly two children and blocks on both. Children
evaluate their sub-tree with the full evaluator and exit with its status.
"""

from __future__ import annotations

import os

from loguru import logger

from .models import EXIT_FAILURE, EXIT_SUCCESS, CommandNode, ExecutionContext
from .process import fork_child, wait_child
from .redirect import STDIN_FILENO, STDOUT_FILENO


def _evaluate(node, ctx):
    from .evaluator import evaluate

    return evaluate(node, ctx)


def run_in_parallel(node: CommandNode, ctx: ExecutionContext) -> int:
    """Run both children of ``node`` at the same time.

    Succeeds only if both sides exit 0. The two waits are issued in launch
    order whichever child finishes first.
    """
    child_ctx = ctx.descend(node)

    try:
        first = fork_child(lambda: _evaluate(node.left, child_ctx), label="parallel-left")
    except OSError as exc:
        logger.warning("parallel: first fork failed: {}", exc)
        return EXIT_FAILURE

    try:
        second = fork_child(lambda: _evaluate(node.right, child_ctx), label="parallel-right")
    except OSError as exc:
        logger.warning("parallel: second fork failed: {}", exc)
        wait_child(first)
        return EXIT_FAILURE

    first_status = wait_child(first)
    second_status = wait_child(second)
    if first_status == EXIT_SUCCESS and second_status == EXIT_SUCCESS:
        return EXIT_SUCCESS
    return EXIT_FAILURE


def run_on_pipe(node: CommandNode, ctx: ExecutionContext) -> int:
    """Feed the left child's standard output into the right child's input.

    The result is the right (downstream) side's status; the producer's status
    is collected but not reported.
    """
    child_ctx = ctx.descend(node)

    try:
        read_fd, write_fd = os.pipe()
    except OSError as exc:
        logger.warning("pipe creation failed: {}", exc)
        return EXIT_FAILURE

    def producer() -> int:
        os.close(read_fd)
        os.dup2(write_fd, STDOUT_FILENO)
        os.close(write_fd)
        return _evaluate(node.left, child_ctx)

    def consumer() -> int:
        os.dup2(read_fd, STDIN_FILENO)
        os.close(read_fd)
        return _evaluate(node.right, child_ctx)

    try:
        first = fork_child(producer, label="pipe-left")
    except OSError as exc:
        logger.warning("pipe: first fork failed: {}", exc)
        os.close(read_fd)
        os.close(write_fd)
        return EXIT_FAILURE

    # The reader only sees end-of-stream once every write end is closed.
    os.close(write_fd)

    try:
        second = fork_child(consumer, label="pipe-right")
    except OSError as exc:
        logger.warning("pipe: second fork failed: {}", exc)
        os.close(read_fd)
        wait_child(first)
        return EXIT_FAILURE

    os.close(read_fd)

    first_status = wait_child(first)
    second_status = wait_child(second)
    if first_status is None or second_status is None:
        return EXIT_FAILURE
    return second_status

from __future__ import annotations

from typing import Optional

from loguru import logger

from .models import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    SHELL_EXIT,
    CommandNode,
    ExecutionContext,
    Operator,
)
from .operators import run_in_parallel, run_on_pipe
from .render import render
from .simple import execute_simple


def evaluate(node: Optional[CommandNode], ctx: Optional[ExecutionContext] = None) -> int:
    """Evaluate a command tree and return its status.

    Sequential: both sides always run; 0 only if both returned 0.
    And/or: the right side runs only when the left side succeeded/failed,
    and the status of the last side run is returned.
    Parallel and pipe fork; see ``operators``.
    An operator this function does not know yields ``SHELL_EXIT``.
    """
    if node is None:
        return EXIT_SUCCESS
    if ctx is None:
        ctx = ExecutionContext()

    logger.opt(lazy=True).debug("eval depth={} {}", lambda: ctx.depth, lambda: render(node))

    if node.op is Operator.NONE:
        return execute_simple(node.scmd, ctx)

    child_ctx = ctx.descend(node)

    if node.op is Operator.SEQUENTIAL:
        left = evaluate(node.left, child_ctx)
        right = evaluate(node.right, child_ctx)
        return EXIT_SUCCESS if left == EXIT_SUCCESS and right == EXIT_SUCCESS else EXIT_FAILURE

    if node.op is Operator.CONDITIONAL_NZERO:
        status = evaluate(node.left, child_ctx)
        if status != EXIT_SUCCESS:
            return evaluate(node.right, child_ctx)
        return status

    if node.op is Operator.CONDITIONAL_ZERO:
        status = evaluate(node.left, child_ctx)
        if status == EXIT_SUCCESS:
            return evaluate(node.right, child_ctx)
        return status

    if node.op is Operator.PARALLEL:
        return run_in_parallel(node, ctx)

    if node.op is Operator.PIPE:
        return run_on_pipe(node, ctx)

    logger.error("invalid operator {!r} at depth {}", node.op, ctx.depth)
    return SHELL_EXIT

"""Turn a command tree back into shell syntax, for logs and ``minishell show``."""

from __future__ import annotations

import shlex
from typing import List, Optional

from .models import CommandNode, IOFlags, Operator, SimpleCommand, Word

_SYMBOLS = {
    Operator.SEQUENTIAL: ";",
    Operator.PARALLEL: "&",
    Operator.CONDITIONAL_ZERO: "&&",
    Operator.CONDITIONAL_NZERO: "||",
    Operator.PIPE: "|",
}

# Higher binds tighter.
_PRECEDENCE = {
    Operator.SEQUENTIAL: 0,
    Operator.PARALLEL: 1,
    Operator.CONDITIONAL_ZERO: 2,
    Operator.CONDITIONAL_NZERO: 2,
    Operator.PIPE: 3,
    Operator.NONE: 4,
}


def render_word(word: Word) -> str:
    out: List[str] = []
    for part in word.parts():
        if part.expand:
            out.append("${" + part.string + "}")
        else:
            out.append(shlex.quote(part.string))
    return "".join(out)


def render_simple(scmd: SimpleCommand) -> str:
    assignment = scmd.assignment()
    if assignment is not None:
        value = scmd.verb.next_part.next_part if scmd.verb.next_part else None
        return f"{scmd.verb.string}={render_word(value) if value is not None else ''}"

    tokens = [render_word(scmd.verb), *(render_word(p) for p in scmd.params)]
    if scmd.stdin is not None:
        tokens.append("< " + render_word(scmd.stdin))

    same_target = (
        scmd.stdout is not None
        and scmd.stderr is not None
        and scmd.stdout.resolve() == scmd.stderr.resolve()
    )
    if same_target:
        arrow = "&>>" if scmd.io_flags & IOFlags.OUT_APPEND else "&>"
        tokens.append(f"{arrow} {render_word(scmd.stdout)}")
    else:
        if scmd.stdout is not None:
            arrow = ">>" if scmd.io_flags & IOFlags.OUT_APPEND else ">"
            tokens.append(f"{arrow} {render_word(scmd.stdout)}")
        if scmd.stderr is not None:
            arrow = "2>>" if scmd.io_flags & IOFlags.ERR_APPEND else "2>"
            tokens.append(f"{arrow} {render_word(scmd.stderr)}")
    return " ".join(tokens)


def _render_child(child: Optional[CommandNode], parent_op: Operator, right: bool) -> str:
    text = render(child)
    if child is None or child.is_leaf:
        return text
    child_prec = _PRECEDENCE.get(child.op, 0)
    parent_prec = _PRECEDENCE.get(parent_op, 0)
    if child_prec < parent_prec or (right and child_prec == parent_prec):
        return f"({text})"
    return text


def render(node: Optional[CommandNode]) -> str:
    if node is None:
        return ""
    if node.is_leaf:
        return render_simple(node.scmd) if node.scmd is not None else ""
    symbol = _SYMBOLS.get(node.op, "?")
    left = _render_child(node.left, node.op, right=False)
    right = _render_child(node.right, node.op, right=True)
    return f"{left} {symbol} {right}"

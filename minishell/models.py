from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
# Reported when a child did not exit normally (killed by a signal).
ABNORMAL_STATUS = 1
# Reported for an operator tag the evaluator does not know.
SHELL_EXIT = -100


@dataclass(frozen=True)
class Word:
    """One token of a command, possibly concatenated with further parts.

    A part with ``expand`` set names an environment variable; it resolves to
    the variable's value, or to an empty string when the variable is unset.
    """

    string: str
    expand: bool = False
    next_part: Optional["Word"] = None

    def parts(self) -> Iterator["Word"]:
        part: Optional[Word] = self
        while part is not None:
            yield part
            part = part.next_part

    def resolve(self) -> str:
        chunks: List[str] = []
        for part in self.parts():
            if part.expand:
                chunks.append(os.environ.get(part.string, ""))
            else:
                chunks.append(part.string)
        return "".join(chunks)

    @classmethod
    def chain(cls, *parts: "Word") -> "Word":
        """Link already built single parts into one word, keeping their order."""
        if not parts:
            raise ValueError("a word needs at least one part")
        last = parts[-1]
        word = cls(last.string, last.expand)
        for part in reversed(parts[:-1]):
            word = cls(part.string, part.expand, word)
        return word


class IOFlags(enum.IntFlag):
    REGULAR = 0
    OUT_APPEND = 1
    ERR_APPEND = 2


@dataclass(frozen=True)
class SimpleCommand:
    verb: Word
    params: Tuple[Word, ...] = ()
    stdin: Optional[Word] = None
    stdout: Optional[Word] = None
    stderr: Optional[Word] = None
    io_flags: IOFlags = IOFlags.REGULAR

    @property
    def name(self) -> str:
        return self.verb.resolve()

    def argv(self) -> List[str]:
        return [self.name, *(p.resolve() for p in self.params)]

    def assignment(self) -> Optional[Tuple[str, str]]:
        """Return ``(name, value)`` when the verb has the ``NAME=value`` shape."""
        eq = self.verb.next_part
        if eq is None or eq.expand or eq.string != "=":
            return None
        value = eq.next_part.resolve() if eq.next_part is not None else ""
        return self.verb.string, value


class Operator(enum.Enum):
    NONE = "none"
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    PIPE = "pipe"
    CONDITIONAL_ZERO = "and"  # run right only if left succeeded
    CONDITIONAL_NZERO = "or"  # run right only if left failed


@dataclass(frozen=True)
class CommandNode:
    op: Operator
    scmd: Optional[SimpleCommand] = None
    left: Optional["CommandNode"] = None
    right: Optional["CommandNode"] = None

    @classmethod
    def leaf(cls, scmd: SimpleCommand) -> "CommandNode":
        return cls(Operator.NONE, scmd=scmd)

    @classmethod
    def binary(cls, op: Operator, left: "CommandNode", right: "CommandNode") -> "CommandNode":
        return cls(op, left=left, right=right)

    @property
    def is_leaf(self) -> bool:
        return self.op is Operator.NONE


@dataclass(frozen=True)
class ExecutionContext:
    """Recursion depth and parent node, carried along for diagnostics only."""

    depth: int = 0
    parent: Optional[CommandNode] = None

    def descend(self, node: CommandNode) -> "ExecutionContext":
        return ExecutionContext(depth=self.depth + 1, parent=node)

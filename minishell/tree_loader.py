"""Reading and writing command trees as YAML documents.

A node is either ``{command: {...}}`` or ``{op: <name>, left: ..., right: ...}``
with ``op`` one of ``sequential``, ``parallel``, ``pipe``, ``and``, ``or``.
A word is a string, ``{env: NAME}``, or a list of those parts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .errors import TreeFormatError
from .models import CommandNode, IOFlags, Operator, SimpleCommand, Word

_OPERATORS: Dict[str, Operator] = {
    "sequential": Operator.SEQUENTIAL,
    ";": Operator.SEQUENTIAL,
    "parallel": Operator.PARALLEL,
    "&": Operator.PARALLEL,
    "pipe": Operator.PIPE,
    "|": Operator.PIPE,
    "and": Operator.CONDITIONAL_ZERO,
    "&&": Operator.CONDITIONAL_ZERO,
    "or": Operator.CONDITIONAL_NZERO,
    "||": Operator.CONDITIONAL_NZERO,
}

_REDIRECT_KEYS = {"in": "stdin", "out": "stdout", "err": "stderr"}


def _parse_part(raw: Any, where: str) -> Word:
    if isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
        return Word(str(raw))
    if isinstance(raw, dict) and set(raw) == {"env"} and isinstance(raw["env"], str):
        return Word(raw["env"], expand=True)
    raise TreeFormatError(f"invalid word part {raw!r}", where)


def parse_word(raw: Any, where: str = "word") -> Word:
    if isinstance(raw, list):
        if not raw:
            raise TreeFormatError("a word needs at least one part", where)
        return Word.chain(*(_parse_part(p, f"{where}[{i}]") for i, p in enumerate(raw)))
    return _parse_part(raw, where)


def _parse_command(raw: Any, where: str) -> SimpleCommand:
    if not isinstance(raw, dict):
        raise TreeFormatError("command must be a mapping", where)

    if "assign" in raw:
        spec = raw["assign"]
        if not isinstance(spec, dict) or not spec.get("name"):
            raise TreeFormatError("assign needs a name", f"{where}.assign")
        value = parse_word(spec.get("value", ""), f"{where}.assign.value")
        verb = Word.chain(Word(str(spec["name"])), Word("="), *value.parts())
        return SimpleCommand(verb=verb)

    if raw.get("verb") in (None, "", []):
        raise TreeFormatError("command has no verb", where)
    verb = parse_word(raw["verb"], f"{where}.verb")

    params = raw.get("params", []) or []
    if not isinstance(params, list):
        raise TreeFormatError("params must be a list", f"{where}.params")

    redirects: Dict[str, Word] = {}
    for key, attr in _REDIRECT_KEYS.items():
        if raw.get(key) is not None:
            redirects[attr] = parse_word(raw[key], f"{where}.{key}")

    flags = IOFlags.REGULAR
    if raw.get("append_out"):
        flags |= IOFlags.OUT_APPEND
    if raw.get("append_err"):
        flags |= IOFlags.ERR_APPEND

    return SimpleCommand(
        verb=verb,
        params=tuple(parse_word(p, f"{where}.params[{i}]") for i, p in enumerate(params)),
        io_flags=flags,
        **redirects,
    )


def parse_tree(raw: Any, where: str = "$") -> CommandNode:
    """Build a ``CommandNode`` from already decoded YAML/JSON data."""
    if not isinstance(raw, dict):
        raise TreeFormatError("node must be a mapping", where)

    if "command" in raw:
        if "op" in raw:
            raise TreeFormatError("node has both command and op", where)
        return CommandNode.leaf(_parse_command(raw["command"], f"{where}.command"))

    op_name = str(raw.get("op", "")).lower()
    if op_name not in _OPERATORS:
        raise TreeFormatError(f"unknown operator {raw.get('op')!r}", where)
    if raw.get("left") is None or raw.get("right") is None:
        raise TreeFormatError("operator node needs left and right", where)
    return CommandNode.binary(
        _OPERATORS[op_name],
        parse_tree(raw["left"], f"{where}.left"),
        parse_tree(raw["right"], f"{where}.right"),
    )


def load_tree(path: Union[str, Path]) -> CommandNode:
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise TreeFormatError(f"not valid YAML: {exc}", str(path)) from exc
    if raw is None:
        raise TreeFormatError("empty document", str(path))
    return parse_tree(raw)


def dump_word(word: Word) -> Any:
    parts: List[Any] = [{"env": p.string} if p.expand else p.string for p in word.parts()]
    return parts[0] if len(parts) == 1 else parts


def _dump_command(scmd: SimpleCommand) -> Dict[str, Any]:
    assignment = scmd.assignment()
    if assignment is not None:
        eq = scmd.verb.next_part
        value = dump_word(eq.next_part) if eq is not None and eq.next_part is not None else ""
        return {"assign": {"name": scmd.verb.string, "value": value}}

    out: Dict[str, Any] = {"verb": dump_word(scmd.verb)}
    if scmd.params:
        out["params"] = [dump_word(p) for p in scmd.params]
    for key, attr in _REDIRECT_KEYS.items():
        word = getattr(scmd, attr)
        if word is not None:
            out[key] = dump_word(word)
    if scmd.io_flags & IOFlags.OUT_APPEND:
        out["append_out"] = True
    if scmd.io_flags & IOFlags.ERR_APPEND:
        out["append_err"] = True
    return out


def dump_tree(node: CommandNode) -> Dict[str, Any]:
    if node.is_leaf:
        if node.scmd is None:
            raise TreeFormatError("leaf without a command")
        return {"command": _dump_command(node.scmd)}
    if node.left is None or node.right is None:
        raise TreeFormatError(f"{node.op.value} node needs two children")
    return {"op": node.op.value, "left": dump_tree(node.left), "right": dump_tree(node.right)}


def save_tree(node: CommandNode, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(dump_tree(node), f, sort_keys=False)

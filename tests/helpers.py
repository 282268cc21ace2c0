from minishell.models import CommandNode, IOFlags, Operator, SimpleCommand, Word


def scmd(verb, *params, stdin=None, stdout=None, stderr=None, append_out=False, append_err=False):
    flags = IOFlags.REGULAR
    if append_out:
        flags |= IOFlags.OUT_APPEND
    if append_err:
        flags |= IOFlags.ERR_APPEND
    return SimpleCommand(
        verb=Word(verb),
        params=tuple(p if isinstance(p, Word) else Word(str(p)) for p in params),
        stdin=Word(str(stdin)) if stdin is not None else None,
        stdout=Word(str(stdout)) if stdout is not None else None,
        stderr=Word(str(stderr)) if stderr is not None else None,
        io_flags=flags,
    )


def leaf(verb, *params, **redirects):
    return CommandNode.leaf(scmd(verb, *params, **redirects))


def assign(name, value):
    return CommandNode.leaf(SimpleCommand(verb=Word.chain(Word(name), Word("="), Word(value))))


def seq(left, right):
    return CommandNode.binary(Operator.SEQUENTIAL, left, right)


def par(left, right):
    return CommandNode.binary(Operator.PARALLEL, left, right)


def pipe(left, right):
    return CommandNode.binary(Operator.PIPE, left, right)


def and_(left, right):
    return CommandNode.binary(Operator.CONDITIONAL_ZERO, left, right)


def or_(left, right):
    return CommandNode.binary(Operator.CONDITIONAL_NZERO, left, right)


def sh(script, **redirects):
    return leaf("sh", "-c", script, **redirects)

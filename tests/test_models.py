from minishell.models import ExecutionContext, Operator, SimpleCommand, Word

from helpers import leaf, seq


def test_word_resolves_literal_and_env_parts(monkeypatch):
    monkeypatch.setenv("MS_NAME", "world")
    word = Word.chain(Word("hello-"), Word("MS_NAME", expand=True), Word("!"))
    assert word.resolve() == "hello-world!"


def test_unset_variable_resolves_to_empty(monkeypatch):
    monkeypatch.delenv("MS_MISSING", raising=False)
    assert Word.chain(Word("a"), Word("MS_MISSING", expand=True), Word("b")).resolve() == "ab"


def test_argv_is_verb_then_resolved_params(monkeypatch):
    monkeypatch.setenv("MS_ARG", "x")
    cmd = SimpleCommand(verb=Word("echo"), params=(Word("1"), Word("MS_ARG", expand=True)))
    assert cmd.argv() == ["echo", "1", "x"]


def test_assignment_shape_detected():
    cmd = SimpleCommand(verb=Word.chain(Word("FOO"), Word("="), Word("bar")))
    assert cmd.assignment() == ("FOO", "bar")
    assert SimpleCommand(verb=Word("FOO")).assignment() is None


def test_context_descend_tracks_depth_and_parent():
    node = seq(leaf("true"), leaf("true"))
    ctx = ExecutionContext().descend(node)
    assert ctx.depth == 1
    assert ctx.parent is node
    assert node.op is Operator.SEQUENTIAL and not node.is_leaf

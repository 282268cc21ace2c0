import os
import time

import pytest

from minishell.evaluator import evaluate
from minishell.models import EXIT_FAILURE, EXIT_SUCCESS

from helpers import assign, leaf, par, pipe, seq, sh


def _open_fds():
    return sorted(os.listdir("/proc/self/fd"))


def test_pipe_delivers_every_line(tmp_path):
    out = tmp_path / "count.txt"
    producer = sh("for i in 1 2 3 4 5 6 7; do echo line$i; done")
    assert evaluate(pipe(producer, leaf("wc", "-l", stdout=out))) == EXIT_SUCCESS
    assert out.read_text(encoding="utf-8").strip() == "7"


def test_pipe_larger_than_buffer(tmp_path):
    out = tmp_path / "bytes.txt"
    tree = pipe(leaf("head", "-c", "1000000", "/dev/zero"), leaf("wc", "-c", stdout=out))
    assert evaluate(tree) == EXIT_SUCCESS
    assert out.read_text(encoding="utf-8").strip() == "1000000"


def test_pipe_reports_consumer_status_only():
    assert evaluate(pipe(leaf("false"), leaf("true"))) == EXIT_SUCCESS
    assert evaluate(pipe(leaf("true"), sh("cat >/dev/null; exit 5"))) == 5


def test_nested_pipes(tmp_path):
    out = tmp_path / "out.txt"
    tree = pipe(pipe(sh("printf 'b\\na\\nc\\n'"), leaf("sort")), leaf("head", "-n", "1", stdout=out))
    assert evaluate(tree) == EXIT_SUCCESS
    assert out.read_text(encoding="utf-8") == "a\n"


def test_pipe_into_sequence(tmp_path):
    out = tmp_path / "out.txt"
    consumer = seq(leaf("cat", stdout=out), sh("echo done >> " + str(out)))
    assert evaluate(pipe(leaf("echo", "data"), consumer)) == EXIT_SUCCESS
    assert out.read_text(encoding="utf-8") == "data\ndone\n"


@pytest.mark.skipif(not os.path.isdir("/proc/self/fd"), reason="needs /proc")
def test_pipe_leaves_no_descriptors_behind():
    before = _open_fds()
    evaluate(pipe(leaf("echo", "x"), leaf("cat", stdout=os.devnull)))
    assert _open_fds() == before


def test_parallel_runs_concurrently():
    start = time.monotonic()
    assert evaluate(par(leaf("sleep", "1"), leaf("sleep", "1"))) == EXIT_SUCCESS
    elapsed = time.monotonic() - start
    assert 0.9 <= elapsed < 1.8


def test_parallel_waits_for_both(tmp_path):
    slow = tmp_path / "slow"
    tree = par(leaf("true"), sh("sleep 0.3; touch " + str(slow)))
    assert evaluate(tree) == EXIT_SUCCESS
    assert slow.exists()


def test_parallel_fails_if_either_side_fails():
    assert evaluate(par(leaf("true"), leaf("false"))) == EXIT_FAILURE
    assert evaluate(par(sh("exit 3"), leaf("true"))) == EXIT_FAILURE


def test_forked_branches_do_not_share_assignments(monkeypatch, tmp_path):
    monkeypatch.delenv("MS_BRANCH", raising=False)
    seen = tmp_path / "seen.txt"
    left = seq(assign("MS_BRANCH", "left"), sh('printf %s "$MS_BRANCH"', stdout=seen))
    right = sh("sleep 0.2; test -z \"$MS_BRANCH\"")
    assert evaluate(par(left, right)) == EXIT_SUCCESS
    assert seen.read_text(encoding="utf-8") == "left"
    assert "MS_BRANCH" not in os.environ


def test_cd_in_pipe_branch_does_not_move_parent(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    evaluate(pipe(leaf("cd", str(sub)), leaf("true")))
    assert os.getcwd() == str(tmp_path)


def test_fork_failure_reaps_started_child(monkeypatch):
    import minishell.operators as operators

    real_fork = operators.fork_child
    calls = []

    def flaky_fork(body, label="child"):
        calls.append(label)
        if len(calls) == 2:
            raise OSError("no more processes")
        return real_fork(body, label)

    monkeypatch.setattr(operators, "fork_child", flaky_fork)
    assert evaluate(par(leaf("true"), leaf("true"))) == EXIT_FAILURE
    with pytest.raises(ChildProcessError):
        os.waitpid(-1, os.WNOHANG)


def test_pipe_creation_failure_is_reported(monkeypatch):
    import minishell.operators as operators

    def broken_pipe():
        raise OSError("too many open files")

    monkeypatch.setattr(operators.os, "pipe", broken_pipe)
    assert evaluate(pipe(leaf("true"), leaf("true"))) == EXIT_FAILURE

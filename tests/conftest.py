import os

import pytest


@pytest.fixture(autouse=True)
def _restore_process_state(monkeypatch, tmp_path):
    # Builtins change the real cwd and environment of the test process.
    monkeypatch.chdir(tmp_path)
    for name in ("HOME", "OLDPWD", "PWD"):
        monkeypatch.setenv(name, os.environ.get(name, str(tmp_path)))
    yield

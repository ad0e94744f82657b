import os
from typing import Dict, List, Optional, Tuple

import pytest


class ExecRecorder:
    class ProcessReplaced(Exception):
        pass

    def __init__(self) -> None:
        self.calls: List[Tuple[str, List[str], Dict[str, str]]] = []
        self.error: Optional[OSError] = None

    def __call__(self, program, argv, env):
        self.calls.append((program, list(argv), dict(env)))
        if self.error is not None:
            raise self.error
        raise self.ProcessReplaced(program)


@pytest.fixture(autouse=True)
def process_environment(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    environ = {"PATH": "/usr/local/bin:/usr/bin"}
    monkeypatch.setattr(os, "environ", environ)
    return environ


@pytest.fixture
def exec_recorder(monkeypatch: pytest.MonkeyPatch) -> ExecRecorder:
    recorder = ExecRecorder()
    monkeypatch.setattr(os, "execvpe", recorder)
    return recorder


@pytest.fixture
def install_directory(tmp_path):
    directory = tmp_path / "kraken2"
    directory.mkdir()
    (directory / "classify").write_text("")
    return directory

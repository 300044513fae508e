from __future__ import annotations

import subprocess
from typing import Any, Dict, List, Optional, Tuple

import pytest

from pbp_installer.lib import command
from pbp_installer.state_store import ensure_defaults


class CommandRecorder:
    """Stands in for subprocess.run and remembers every argv it was given."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.responses: Dict[Tuple[str, ...], Tuple[int, str, str]] = {}

    def respond(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        """Answer every command whose argv starts with ``prefix``; the longest match wins."""
        self.responses[prefix] = (returncode, stdout, stderr)

    def _response(self, argv: List[str]) -> Tuple[int, str, str]:
        matches = [p for p in self.responses if tuple(argv[: len(p)]) == p]
        if not matches:
            return (0, "", "")
        return self.responses[max(matches, key=len)]

    def __call__(self, argv, input=None, **kwargs: Any) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        returncode, stdout, stderr = self._response(argv)
        return subprocess.CompletedProcess(argv, returncode, stdout=stdout, stderr=stderr)

    def programs(self) -> List[str]:
        return [c[0] for c in self.calls]

    def find(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]


@pytest.fixture
def commands(monkeypatch) -> CommandRecorder:
    recorder = CommandRecorder()
    monkeypatch.setattr(command.subprocess, "run", recorder)
    return recorder


@pytest.fixture
def make_state(tmp_path):
    def _make(**config: Any) -> Dict[str, Any]:
        state = ensure_defaults({"config": dict(config)})
        state["execution"]["mounts"]["target_root"] = str(tmp_path)
        return state

    return _make

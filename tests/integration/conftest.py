"""Fixtures for integration tests that drive a real git executable."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Ann Example",
    "GIT_AUTHOR_EMAIL": "ann@example.com",
    "GIT_AUTHOR_DATE": "2024-01-02T03:04:05+00:00",
    "GIT_COMMITTER_NAME": "Ann Example",
    "GIT_COMMITTER_EMAIL": "ann@example.com",
    "GIT_COMMITTER_DATE": "2024-01-02T03:04:05+00:00",
    "GIT_CONFIG_NOSYSTEM": "1",
    "HOME": "",
}


@pytest.fixture
def git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., str]:
    """Run git inside tmp_path with a fixed identity and clock.

    Example:
        >>> git("commit", "-m", "Initial import")
    """
    for key, value in GIT_ENV.items():
        monkeypatch.setenv(key, value or str(tmp_path))

    def _git(*args: str) -> str:
        result = subprocess.run(
            ["git", "-C", str(tmp_path), *args],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    return _git


@pytest.fixture
def repo(tmp_path: Path, git: Callable[..., str]) -> Path:
    """A repository with one commit containing marker comments.

    Layout:
        src/sensor.rs  markers at lines 1, 4 and 600
        tools/run.py   marker at line 2
    """
    body = "\n".join(f"    let v{i} = {i};" for i in range(594))
    sensor = (
        "/// REQ-1: sensor driver\n"
        "pub struct Sensor;\n"
        "impl Sensor {\n"
        "    // REQ-2\n"
        "    pub fn read(&self) {\n"
        f"{body}\n"
        "    // REQ-3\n"
        "    }\n"
        "}\n"
    )
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "sensor.rs").write_text(sensor)
    (tmp_path / "tools").mkdir()
    (tmp_path / "tools" / "run.py").write_text("def main():\n    return 0  # REQ-2\n")

    git("init", "-q", "-b", "main")
    git("add", ".")
    git("commit", "-q", "-m", "Add sensor driver")
    return tmp_path

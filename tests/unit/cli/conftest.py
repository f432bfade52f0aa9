"""Fixtures for CLI unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A small multi-language project; the working directory is set to it.

    Returns:
        Path to the project root.
    """
    files = {
        "src/main.rs": "/// REQ-1: entry point\nfn main() {\n    let rate = 44100; // REQ-2\n}\n",
        "src/util.py": "# REQ-1\ndef helper():\n    return 1\n",
        "vendor/dep.js": "// REQ-9\nfunction dep() {}\n",
        "docs/notes.txt": "REQ-3 is not in a comment of a supported language\n",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    (tmp_path / ".gitattributes").write_text("vendor/** linguist-vendored\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path

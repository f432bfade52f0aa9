"""Shared test configuration for tracy.

Unit tests (tests/unit) run without git and parse small in-memory sources.
Integration tests (tests/integration) drive a real ``git`` executable in
temporary repositories and are skipped when git is not installed.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from tracy.languages import language_for_path
from tracy.syntax import SyntaxParser, SyntaxTree


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests when git is unavailable."""
    if shutil.which("git") is not None:
        return
    skip_git = pytest.mark.skip(reason="git executable not found")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_git)


@pytest.fixture
def syntax_parser() -> SyntaxParser:
    """Provide a fresh SyntaxParser."""
    return SyntaxParser()


@pytest.fixture
def parse(syntax_parser: SyntaxParser) -> Callable[[str, str], SyntaxTree]:
    """Parse source text as if it came from a file with the given name.

    Example:
        >>> tree = parse("main.rs", "fn main() {}\\n")
    """

    def _parse(filename: str, source: str) -> SyntaxTree:
        language = language_for_path(Path(filename))
        assert language is not None, f"unsupported test file {filename}"
        return syntax_parser.parse(source.encode("utf-8"), language)

    return _parse


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a source file below tmp_path and return its path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write

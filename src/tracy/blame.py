"""Blame attribution for scan results.

After a scan, every file with at least one occurrence gets exactly one
``git blame --porcelain -L <min>,<max>`` query covering all of its marker
lines. The porcelain output is parsed into a per-line map and each
occurrence receives the record for its line. A failing query (untracked
file, no repository, git missing) leaves that file's occurrences without
attribution and the run continues.

Porcelain parsing
-----------------
Output is a sequence of blocks::

    <commit> <orig-line> <final-line> [<run-length>]
    author <name>               (only the first time a commit appears)
    author-mail <<email>>
    author-time <epoch>
    summary <text>
    ...                         (other keys are ignored)
    \\t<source line>

The header opens a block, the tab-prefixed source line closes it. Metadata
is cached per commit, so later blocks that omit it resolve to the values
seen earlier. The resolved record is applied to ``run-length`` consecutive
final lines. Blank or malformed headers are skipped.
"""

from __future__ import annotations

import string
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from tracy.errors import GitError
from tracy.git import blame_porcelain
from tracy.models import BlameInfo, Occurrence

logger = structlog.get_logger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)


class _State(Enum):
    AWAITING_HEADER = "awaiting_header"
    READING_METADATA = "reading_metadata"


def _parse_header(line: str) -> tuple[str, int, int] | None:
    """Return (commit, final_line, run_length) or None for a malformed header."""
    parts = line.split()
    if len(parts) not in (3, 4):
        return None
    commit = parts[0]
    if not set(commit) <= _HEX_DIGITS:
        return None
    try:
        numbers = [int(part) for part in parts[1:]]
    except ValueError:
        return None
    final_line = numbers[1]
    run_length = numbers[2] if len(numbers) == 3 else 1
    if final_line < 1 or run_length < 1:
        return None
    return commit, final_line, run_length


def _strip_mail(value: str) -> str:
    value = value.strip()
    if value.startswith("<"):
        value = value[1:]
    if value.endswith(">"):
        value = value[:-1]
    return value


def parse_blame_porcelain(output: str) -> dict[int, BlameInfo]:
    """Parse ``git blame --porcelain`` (or ``--line-porcelain``) output.

    Args:
        output: Raw blame output.

    Returns:
        Mapping of 1-indexed final line number to its attribution.

    Example:
        >>> out = "a1b2c3 10 10 3\\nauthor Ann\\nauthor-mail <ann@x.io>\\n\\tcode\\n"
        >>> lines = parse_blame_porcelain(out)
        >>> sorted(lines), lines[12].author_mail
        ([10, 11, 12], 'ann@x.io')
    """
    result: dict[int, BlameInfo] = {}
    commits: dict[str, dict[str, Any]] = {}
    state = _State.AWAITING_HEADER
    commit, final_line, run_length = "", 0, 0

    def flush() -> None:
        info = BlameInfo(commit=commit, **commits[commit])
        for offset in range(run_length):
            result[final_line + offset] = info

    for line in output.split("\n"):
        if state is _State.AWAITING_HEADER:
            header = _parse_header(line)
            if header is None:
                continue
            commit, final_line, run_length = header
            commits.setdefault(commit, {})
            state = _State.READING_METADATA
            continue

        if line.startswith("\t"):
            flush()
            state = _State.AWAITING_HEADER
            continue

        key, _, value = line.partition(" ")
        metadata = commits[commit]
        if key == "author":
            metadata["author"] = value
        elif key == "author-mail":
            metadata["author_mail"] = _strip_mail(value)
        elif key == "author-time":
            try:
                metadata["author_time"] = int(value.strip())
            except ValueError:
                pass
        elif key == "summary":
            metadata["summary"] = value

    if state is _State.READING_METADATA:
        flush()
    return result


def blame_ranges(results: Mapping[str, list[Occurrence]]) -> dict[str, tuple[int, int]]:
    """Return the inclusive [min, max] marker line range of each file.

    Files appear in the order they are first seen while iterating
    ``results``.
    """
    ranges: dict[str, tuple[int, int]] = {}
    for occurrences in results.values():
        for occurrence in occurrences:
            low, high = ranges.get(occurrence.file, (occurrence.line, occurrence.line))
            ranges[occurrence.file] = (min(low, occurrence.line), max(high, occurrence.line))
    return ranges


def add_blame(root: Path, results: Mapping[str, list[Occurrence]]) -> None:
    """Attach git attribution to every occurrence in ``results``, in place.

    Issues one blame query per file. Occurrences are never added or
    removed; only their ``blame`` field is assigned.

    Args:
        root: Scan root that occurrence paths are relative to.
        results: Scan results to annotate.
    """
    log = logger.bind(root=str(root))
    attributed: dict[str, dict[int, BlameInfo]] = {}
    for file, (start, end) in blame_ranges(results).items():
        try:
            output = blame_porcelain(root, file, start, end)
        except GitError as e:
            log.debug("blame_unavailable", file=file, error=str(e))
            continue
        attributed[file] = parse_blame_porcelain(output)

    for occurrences in results.values():
        for occurrence in occurrences:
            lines = attributed.get(occurrence.file)
            if lines is not None and occurrence.line in lines:
                occurrence.blame = lines[occurrence.line]

    log.info("blame_complete", files=len(attributed))


__all__ = ["add_blame", "blame_ranges", "parse_blame_porcelain"]

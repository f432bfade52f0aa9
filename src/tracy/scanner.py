"""Marker scanner.

Parses each candidate file, finds marker slugs in its comments and records
one Occurrence per distinct (slug, line) pair in the file, annotated with
inline/above/below context and the enclosing scope chain.

Files are processed strictly in the order given. Within a slug, occurrences
keep that file order and then source order; the returned mapping's keys are
sorted.

Example:
    >>> from pathlib import Path
    >>> results = scan_files(Path("repo"), [Path("repo/src/lib.rs")], ["REQ"])
    >>> [occ.line for occ in results["REQ-1"]]
    [3]
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from tracy.comments import iter_comments
from tracy.context import ContextExtractor
from tracy.markers import MarkerMatcher
from tracy.models import Occurrence, ScanResult
from tracy.scope import resolve_scope
from tracy.syntax import SyntaxParser, SyntaxTree

logger = structlog.get_logger(__name__)


class Scanner:
    """Scans files for marker occurrences.

    Args:
        root: Scan root; occurrence paths are reported relative to it.
        markers: Marker prefixes, e.g. ``["REQ", "SPEC"]``.

    Raises:
        ConfigurationError: If ``markers`` is empty or invalid.
    """

    def __init__(self, root: Path, markers: Iterable[str]) -> None:
        self.root = root
        self.matcher = MarkerMatcher(markers)
        self._parser = SyntaxParser()

    def scan(self, paths: Sequence[Path]) -> ScanResult:
        """Scan ``paths`` in order and return occurrences keyed by slug.

        Raises:
            FileReadError: If any file cannot be read.
            GrammarUnavailableError: If a grammar package is missing.
        """
        log = logger.bind(root=str(self.root))
        results: dict[str, list[Occurrence]] = {}
        scanned = 0
        for path in paths:
            occurrences = self.scan_file(path)
            if occurrences is None:
                continue
            scanned += 1
            for slug, occurrence in occurrences:
                results.setdefault(slug, []).append(occurrence)

        log.info(
            "scan_complete",
            files=len(paths),
            parsed=scanned,
            slugs=len(results),
            occurrences=sum(len(v) for v in results.values()),
        )
        return dict(sorted(results.items()))

    def scan_file(self, path: Path) -> list[tuple[str, Occurrence]] | None:
        """Scan one file.

        Returns:
            (slug, occurrence) pairs in source order, or None when the
            file's language is not supported.
        """
        tree = self._parser.parse_path(path)
        if tree is None:
            logger.debug("file_skipped", file=str(path), reason="unsupported_language")
            return None
        return self._collect(tree, self._relative(path))

    def _collect(self, tree: SyntaxTree, file: str) -> list[tuple[str, Occurrence]]:
        extractor = ContextExtractor(tree)
        seen: set[tuple[str, int]] = set()
        found: list[tuple[str, Occurrence]] = []
        for comment in iter_comments(tree):
            slugs = self.matcher.find_all(comment.text)
            if not slugs:
                continue
            fresh = [slug for slug in slugs if (slug, comment.line) not in seen]
            if not fresh:
                continue
            occurrence_fields = {
                "file": file,
                "line": comment.line,
                "comment_text": comment.text,
                "inline": extractor.inline(comment.node),
                "above": extractor.above(comment.node),
                "below": extractor.below(comment.node),
                "scope": resolve_scope(tree, comment.node),
            }
            for slug in fresh:
                if (slug, comment.line) in seen:
                    continue
                seen.add((slug, comment.line))
                found.append((slug, Occurrence(**occurrence_fields)))
        return found

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


def scan_files(root: Path, paths: Sequence[Path], markers: Iterable[str]) -> ScanResult:
    """Scan ``paths`` for ``markers``; see Scanner.scan."""
    return Scanner(root, markers).scan(paths)


__all__ = ["Scanner", "scan_files"]

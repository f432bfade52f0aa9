"""Marker matching.

Configured marker prefixes are escaped and joined into a single pattern of
the form ``(?:REQ|SPEC)-<digits>``. Matching is case-sensitive and
unanchored, so ``MYREQ-12`` yields ``REQ-12`` for marker ``REQ``. The digit
run is kept verbatim: ``REQ-007`` and ``REQ-7`` are different slugs.

Example:
    >>> matcher = MarkerMatcher(["REQ", "SPEC"])
    >>> matcher.find_all("// REQ-007 and SPEC-2, again REQ-007")
    ['REQ-007', 'SPEC-2', 'REQ-007']
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from tracy.errors import ConfigurationError


class MarkerMatcher:
    """Compiled matcher for a set of marker prefixes.

    Args:
        markers: Literal marker prefixes. Duplicates are ignored.

    Raises:
        ConfigurationError: If the set is empty, holds a blank prefix,
            or the combined pattern fails to compile.
    """

    def __init__(self, markers: Iterable[str]) -> None:
        unique: list[str] = []
        for marker in markers:
            if not marker or not marker.strip():
                raise ConfigurationError("marker prefixes must not be blank")
            if marker not in unique:
                unique.append(marker)
        if not unique:
            raise ConfigurationError("at least one marker prefix is required")

        self.markers: tuple[str, ...] = tuple(unique)
        alternation = "|".join(re.escape(marker) for marker in self.markers)
        try:
            self._pattern = re.compile(rf"(?:{alternation})-[0-9]+")
        except re.error as e:
            raise ConfigurationError(f"invalid marker pattern: {e}") from e

    @property
    def pattern(self) -> str:
        """Source of the compiled pattern."""
        return self._pattern.pattern

    def find_all(self, text: str) -> list[str]:
        """Return every non-overlapping slug in ``text``, in order of appearance."""
        return [match.group(0) for match in self._pattern.finditer(text)]

    def __repr__(self) -> str:
        return f"MarkerMatcher({list(self.markers)!r})"


__all__ = ["MarkerMatcher"]

"""Result models for a traceability scan.

This module defines the records produced by the scanner and the
attribution engine:
- CodeContext: A construct adjacent to a marker comment
- ScopeItem: One named construct enclosing a marker comment
- BlameInfo: Per-line git attribution
- Occurrence: One marker found at one line of one file
- GitMeta: Repository state captured alongside a report

Occurrences are created once by the scanner. Every field except ``blame``
is frozen; the attribution engine fills ``blame`` in place afterwards.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CodeContext(BaseModel):
    """A syntax construct next to, above, or below a marker comment.

    Attributes:
        kind: Grammar node kind, e.g. ``function_item`` or ``lexical_declaration``.
        name: Declared name when the node shape exposes one.
        text: First source line of the construct.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str = Field(..., description="Grammar node kind of the construct")
    name: str | None = Field(default=None, description="Declared name, if any")
    text: str = Field(..., description="First source line of the construct")


class ScopeItem(BaseModel):
    """One enclosing named construct (function, type or impl block, module)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str = Field(..., description="Grammar node kind of the scope")
    name: str | None = Field(default=None, description="Declared name, if any")


class BlameInfo(BaseModel):
    """Git attribution for a single line.

    Attributes:
        commit: Full commit id that last touched the line.
        author: Author name.
        author_mail: Author email without angle brackets.
        author_time: Author timestamp in epoch seconds.
        summary: First line of the commit message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    commit: str = Field(..., description="Commit id that last touched the line")
    author: str | None = Field(default=None, description="Author name")
    author_mail: str | None = Field(default=None, description="Author email, brackets stripped")
    author_time: int | None = Field(default=None, description="Author time, epoch seconds")
    summary: str | None = Field(default=None, description="Commit summary line")


class Occurrence(BaseModel):
    """A requirement marker found in a comment.

    Attributes:
        file: Path relative to the scan root, using forward slashes.
        line: 1-indexed line of the comment that holds the marker.
        comment_text: Verbatim text of that comment node, delimiters included.
        inline: Construct sharing the comment's line.
        above: Nearest construct before the comment.
        below: Nearest construct after the comment block.
        scope: Enclosing named constructs, innermost first.
        blame: Git attribution, filled in by the attribution engine.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    file: str = Field(..., frozen=True, description="Path relative to the scan root")
    line: int = Field(..., frozen=True, ge=1, description="1-indexed comment line")
    comment_text: str = Field(..., frozen=True, description="Verbatim comment text")
    inline: CodeContext | None = Field(default=None, frozen=True)
    above: CodeContext | None = Field(default=None, frozen=True)
    below: CodeContext | None = Field(default=None, frozen=True)
    scope: tuple[ScopeItem, ...] = Field(default=(), frozen=True)
    blame: BlameInfo | None = Field(default=None, description="Git attribution for the line")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reports, omitting absent fields and an empty scope."""
        data = self.model_dump(mode="json", exclude_none=True)
        if not data.get("scope"):
            data.pop("scope", None)
        return data


class GitMeta(BaseModel):
    """Repository state at scan time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    repo_root: str = Field(..., description="Absolute path of the repository top level")
    head_sha: str = Field(..., description="Commit id of HEAD")
    head_ref: str | None = Field(default=None, description="Branch name, None when detached")
    is_dirty: bool = Field(..., description="True when the work tree has changes")


ScanResult = dict[str, list[Occurrence]]
"""Marker slug (e.g. ``REQ-7``) to occurrences in scan order, keys sorted."""


__all__ = [
    "BlameInfo",
    "CodeContext",
    "GitMeta",
    "Occurrence",
    "ScanResult",
    "ScopeItem",
]

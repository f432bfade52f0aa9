"""CSV renderer for scan results.

One row per occurrence. Context objects are flattened to kind/name columns,
the scope chain is rendered innermost first as ``kind:name`` items joined
by `` > ``, and repository metadata is repeated on every row so each row
stands on its own.
"""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tracy.models import CodeContext, GitMeta, Occurrence, ScanResult, ScopeItem

CSV_COLUMNS: tuple[str, ...] = (
    "requirement_id",
    "file",
    "line",
    "comment_text",
    "inline_kind",
    "inline_name",
    "above_kind",
    "above_name",
    "below_kind",
    "below_name",
    "scope",
    "blame_commit",
    "blame_author",
    "blame_author_mail",
    "blame_author_time",
    "blame_summary",
    "repo_root",
    "head_sha",
    "head_ref",
    "is_dirty",
)


def _context_cells(context: CodeContext | None) -> list[str]:
    if context is None:
        return ["", ""]
    return [context.kind, context.name or ""]


def _scope_cell(scope: tuple[ScopeItem, ...]) -> str:
    return " > ".join(f"{item.kind}:{item.name}" if item.name else item.kind for item in scope)


def _row(slug: str, occurrence: Occurrence, meta: GitMeta | None) -> list[str]:
    blame = occurrence.blame
    row = [slug, occurrence.file, str(occurrence.line), occurrence.comment_text]
    row += _context_cells(occurrence.inline)
    row += _context_cells(occurrence.above)
    row += _context_cells(occurrence.below)
    row.append(_scope_cell(occurrence.scope))
    if blame is None:
        row += [""] * 5
    else:
        row += [
            blame.commit,
            blame.author or "",
            blame.author_mail or "",
            "" if blame.author_time is None else str(blame.author_time),
            blame.summary or "",
        ]
    if meta is None:
        row += [""] * 4
    else:
        row += [meta.repo_root, meta.head_sha, meta.head_ref or "", str(meta.is_dirty).lower()]
    return row


def render_csv(results: ScanResult, meta: GitMeta | None = None) -> str:
    """Render results as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for slug, occurrences in results.items():
        for occurrence in occurrences:
            writer.writerow(_row(slug, occurrence, meta))
    return buffer.getvalue()


__all__ = ["CSV_COLUMNS", "render_csv"]

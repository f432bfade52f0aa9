"""JSON and JSON Lines renderers for scan results.

JSON is pretty-printed. Without metadata the document is the results
mapping itself; with metadata it is ``{"meta": ..., "results": ...}``.

JSON Lines emits one compact object per line: an optional
``{"type": "meta", ...}`` record first, then one ``{"type": "match", ...}``
record per occurrence, in result order.

Example:
    >>> print(render_jsonl(results))
    {"type": "match", "requirement_id": "REQ-1", "entry": {"file": "src/a.rs", ...}}
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tracy.models import GitMeta, ScanResult


def results_to_dict(results: ScanResult) -> dict[str, list[dict[str, Any]]]:
    """Convert results to plain JSON-compatible data."""
    return {slug: [occ.to_dict() for occ in occurrences] for slug, occurrences in results.items()}


def render_json(results: ScanResult, meta: GitMeta | None = None) -> str:
    """Render results as a pretty-printed JSON document."""
    data: dict[str, Any] = results_to_dict(results)
    if meta is not None:
        data = {"meta": meta.model_dump(mode="json"), "results": data}
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def render_jsonl(results: ScanResult, meta: GitMeta | None = None) -> str:
    """Render results as JSON Lines, one occurrence per line."""
    lines: list[str] = []
    if meta is not None:
        lines.append(json.dumps({"type": "meta", "meta": meta.model_dump(mode="json")}))
    for slug, occurrences in results.items():
        for occurrence in occurrences:
            record = {"type": "match", "requirement_id": slug, "entry": occurrence.to_dict()}
            lines.append(json.dumps(record, ensure_ascii=False))
    return "".join(f"{line}\n" for line in lines)


__all__ = ["render_json", "render_jsonl", "results_to_dict"]

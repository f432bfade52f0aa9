"""SARIF 2.1.0 renderer for scan results.

Each occurrence becomes a ``note`` result of the single rule
``traceability.requirement_ref``, located at the occurrence's file and
line. Requirement id, context, scope and blame travel in the result's
``properties``. Repository metadata, when present, is reported as
``versionControlProvenance`` of the run.

SARIF Specification: https://docs.oasis-open.org/sarif/sarif/v2.1.0/sarif-v2.1.0.html
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tracy import __version__

if TYPE_CHECKING:
    from tracy.models import GitMeta, Occurrence, ScanResult

SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
SARIF_VERSION = "2.1.0"

TOOL_NAME = "tracy"
RULE_ID = "traceability.requirement_ref"


def render_sarif(results: ScanResult, meta: GitMeta | None = None) -> str:
    """Render results as a pretty-printed SARIF log."""
    return json.dumps(_build_sarif_document(results, meta), indent=2, ensure_ascii=False) + "\n"


def _build_sarif_document(results: ScanResult, meta: GitMeta | None) -> dict[str, Any]:
    run: dict[str, Any] = {
        "tool": {
            "driver": {
                "name": TOOL_NAME,
                "version": __version__,
                "rules": [
                    {
                        "id": RULE_ID,
                        "name": "RequirementReference",
                        "shortDescription": {"text": "Requirement referenced from source code"},
                    }
                ],
            }
        },
        "results": [
            _build_result(slug, occurrence)
            for slug, occurrences in results.items()
            for occurrence in occurrences
        ],
    }
    if meta is not None:
        provenance: dict[str, Any] = {
            "repositoryUri": Path(meta.repo_root).as_uri(),
            "revisionId": meta.head_sha,
        }
        if meta.head_ref:
            provenance["branch"] = meta.head_ref
        run["versionControlProvenance"] = [provenance]
        run["properties"] = {"isDirty": meta.is_dirty}

    return {"$schema": SARIF_SCHEMA, "version": SARIF_VERSION, "runs": [run]}


def _build_result(slug: str, occurrence: Occurrence) -> dict[str, Any]:
    entry = occurrence.to_dict()
    properties = {
        key: entry[key] for key in ("inline", "above", "below", "scope", "blame") if key in entry
    }
    properties["requirement_id"] = slug
    return {
        "ruleId": RULE_ID,
        "level": "note",
        "message": {"text": f"{slug} referenced in {occurrence.file}:{occurrence.line}"},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {"uri": occurrence.file},
                    "region": {"startLine": occurrence.line},
                }
            }
        ],
        "properties": properties,
    }


__all__ = ["RULE_ID", "SARIF_SCHEMA", "SARIF_VERSION", "TOOL_NAME", "render_sarif"]

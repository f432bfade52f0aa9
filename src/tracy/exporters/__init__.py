"""Report renderers for scan results.

Every renderer takes the scan results and optional repository metadata
and returns the whole report as text:
- render_json: Pretty-printed JSON
- render_jsonl: JSON Lines, one occurrence per line
- render_csv: CSV, one occurrence per row
- render_sarif: SARIF 2.1.0 for code-scanning dashboards

Example:
    >>> from tracy.exporters import format_report, write_report
    >>> text = format_report(results, "sarif", meta=meta)
    >>> write_report(text, Path("reports/trace.sarif"))
    PosixPath('reports/trace.sarif')
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from tracy.errors import ConfigurationError
from tracy.exporters.csv_exporter import render_csv
from tracy.exporters.json_exporter import render_json, render_jsonl
from tracy.exporters.sarif_exporter import render_sarif

if TYPE_CHECKING:
    from tracy.models import GitMeta, ScanResult

logger = structlog.get_logger(__name__)

Renderer = Callable[["ScanResult", "GitMeta | None"], str]

RENDERERS: dict[str, Renderer] = {
    "json": render_json,
    "jsonl": render_jsonl,
    "csv": render_csv,
    "sarif": render_sarif,
}


def format_report(results: ScanResult, fmt: str, meta: GitMeta | None = None) -> str:
    """Render ``results`` in format ``fmt``.

    Raises:
        ConfigurationError: If ``fmt`` is not a known format.
    """
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        known = ", ".join(sorted(RENDERERS))
        raise ConfigurationError(f"unknown output format {fmt!r} (expected one of: {known})")
    return renderer(results, meta)


def write_report(text: str, output_path: Path) -> Path:
    """Write a rendered report, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    logger.info("report_written", output_path=str(output_path), size=len(text))
    return output_path


__all__: list[str] = [
    "RENDERERS",
    "format_report",
    "render_csv",
    "render_json",
    "render_jsonl",
    "render_sarif",
    "write_report",
]

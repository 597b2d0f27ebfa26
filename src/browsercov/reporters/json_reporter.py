"""JSON reporter that serializes coverage reports for downstream tooling.

Writes the full report (filtering statistics, totals, per-file metrics and
line states) and the lightweight summary used as a top-level index.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from browsercov.models.coverage import FileEntry, Report

logger = logging.getLogger(__name__)


class JSONReporter:
    """Generate JSON documents from assembled coverage reports."""

    def __init__(self, *, include_sources: bool = False) -> None:
        self.include_sources = include_sources

    def generate(self, output_path: Path, report: Report) -> Path:
        """Write the full report as JSON.

        Args:
            output_path: Path to write the JSON file.
            report: The assembled report.

        Returns:
            The path to the generated JSON file.
        """
        _write_json(output_path, report_to_dict(report, include_sources=self.include_sources))
        logger.info("JSON coverage report written to %s", output_path)
        return output_path

    def generate_string(self, report: Report) -> str:
        """Return the full report as a JSON string."""
        return _dumps(report_to_dict(report, include_sources=self.include_sources))

    def write_summary(self, output_path: Path, report: Report) -> Path:
        """Write the lightweight summary (timestamp, coverage, script counts)."""
        _write_json(output_path, report.summary())
        logger.info("Coverage summary written to %s", output_path)
        return output_path


def report_to_dict(report: Report, *, include_sources: bool = False) -> dict[str, Any]:
    """Build the JSON report structure."""
    return {
        "tool": "browsercov",
        "timestamp": report.timestamp.isoformat(),
        "application_coverage_pct": report.application_coverage_pct,
        "filtering_stats": report.filtering_stats.to_dict(),
        "total_metrics": report.total_metrics.to_dict(),
        "files": [
            _serialize_entry(entry, include_sources=include_sources)
            for entry in report.file_entries
        ],
    }


def _serialize_entry(entry: FileEntry, *, include_sources: bool) -> dict[str, Any]:
    data: dict[str, Any] = {
        "script_id": entry.script_id,
        "url": entry.url,
        "metrics": entry.metrics.to_dict(),
        "line_states": [state.value for state in entry.line_states],
        "ranges": [
            {"start": r.start, "end": r.end, "count": r.execution_count} for r in entry.ranges
        ],
    }
    if include_sources:
        data["source"] = entry.source
    return data


def _dumps(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _write_json(output_path: Path, data: dict[str, Any]) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(_dumps(data), encoding="utf-8")

"""Data models for script coverage, filtering decisions and assembled reports.

These are the unified types that flow from a raw precise-coverage snapshot
through classification and metric computation into the final ``Report`` a
renderer consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable


def percentage(covered: int, total: int) -> float:
    """Return ``covered / total`` as a percentage, or 0.0 when *total* is 0."""
    if total <= 0:
        return 0.0
    return covered / total * 100.0


# ── Filtering reasons ────────────────────────────────────────────


class FilterReason(Enum):
    """Why a script was included in or excluded from the report.

    Exactly one reason is attributed to every script.
    """

    CUSTOM_INCLUDE = "custom_include"
    INLINE_SCRIPT_BLOCKED = "inline_script_blocked"
    EMPTY_URL = "empty_url"
    BROWSER_EXTENSION = "browser_extension"
    DEVTOOLS_FRAMEWORK = "devtools_framework"
    TOO_SMALL = "too_small"
    BROWSER_INTERNAL = "browser_internal"
    FRAMEWORK_TOOLS = "framework_tools"
    CDN_LIBRARY = "cdn_library"
    MINIFIED_CODE = "minified_code"
    GENERATED_CODE = "generated_code"
    MINIFIED_HEURISTIC = "minified_heuristic"
    TEST_FRAMEWORK = "test_framework"
    HIGH_DENSITY_INLINE = "high_density_inline"
    INLINE_SYSTEM_SCRIPT = "inline_system_script"
    CUSTOM_EXCLUDE = "custom_exclude"
    APPLICATION_SCRIPT = "application_script"
    SOURCE_UNAVAILABLE = "source_unavailable"

    @property
    def icon(self) -> str:
        """Short pictogram used by renderers next to the reason."""
        return _REASON_DETAILS[self][0]

    @property
    def description(self) -> str:
        """Human-readable label for the reason."""
        return _REASON_DETAILS[self][1]

    @property
    def is_inclusion(self) -> bool:
        """Return True if scripts with this reason end up in the report."""
        return self in (FilterReason.CUSTOM_INCLUDE, FilterReason.APPLICATION_SCRIPT)


_REASON_DETAILS: dict[FilterReason, tuple[str, str]] = {
    FilterReason.APPLICATION_SCRIPT: ("✅", "Application Scripts"),
    FilterReason.EMPTY_URL: ("🚫", "Empty URLs (Browser Internals)"),
    FilterReason.BROWSER_EXTENSION: ("🧩", "Browser Extensions"),
    FilterReason.DEVTOOLS_FRAMEWORK: ("🔧", "DevTools & Automation"),
    FilterReason.FRAMEWORK_TOOLS: ("⚛️", "Framework Development Tools"),
    FilterReason.CDN_LIBRARY: ("🌐", "CDN Libraries"),
    FilterReason.MINIFIED_CODE: ("📦", "Minified Code"),
    FilterReason.GENERATED_CODE: ("🤖", "Auto-Generated Code"),
    FilterReason.MINIFIED_HEURISTIC: ("🔍", "Minified (Heuristic)"),
    FilterReason.TEST_FRAMEWORK: ("🧪", "Test Frameworks"),
    FilterReason.BROWSER_INTERNAL: ("🔒", "Browser Internal Scripts"),
    FilterReason.TOO_SMALL: ("📏", "Scripts Too Small"),
    FilterReason.SOURCE_UNAVAILABLE: ("❌", "Source Unavailable"),
    FilterReason.CUSTOM_EXCLUDE: ("⚙️", "Custom Exclusions"),
    FilterReason.CUSTOM_INCLUDE: ("✨", "Custom Inclusions"),
    FilterReason.HIGH_DENSITY_INLINE: ("📊", "High-Density Inline Scripts"),
    FilterReason.INLINE_SYSTEM_SCRIPT: ("🔧", "Inline System Scripts"),
    FilterReason.INLINE_SCRIPT_BLOCKED: ("🚫", "Inline Scripts (All Blocked)"),
}


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying a single script."""

    included: bool
    """Whether the script counts as application code."""

    reason: FilterReason
    """The single reason attributed to the decision."""


# ── Raw snapshot input ───────────────────────────────────────────


@dataclass(frozen=True)
class CoverageRange:
    """A source range tagged with how many times it executed."""

    start: int
    end: int
    execution_count: int

    @property
    def is_covered(self) -> bool:
        """Return True if this range was executed at least once."""
        return self.execution_count > 0


@dataclass(frozen=True)
class FunctionCoverageGroup:
    """The ranges recorded for a single function of a script."""

    name: str
    ranges: tuple[CoverageRange, ...] = ()

    @property
    def is_covered(self) -> bool:
        """Return True if any range of this function executed."""
        return any(r.is_covered for r in self.ranges)


@dataclass(frozen=True)
class ScriptCoverageInput:
    """Raw coverage for one loaded script, as captured by the browser session."""

    script_id: str
    """Identifier assigned by the browser to the script."""

    url: str = ""
    """Script URL; empty for scripts evaluated without one."""

    source: str = ""
    """Full source text, when it was captured alongside the snapshot."""

    ranges: tuple[CoverageRange, ...] = ()
    """Script-level ranges. Empty means: use the function groups' ranges."""

    function_groups: tuple[FunctionCoverageGroup, ...] = ()
    """Per-function range groups."""

    @property
    def all_ranges(self) -> tuple[CoverageRange, ...]:
        """Return the script-level ranges, or every function range in order."""
        if self.ranges:
            return self.ranges
        return tuple(r for group in self.function_groups for r in group.ranges)


# ── Metrics ──────────────────────────────────────────────────────


@dataclass
class CoverageStat:
    """A single covered/total counter with its percentage."""

    total: int = 0
    covered: int = 0
    skipped: int = 0
    pct: float = 0.0

    @classmethod
    def from_counts(cls, covered: int, total: int, skipped: int = 0) -> CoverageStat:
        """Build a stat whose percentage is derived from the counts."""
        return cls(total=total, covered=covered, skipped=skipped, pct=percentage(covered, total))

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "covered": self.covered,
            "skipped": self.skipped,
            "pct": self.pct,
        }


@dataclass
class CoverageMetrics:
    """Statement (byte), function and line coverage for a file or a whole report."""

    statements: CoverageStat = field(default_factory=CoverageStat)
    functions: CoverageStat = field(default_factory=CoverageStat)
    lines: CoverageStat = field(default_factory=CoverageStat)

    @classmethod
    def total_of(cls, metrics: Iterable[CoverageMetrics]) -> CoverageMetrics:
        """Sum the counts of *metrics* and recompute percentages from the sums.

        Percentages are never averaged per file, so the result does not
        depend on the order or on the size mix of the inputs.
        """
        sums = {"statements": [0, 0, 0], "functions": [0, 0, 0], "lines": [0, 0, 0]}
        for m in metrics:
            for name, acc in sums.items():
                stat: CoverageStat = getattr(m, name)
                acc[0] += stat.covered
                acc[1] += stat.total
                acc[2] += stat.skipped
        return cls(
            **{
                name: CoverageStat.from_counts(covered, total, skipped)
                for name, (covered, total, skipped) in sums.items()
            }
        )

    @property
    def overall_pct(self) -> float:
        """Mean of the statement, function and line percentages."""
        return (self.statements.pct + self.functions.pct + self.lines.pct) / 3

    def to_dict(self) -> dict[str, Any]:
        return {
            "statements": self.statements.to_dict(),
            "functions": self.functions.to_dict(),
            "lines": self.lines.to_dict(),
        }


class LineState(Enum):
    """Display state of a single source line."""

    COVERED = "covered"
    UNCOVERED = "uncovered"
    NON_EXECUTABLE = "non_executable"


# ── Report ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class FileEntry:
    """An included script with its computed coverage."""

    script_id: str
    url: str
    """Disambiguated display URL (``<url>#<script_id>`` or ``Script_<script_id>``)."""

    source: str
    lines: tuple[str, ...]
    ranges: tuple[CoverageRange, ...]
    metrics: CoverageMetrics
    line_states: tuple[LineState, ...] = ()
    """Per-line covered/uncovered state, aligned with ``lines``."""


@dataclass
class FilteringStats:
    """Counts and timing of the filtering pass over one snapshot."""

    total_scripts: int = 0
    application_scripts: int = 0
    filtered_out: int = 0
    reason_counts: dict[FilterReason, int] = field(default_factory=dict)
    processing_time_ms: float = 0.0
    avg_time_per_script_ms: float = 0.0

    def reason_breakdown(self) -> list[tuple[FilterReason, int, float]]:
        """Return ``(reason, count, pct_of_all_scripts)`` sorted by count, then tag."""
        rows = [
            (reason, count, percentage(count, self.total_scripts))
            for reason, count in self.reason_counts.items()
        ]
        rows.sort(key=lambda row: (-row[1], row[0].value))
        return rows

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_scripts": self.total_scripts,
            "application_scripts": self.application_scripts,
            "filtered_out": self.filtered_out,
            "reason_counts": {
                reason.value: count for reason, count, _ in self.reason_breakdown()
            },
            "reasons": [
                {
                    "reason": reason.value,
                    "icon": reason.icon,
                    "description": reason.description,
                    "count": count,
                    "pct": pct,
                }
                for reason, count, pct in self.reason_breakdown()
            ],
            "processing_time_ms": self.processing_time_ms,
            "avg_time_per_script_ms": self.avg_time_per_script_ms,
        }


@dataclass
class Report:
    """The terminal artifact of one report generation."""

    filtering_stats: FilteringStats = field(default_factory=FilteringStats)
    total_metrics: CoverageMetrics = field(default_factory=CoverageMetrics)
    file_entries: list[FileEntry] = field(default_factory=list)
    """Entries sorted by disambiguated URL."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def application_coverage_pct(self) -> float:
        """Aggregate statement coverage over all application scripts."""
        return self.total_metrics.statements.pct

    def summary(self) -> dict[str, Any]:
        """Return the lightweight summary used for a top-level index artifact."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "application_coverage_pct": self.application_coverage_pct,
            "application_scripts": self.filtering_stats.application_scripts,
            "total_scripts": self.filtering_stats.total_scripts,
        }

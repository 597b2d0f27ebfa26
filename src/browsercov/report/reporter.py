"""High-level coverage reporter tying profiles, sources and assembly together."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from browsercov.adapters.cdp import entries_to_scripts
from browsercov.coverage.bitmap import build_bitmap, covered_count
from browsercov.filtering.profiles import APPLICATION_PROFILE, FilterOptions, resolve_profile
from browsercov.models.coverage import percentage
from browsercov.report.assembler import assemble
from browsercov.report.sources import indexed_source_provider

if TYPE_CHECKING:
    from collections.abc import Sequence

    from browsercov.adapters.cdp import CoverageEntry
    from browsercov.config import BrowserCovConfig
    from browsercov.models.coverage import Report, ScriptCoverageInput
    from browsercov.report.sources import SourceProvider

logger = logging.getLogger(__name__)


class CoverageReporter:
    """Generate application-script coverage reports from snapshots.

    Uses the ``application`` filtering profile unless told otherwise.
    """

    def __init__(
        self,
        options: FilterOptions | None = None,
        *,
        workers: int = 1,
        source_timeout: float | None = None,
    ) -> None:
        self.options = options if options is not None else resolve_profile(APPLICATION_PROFILE)
        self.workers = workers
        self.source_timeout = source_timeout

    @classmethod
    def from_config(cls, config: BrowserCovConfig) -> CoverageReporter:
        """Build a reporter from a loaded ``.browsercov.yml``."""
        return cls(
            config.filter_options(),
            workers=config.processing.workers,
            source_timeout=config.processing.source_timeout,
        )

    def set_filter_profile(self, profile: str) -> None:
        """Switch to a named profile, keeping the custom patterns."""
        self.options = replace(
            resolve_profile(profile),
            custom_include_patterns=self.options.custom_include_patterns,
            custom_exclude_patterns=self.options.custom_exclude_patterns,
        )

    def generate(
        self,
        scripts: Sequence[ScriptCoverageInput],
        source_provider: SourceProvider,
    ) -> Report:
        """Assemble a report for *scripts*."""
        report = assemble(
            scripts,
            source_provider,
            self.options,
            workers=self.workers,
            source_timeout=self.source_timeout,
        )
        totals = report.total_metrics
        logger.info(
            "Coverage Summary - Statements: %.1f%%, Functions: %.1f%%, Lines: %.1f%%",
            totals.statements.pct,
            totals.functions.pct,
            totals.lines.pct,
        )
        return report

    def generate_from_entries(self, entries: Sequence[CoverageEntry]) -> Report:
        """Assemble a report from flattened coverage entries."""
        scripts = entries_to_scripts(entries)
        provider = indexed_source_provider([entry.source for entry in entries])
        return self.generate(scripts, provider)


def compute_entries_coverage(entries: Sequence[CoverageEntry]) -> float:
    """Return the unfiltered character coverage over all entries with a source."""
    total = 0
    covered = 0
    for entry in entries:
        if not entry.source:
            continue
        total += len(entry.source)
        covered += covered_count(build_bitmap(len(entry.source), entry.ranges))
    return percentage(covered, total)

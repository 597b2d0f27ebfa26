"""Assemble a coverage report from a precise-coverage snapshot.

Each script is handled independently: its source is resolved, it is
classified, and if it is application code its bitmap and metrics are
computed. The per-script outcomes are then reduced in snapshot order into
filtering statistics, totals and a sorted list of file entries, so the
result is the same whether scripts were processed serially or by a pool.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from browsercov.coverage.bitmap import build_bitmap
from browsercov.coverage.metrics import compute_line_states, metrics_from_bitmap
from browsercov.filtering.classifier import classify
from browsercov.models.coverage import (
    CoverageMetrics,
    FileEntry,
    FilteringStats,
    FilterReason,
    Report,
    ScriptCoverageInput,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from browsercov.filtering.profiles import FilterOptions
    from browsercov.report.sources import SourceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptOutcome:
    """Result of processing one script of the snapshot."""

    index: int
    reason: FilterReason
    entry: FileEntry | None = None


def display_url(script: ScriptCoverageInput) -> str:
    """Return a display name unique per script, even for shared URLs."""
    if not script.url:
        return f"Script_{script.script_id}"
    return f"{script.url}#{script.script_id}"


def build_file_entry(script: ScriptCoverageInput, source: str) -> FileEntry:
    """Compute the coverage of an included script."""
    ranges = script.all_ranges
    bits = build_bitmap(len(source), ranges)
    lines = tuple(source.split("\n"))
    return FileEntry(
        script_id=script.script_id,
        url=display_url(script),
        source=source,
        lines=lines,
        ranges=ranges,
        metrics=metrics_from_bitmap(source, bits, script.function_groups),
        line_states=compute_line_states(lines, bits),
    )


def _call_with_timeout(
    provider: SourceProvider,
    index: int,
    script: ScriptCoverageInput,
    timeout: float,
) -> str:
    """Run *provider* on a daemon thread and give up after *timeout* seconds.

    A provider that never returns is abandoned, not interrupted.
    """
    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["source"] = provider(index, script)
        except Exception as e:
            outcome["error"] = e

    worker = threading.Thread(target=_target, name="browsercov-source", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        msg = f"source provider did not answer within {timeout}s"
        raise TimeoutError(msg)
    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("source") or ""


class _Processor:
    """Per-script pipeline: resolve source, classify, measure."""

    def __init__(
        self,
        source_provider: SourceProvider,
        options: FilterOptions,
        source_timeout: float | None,
    ) -> None:
        self._provider = source_provider
        self._options = options
        self._timeout = source_timeout

    def _resolve_source(self, index: int, script: ScriptCoverageInput) -> str:
        try:
            if self._timeout is None:
                source = self._provider(index, script)
            else:
                source = _call_with_timeout(self._provider, index, script, self._timeout)
        except Exception as e:
            logger.debug("Source for script %s unavailable: %s", script.script_id, e)
            return ""
        return source or ""

    def __call__(self, index: int, script: ScriptCoverageInput) -> ScriptOutcome:
        source = self._resolve_source(index, script)
        if not source:
            return ScriptOutcome(index=index, reason=FilterReason.SOURCE_UNAVAILABLE)

        result = classify(script, self._options, source=source)
        if not result.included:
            return ScriptOutcome(index=index, reason=result.reason)

        return ScriptOutcome(
            index=index, reason=result.reason, entry=build_file_entry(script, source)
        )


def _process_all(
    scripts: Sequence[ScriptCoverageInput],
    processor: _Processor,
    workers: int,
) -> list[ScriptOutcome]:
    if workers <= 1 or len(scripts) <= 1:
        return [processor(i, script) for i, script in enumerate(scripts)]
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="browsercov") as pool:
        return list(pool.map(processor, range(len(scripts)), scripts))


def reduce_outcomes(
    outcomes: Sequence[ScriptOutcome],
    total_scripts: int,
) -> tuple[FilteringStats, CoverageMetrics, list[FileEntry]]:
    """Fold per-script outcomes into statistics, totals and sorted entries."""
    reason_counts: Counter[FilterReason] = Counter()
    included: list[tuple[FileEntry, int]] = []
    for outcome in outcomes:
        reason_counts[outcome.reason] += 1
        if outcome.entry is not None:
            included.append((outcome.entry, outcome.index))

    included.sort(key=lambda pair: (pair[0].url, pair[1]))
    entries = [entry for entry, _ in included]

    stats = FilteringStats(
        total_scripts=total_scripts,
        application_scripts=len(entries),
        filtered_out=total_scripts - len(entries),
        reason_counts=dict(reason_counts),
    )
    return stats, CoverageMetrics.total_of(e.metrics for e in entries), entries


def assemble(
    scripts: Sequence[ScriptCoverageInput],
    source_provider: SourceProvider,
    options: FilterOptions,
    *,
    workers: int = 1,
    source_timeout: float | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> Report:
    """Build a ``Report`` from a snapshot.

    Args:
        scripts: Every script of the snapshot, in capture order.
        source_provider: Resolves each script's source; failures exclude
            the script as ``source_unavailable``.
        options: Classification options.
        workers: Number of threads to process scripts with.
        source_timeout: Seconds to wait for each source before treating it
            as unavailable. ``None`` waits indefinitely.
        clock: Monotonic clock in seconds, used for timing statistics.

    Returns:
        A fresh report. An empty snapshot yields an empty report.
    """
    started = clock()

    processor = _Processor(source_provider, options, source_timeout)
    outcomes = _process_all(scripts, processor, workers)
    stats, totals, entries = reduce_outcomes(outcomes, len(scripts))

    stats.processing_time_ms = (clock() - started) * 1000.0
    if stats.total_scripts > 0:
        stats.avg_time_per_script_ms = stats.processing_time_ms / stats.total_scripts

    logger.info(
        "Assembled coverage report: %d application scripts, %d filtered out of %d",
        stats.application_scripts,
        stats.filtered_out,
        stats.total_scripts,
    )
    return Report(filtering_stats=stats, total_metrics=totals, file_entries=entries)

"""Statement, line and function coverage for a single script.

Statement coverage is character-granular: the share of source offsets that
fall inside at least one executed range. It approximates AST statements
without parsing the script.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from browsercov.coverage.bitmap import build_bitmap, covered_count, is_span_covered
from browsercov.models.coverage import CoverageMetrics, CoverageStat, LineState

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from browsercov.models.coverage import CoverageRange, FunctionCoverageGroup

_LINE_COMMENT = "//"


def is_executable_line(line: str) -> bool:
    """Return True for lines that count towards line coverage.

    Blank lines and lines starting with a ``//`` comment are ignored.
    """
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(_LINE_COMMENT)


def _line_spans(lines: Sequence[str]) -> Iterator[tuple[str, int, int]]:
    """Yield ``(line, start, end)`` offsets, counting one newline per line."""
    offset = 0
    for line in lines:
        yield line, offset, offset + len(line)
        offset += len(line) + 1


def compute_line_states(lines: Sequence[str], bits: bytearray) -> tuple[LineState, ...]:
    """Classify every line as covered, uncovered or non-executable."""
    states: list[LineState] = []
    for line, start, end in _line_spans(lines):
        if not is_executable_line(line):
            states.append(LineState.NON_EXECUTABLE)
        elif is_span_covered(bits, start, end):
            states.append(LineState.COVERED)
        else:
            states.append(LineState.UNCOVERED)
    return tuple(states)


def metrics_from_bitmap(
    source: str,
    bits: bytearray,
    function_groups: Sequence[FunctionCoverageGroup],
) -> CoverageMetrics:
    """Compute metrics for *source* given its already-built coverage bitmap."""
    states = compute_line_states(source.split("\n"), bits)
    executable = sum(1 for s in states if s is not LineState.NON_EXECUTABLE)
    lines_covered = sum(1 for s in states if s is LineState.COVERED)

    functions_covered = sum(1 for group in function_groups if group.is_covered)

    return CoverageMetrics(
        statements=CoverageStat.from_counts(covered_count(bits), len(source)),
        functions=CoverageStat.from_counts(functions_covered, len(function_groups)),
        lines=CoverageStat.from_counts(lines_covered, executable),
    )


def compute_metrics(
    source: str,
    ranges: Sequence[CoverageRange],
    function_groups: Sequence[FunctionCoverageGroup],
) -> CoverageMetrics:
    """Compute statement, line and function coverage for one script.

    Args:
        source: Full script source.
        ranges: All execution ranges recorded for the script.
        function_groups: Per-function range groups; a function counts as
            covered when any of its ranges executed.

    Returns:
        The script's ``CoverageMetrics``. Percentages are 0 for empty totals.
    """
    bits = build_bitmap(len(source), ranges)
    return metrics_from_bitmap(source, bits, function_groups)

"""Tests for statement, line and function coverage of a single script."""

from __future__ import annotations

import pytest

from browsercov.coverage.bitmap import build_bitmap
from browsercov.coverage.metrics import (
    compute_line_states,
    compute_metrics,
    is_executable_line,
    metrics_from_bitmap,
)
from browsercov.models.coverage import CoverageRange, FunctionCoverageGroup, LineState


def _r(start: int, end: int, count: int = 1) -> CoverageRange:
    return CoverageRange(start=start, end=end, execution_count=count)


# ── is_executable_line ───────────────────────────────────────────


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("let a = 1;", True),
        ("   return a;", True),
        ("x = 1; // trailing note", True),
        ("/* block comment */", True),
        ("", False),
        ("    ", False),
        ("\t", False),
        ("// only a comment", False),
        ("    // indented comment", False),
    ],
)
def test_is_executable_line(line: str, expected: bool) -> None:
    assert is_executable_line(line) is expected


# ── compute_metrics ──────────────────────────────────────────────

SOURCE = "let a = 1;\nlet b = 2;\n"


class TestComputeMetrics:
    def test_statement_coverage_counts_characters(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(0, 10)], [])
        assert metrics.statements.total == len(SOURCE) == 22
        assert metrics.statements.covered == 10
        assert metrics.statements.pct == pytest.approx(10 / 22 * 100)

    def test_line_coverage_ignores_blank_lines(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(0, 10)], [])
        assert metrics.lines.total == 2
        assert metrics.lines.covered == 1
        assert metrics.lines.pct == 50.0

    def test_line_covered_by_single_character(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(15, 16)], [])
        assert metrics.lines.covered == 1

    def test_covered_newline_does_not_cover_a_line(self) -> None:
        metrics = compute_metrics("a;\nb;", [_r(2, 3)], [])
        assert metrics.statements.covered == 1
        assert metrics.lines.covered == 0
        assert metrics.lines.total == 2

    def test_comment_lines_are_neither_covered_nor_total(self) -> None:
        source = "// header\nrun();\n\n// footer"
        metrics = compute_metrics(source, [_r(0, len(source))], [])
        assert metrics.lines.total == 1
        assert metrics.lines.covered == 1
        assert metrics.lines.pct == 100.0

    def test_function_coverage(self) -> None:
        groups = [
            FunctionCoverageGroup(name="first", ranges=(_r(0, 10),)),
            FunctionCoverageGroup(name="second", ranges=(_r(11, 21, count=0),)),
        ]
        metrics = compute_metrics(SOURCE, [r for g in groups for r in g.ranges], groups)
        assert metrics.functions.total == 2
        assert metrics.functions.covered == 1
        assert metrics.functions.pct == 50.0

    def test_function_covered_by_any_range_regardless_of_extent(self) -> None:
        groups = [
            FunctionCoverageGroup(name="f", ranges=(_r(0, 21, count=0), _r(3, 3, count=1))),
        ]
        metrics = compute_metrics(SOURCE, [], groups)
        assert metrics.functions.covered == 1

    def test_no_functions_reports_zero_percent(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(0, 22)], [])
        assert metrics.functions.total == 0
        assert metrics.functions.pct == 0.0

    def test_full_coverage(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(0, 22, count=3)], [])
        assert metrics.statements.pct == 100.0
        assert metrics.lines.pct == 100.0

    def test_empty_source(self) -> None:
        metrics = compute_metrics("", [_r(0, 10)], [])
        assert metrics.statements.total == 0
        assert metrics.statements.pct == 0.0
        assert metrics.lines.total == 0
        assert metrics.lines.pct == 0.0

    def test_percentages_stay_in_bounds(self) -> None:
        metrics = compute_metrics(SOURCE, [_r(-50, 500), _r(0, 22)], [])
        for stat in (metrics.statements, metrics.functions, metrics.lines):
            assert 0.0 <= stat.pct <= 100.0


def test_metrics_from_bitmap_matches_compute_metrics() -> None:
    ranges = [_r(0, 4), _r(12, 15)]
    bits = build_bitmap(len(SOURCE), ranges)
    assert metrics_from_bitmap(SOURCE, bits, []) == compute_metrics(SOURCE, ranges, [])


# ── compute_line_states ──────────────────────────────────────────


def test_compute_line_states() -> None:
    source = "run();\n// note\n\nstop();"
    bits = build_bitmap(len(source), [_r(0, 6)])
    assert compute_line_states(source.split("\n"), bits) == (
        LineState.COVERED,
        LineState.NON_EXECUTABLE,
        LineState.NON_EXECUTABLE,
        LineState.UNCOVERED,
    )

"""Coverage bitmap and metric computation."""

from browsercov.coverage.bitmap import build_bitmap, covered_count, is_span_covered
from browsercov.coverage.metrics import (
    compute_line_states,
    compute_metrics,
    is_executable_line,
    metrics_from_bitmap,
)

__all__ = [
    "build_bitmap",
    "compute_line_states",
    "compute_metrics",
    "covered_count",
    "is_executable_line",
    "is_span_covered",
    "metrics_from_bitmap",
]

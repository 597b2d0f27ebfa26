"""Coverage data models."""

from browsercov.models.coverage import (
    ClassificationResult,
    CoverageMetrics,
    CoverageRange,
    CoverageStat,
    FileEntry,
    FilteringStats,
    FilterReason,
    FunctionCoverageGroup,
    LineState,
    Report,
    ScriptCoverageInput,
    percentage,
)

__all__ = [
    "ClassificationResult",
    "CoverageMetrics",
    "CoverageRange",
    "CoverageStat",
    "FileEntry",
    "FilterReason",
    "FilteringStats",
    "FunctionCoverageGroup",
    "LineState",
    "Report",
    "ScriptCoverageInput",
    "percentage",
]

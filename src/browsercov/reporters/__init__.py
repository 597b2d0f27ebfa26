"""Report renderers."""

from browsercov.reporters.json_reporter import JSONReporter, report_to_dict
from browsercov.reporters.terminal import CoverageTerminalReporter, coverage_color

__all__ = [
    "CoverageTerminalReporter",
    "JSONReporter",
    "coverage_color",
    "report_to_dict",
]

"""Adapters from browser coverage payloads to snapshot inputs."""

from browsercov.adapters.cdp import (
    CoverageEntry,
    entries_to_scripts,
    parse_script_coverage,
    parse_snapshot,
    parse_snapshot_file,
)

__all__ = [
    "CoverageEntry",
    "entries_to_scripts",
    "parse_script_coverage",
    "parse_snapshot",
    "parse_snapshot_file",
]

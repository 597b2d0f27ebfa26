"""Report assembly from coverage snapshots."""

from browsercov.report.assembler import (
    ScriptOutcome,
    assemble,
    build_file_entry,
    display_url,
    reduce_outcomes,
)
from browsercov.report.reporter import CoverageReporter, compute_entries_coverage
from browsercov.report.sources import (
    SourceProvider,
    SourceUnavailableError,
    embedded_source_provider,
    indexed_source_provider,
    mapping_source_provider,
)

__all__ = [
    "CoverageReporter",
    "ScriptOutcome",
    "SourceProvider",
    "SourceUnavailableError",
    "assemble",
    "build_file_entry",
    "compute_entries_coverage",
    "display_url",
    "embedded_source_provider",
    "indexed_source_provider",
    "mapping_source_provider",
    "reduce_outcomes",
]

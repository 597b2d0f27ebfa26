"""Source providers: how the assembler obtains each script's full text.

A provider is called with the script's position in the snapshot and the
script itself, and returns the source or raises. Any failure, including an
empty result, only excludes that one script.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from browsercov.models.coverage import ScriptCoverageInput

SourceProvider = Callable[[int, ScriptCoverageInput], str]


class SourceUnavailableError(Exception):
    """Raised by a source provider when a script's source cannot be obtained."""


def embedded_source_provider() -> SourceProvider:
    """Provider that returns the source captured alongside each script."""

    def _provide(index: int, script: ScriptCoverageInput) -> str:
        if not script.source:
            msg = f"no embedded source for script {script.script_id}"
            raise SourceUnavailableError(msg)
        return script.source

    return _provide


def mapping_source_provider(sources: Mapping[str, str]) -> SourceProvider:
    """Provider that looks sources up by script id."""

    def _provide(index: int, script: ScriptCoverageInput) -> str:
        source = sources.get(script.script_id, "")
        if not source:
            msg = f"source unavailable for script {script.script_id}"
            raise SourceUnavailableError(msg)
        return source

    return _provide


def indexed_source_provider(sources: Sequence[str]) -> SourceProvider:
    """Provider that looks sources up by the script's position in the snapshot."""

    def _provide(index: int, script: ScriptCoverageInput) -> str:
        if index < 0 or index >= len(sources):
            msg = f"index {index} out of range"
            raise SourceUnavailableError(msg)
        source = sources[index]
        if not source:
            msg = f"source unavailable for index {index}"
            raise SourceUnavailableError(msg)
        return source

    return _provide

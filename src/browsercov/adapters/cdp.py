"""DevTools precise-coverage adapter.

Translates the payload of ``Profiler.takePreciseCoverage`` into
``ScriptCoverageInput`` objects. The payload format:

{
  "result": [
    {
      "scriptId": "42",
      "url": "https://app.example/main.js",
      "functions": [
        {
          "functionName": "init",
          "isBlockCoverage": true,
          "ranges": [{"startOffset": 0, "endOffset": 120, "count": 1}, ...]
        }
      ]
    }
  ]
}

The profiler does not return sources. They can be embedded per script under
``source`` (or ``text``, as Puppeteer dumps do), supplied as a
``{scriptId: source}`` mapping, or fetched later through a source provider.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from browsercov.models.coverage import CoverageRange, FunctionCoverageGroup, ScriptCoverageInput

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

_SOURCE_KEYS = ("source", "text")


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_range(data: Mapping[str, Any]) -> CoverageRange:
    return CoverageRange(
        start=_as_int(data.get("startOffset")),
        end=_as_int(data.get("endOffset")),
        execution_count=_as_int(data.get("count")),
    )


def _parse_function(data: Mapping[str, Any]) -> FunctionCoverageGroup:
    ranges = data.get("ranges") or []
    return FunctionCoverageGroup(
        name=str(data.get("functionName", "")),
        ranges=tuple(_parse_range(r) for r in ranges if isinstance(r, dict)),
    )


def parse_script_coverage(data: Mapping[str, Any], *, source: str = "") -> ScriptCoverageInput:
    """Parse one ``ScriptCoverage`` object of the profiler payload."""
    if not source:
        for key in _SOURCE_KEYS:
            embedded = data.get(key)
            if isinstance(embedded, str) and embedded:
                source = embedded
                break

    functions = data.get("functions") or []
    return ScriptCoverageInput(
        script_id=str(data.get("scriptId", "")),
        url=str(data.get("url") or ""),
        source=source,
        function_groups=tuple(_parse_function(f) for f in functions if isinstance(f, dict)),
    )


def parse_snapshot(
    payload: Mapping[str, Any] | list[Any],
    sources: Mapping[str, str] | None = None,
) -> list[ScriptCoverageInput]:
    """Parse a whole precise-coverage payload.

    Args:
        payload: The ``{"result": [...]}`` response, or its bare list.
        sources: Optional sources keyed by script id.

    Returns:
        One input per well-formed script, in payload order.
    """
    entries = payload.get("result", []) if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        logger.warning("Coverage payload has no script list")
        return []

    sources = sources or {}
    scripts: list[ScriptCoverageInput] = []
    for item in entries:
        if not isinstance(item, dict):
            logger.warning("Skipping malformed script coverage entry: %r", item)
            continue
        script_id = str(item.get("scriptId", ""))
        scripts.append(parse_script_coverage(item, source=sources.get(script_id, "")))
    return scripts


def parse_snapshot_file(
    coverage_file: Path,
    sources: Mapping[str, str] | None = None,
) -> list[ScriptCoverageInput]:
    """Parse a JSON dump of a precise-coverage payload.

    A top-level ``sources`` object in the dump is used when *sources* is not
    given. Unreadable files yield an empty list.
    """
    try:
        with coverage_file.open(encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error("Failed to parse coverage file %s: %s", coverage_file, e)
        return []

    if sources is None and isinstance(payload, dict):
        embedded = payload.get("sources")
        if isinstance(embedded, dict):
            sources = {str(k): str(v) for k, v in embedded.items() if isinstance(v, str)}

    return parse_snapshot(payload, sources)


# ── Simple coverage entries ──────────────────────────────────────


@dataclass(frozen=True)
class CoverageEntry:
    """A flattened coverage record: one script's URL, source and ranges."""

    url: str
    source: str
    ranges: tuple[CoverageRange, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CoverageEntry:
        """Build an entry from ``{"url", "source", "ranges": [{start, end, count}]}``."""
        ranges = data.get("ranges") or []
        return cls(
            url=str(data.get("url") or ""),
            source=str(data.get("source") or ""),
            ranges=tuple(
                CoverageRange(
                    start=_as_int(r.get("start")),
                    end=_as_int(r.get("end")),
                    execution_count=_as_int(r.get("count")),
                )
                for r in ranges
                if isinstance(r, dict)
            ),
        )


def entries_to_scripts(entries: Iterable[CoverageEntry]) -> list[ScriptCoverageInput]:
    """Convert simple entries into snapshot inputs.

    Script ids are ``script-<index>``; all ranges of an entry become a single
    anonymous function group.
    """
    scripts: list[ScriptCoverageInput] = []
    for i, entry in enumerate(entries):
        groups = (FunctionCoverageGroup(name="", ranges=entry.ranges),) if entry.ranges else ()
        scripts.append(
            ScriptCoverageInput(
                script_id=f"script-{i}",
                url=entry.url,
                source=entry.source,
                function_groups=groups,
            )
        )
    return scripts

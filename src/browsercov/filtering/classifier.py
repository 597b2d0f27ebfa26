"""Heuristic classification of scripts into application code and noise.

Classification is a table of ordered rules. Each rule inspects a script and
either attributes a ``FilterReason`` or passes; the first rule that
attributes a reason decides the outcome. The order is the precedence:

 1. custom include patterns (override everything below)
 2. inline-script sentinel URLs
 3. empty URLs
 4. browser extensions
 5. devtools / automation signatures
 6. too-small sources
 7. browser console no-ops
 8. framework devtools and bundler artifacts
 9. CDN libraries
10. minified or generated code
11. test frameworks
12. high-density inline scripts
13. inline system scripts
14. custom exclude patterns

Scripts no rule claims are application scripts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cached_property

from browsercov.filtering import signatures as sig
from browsercov.filtering.heuristics import count_statements, is_repetitive, non_empty_line_count
from browsercov.filtering.profiles import FilterOptions
from browsercov.models.coverage import ClassificationResult, FilterReason, ScriptCoverageInput

logger = logging.getLogger(__name__)


# ── Script view ──────────────────────────────────────────────────


@dataclass
class ScriptView:
    """A script's URL and source with the derived forms the rules share."""

    url: str
    source: str
    url_lower: str = field(init=False)
    source_lower: str = field(init=False)
    trimmed: str = field(init=False)

    def __post_init__(self) -> None:
        self.url_lower = self.url.lower()
        self.source_lower = self.source.lower()
        self.trimmed = self.source.strip()

    @cached_property
    def lines(self) -> list[str]:
        return self.source.split("\n")

    @property
    def is_inline(self) -> bool:
        """Inline for density checks: sentinel prefix, no URL, or an 'inline' URL."""
        return self.is_captured_inline or sig.INLINE_URL_MARKER in self.url_lower

    @property
    def is_captured_inline(self) -> bool:
        """Inline as captured by the session: sentinel prefix or no URL."""
        return self.url.startswith(sig.INLINE_SCRIPT_PREFIX) or self.url == ""

    def url_or_source_contains(self, patterns: tuple[str, ...]) -> bool:
        """Case-insensitive substring match of any pattern against URL or source."""
        return any(p in self.url_lower or p in self.source_lower for p in patterns)

    def source_contains(self, patterns: tuple[str, ...]) -> bool:
        return any(p in self.source_lower for p in patterns)


def _lowered(patterns: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(p.lower() for p in patterns if p)


# ── Rules ────────────────────────────────────────────────────────

RulePredicate = Callable[[ScriptView, FilterOptions], FilterReason | None]


@dataclass(frozen=True)
class ClassificationRule:
    """A named step of the classification table."""

    name: str
    predicate: RulePredicate


def _custom_include(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if view.url_or_source_contains(_lowered(options.custom_include_patterns)):
        return FilterReason.CUSTOM_INCLUDE
    return None


def _inline_script_blocked(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if view.url.startswith(sig.INLINE_SCRIPT_PREFIX):
        return FilterReason.INLINE_SCRIPT_BLOCKED
    return None


def _empty_url(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_empty_urls and view.url == "":
        return FilterReason.EMPTY_URL
    return None


def _browser_extension(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_browser_extensions and any(
        scheme in view.url for scheme in sig.EXTENSION_SCHEMES
    ):
        return FilterReason.BROWSER_EXTENSION
    return None


def _devtools_framework(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_devtools and view.source_contains(sig.DEVTOOLS_SIGNATURES):
        return FilterReason.DEVTOOLS_FRAMEWORK
    return None


def _too_small(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if len(view.trimmed) < options.min_script_size:
        return FilterReason.TOO_SMALL
    return None


def _browser_internal(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    for noop in sig.BROWSER_CONSOLE_NOOPS:
        if view.trimmed in (noop, noop + ";"):
            return FilterReason.BROWSER_INTERNAL
    return None


def _framework_tools(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_framework_tools and view.url_or_source_contains(
        sig.FRAMEWORK_TOOL_SIGNATURES
    ):
        return FilterReason.FRAMEWORK_TOOLS
    return None


def _cdn_library(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_cdn_libraries and any(host in view.url_lower for host in sig.CDN_HOSTS):
        return FilterReason.CDN_LIBRARY
    return None


def _looks_minified(line: str) -> bool:
    trimmed = line.strip()
    return (
        len(trimmed) > sig.MINIFIED_LINE_LENGTH
        and not any(c.isspace() for c in trimmed)
        and not trimmed.startswith("//")
    )


def _minified(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if not options.exclude_minified_code:
        return None
    if any(marker in view.url_lower for marker in sig.MINIFIED_URL_MARKERS):
        return FilterReason.MINIFIED_CODE
    if view.source_contains(sig.GENERATED_CODE_MARKERS):
        return FilterReason.GENERATED_CODE
    if any(_looks_minified(line) for line in view.lines[: sig.MINIFIED_SCAN_LINES]):
        return FilterReason.MINIFIED_HEURISTIC
    return None


def _test_framework(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if options.exclude_test_frameworks and view.url_or_source_contains(
        sig.TEST_FRAMEWORK_SIGNATURES
    ):
        return FilterReason.TEST_FRAMEWORK
    return None


def _high_density_inline(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if not (options.exclude_high_density_inline_scripts and view.is_inline):
        return None
    lines = non_empty_line_count(view.source)
    if lines == 0:
        return None
    if count_statements(view.source) / lines > options.max_statements_per_line:
        return FilterReason.HIGH_DENSITY_INLINE
    return None


def _inline_system_script(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if not (options.exclude_inline_system_scripts and view.is_captured_inline):
        return None
    if view.source_contains(sig.INLINE_SYSTEM_SIGNATURES) or is_repetitive(view.source):
        return FilterReason.INLINE_SYSTEM_SCRIPT
    return None


def _custom_exclude(view: ScriptView, options: FilterOptions) -> FilterReason | None:
    if view.url_or_source_contains(_lowered(options.custom_exclude_patterns)):
        return FilterReason.CUSTOM_EXCLUDE
    return None


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("custom_include", _custom_include),
    ClassificationRule("inline_script_blocked", _inline_script_blocked),
    ClassificationRule("empty_url", _empty_url),
    ClassificationRule("browser_extension", _browser_extension),
    ClassificationRule("devtools_framework", _devtools_framework),
    ClassificationRule("too_small", _too_small),
    ClassificationRule("browser_internal", _browser_internal),
    ClassificationRule("framework_tools", _framework_tools),
    ClassificationRule("cdn_library", _cdn_library),
    ClassificationRule("minified", _minified),
    ClassificationRule("test_framework", _test_framework),
    ClassificationRule("high_density_inline", _high_density_inline),
    ClassificationRule("inline_system_script", _inline_system_script),
    ClassificationRule("custom_exclude", _custom_exclude),
)


# ── Entry point ──────────────────────────────────────────────────


def classify(
    script: ScriptCoverageInput,
    options: FilterOptions,
    *,
    source: str | None = None,
) -> ClassificationResult:
    """Decide whether *script* is application code.

    Args:
        script: The script to classify.
        options: Filter toggles and thresholds.
        source: Source text to use instead of ``script.source`` (e.g. one
            fetched through a source provider).

    Returns:
        The decision and the single reason attributed to it. Scripts with
        no source are excluded as ``source_unavailable``.
    """
    text = script.source if source is None else source
    if not text:
        return ClassificationResult(included=False, reason=FilterReason.SOURCE_UNAVAILABLE)

    view = ScriptView(url=script.url, source=text)
    for rule in RULES:
        reason = rule.predicate(view, options)
        if reason is not None:
            logger.debug("Script %s (%r): %s", script.script_id, script.url, reason.value)
            return ClassificationResult(included=reason.is_inclusion, reason=reason)

    return ClassificationResult(included=True, reason=FilterReason.APPLICATION_SCRIPT)

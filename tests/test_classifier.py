"""Tests for the ordered script classification rules."""

from __future__ import annotations

from dataclasses import replace

import pytest

from browsercov.filtering.classifier import RULES, ScriptView, classify
from browsercov.filtering.profiles import (
    APPLICATION_PROFILE,
    DEFAULT_PROFILE,
    FilterOptions,
    resolve_profile,
)
from browsercov.models.coverage import FilterReason, ScriptCoverageInput

APP_URL = "https://app.example/js/main.js"
APP_SOURCE = "function add(a, b) {\n  return a + b;\n}\nconst total = add(1, 2);\n"

DEFAULT = resolve_profile(DEFAULT_PROFILE)
APPLICATION = resolve_profile(APPLICATION_PROFILE)
ALL_OFF = FilterOptions(
    exclude_empty_urls=False,
    exclude_devtools=False,
    exclude_browser_extensions=False,
    exclude_framework_tools=False,
    exclude_cdn_libraries=False,
    exclude_minified_code=False,
    exclude_test_frameworks=False,
    exclude_high_density_inline_scripts=False,
    exclude_inline_system_scripts=False,
    min_script_size=0,
)


def _script(
    url: str = APP_URL,
    source: str = APP_SOURCE,
    script_id: str = "1",
) -> ScriptCoverageInput:
    return ScriptCoverageInput(script_id=script_id, url=url, source=source)


def _reason(
    url: str = APP_URL,
    source: str = APP_SOURCE,
    options: FilterOptions = DEFAULT,
) -> FilterReason:
    return classify(_script(url, source), options).reason


# ── Rule table ───────────────────────────────────────────────────


def test_rule_order() -> None:
    assert [rule.name for rule in RULES] == [
        "custom_include",
        "inline_script_blocked",
        "empty_url",
        "browser_extension",
        "devtools_framework",
        "too_small",
        "browser_internal",
        "framework_tools",
        "cdn_library",
        "minified",
        "test_framework",
        "high_density_inline",
        "inline_system_script",
        "custom_exclude",
    ]


def test_plain_script_is_application_code() -> None:
    result = classify(_script(), DEFAULT)
    assert result.included
    assert result.reason is FilterReason.APPLICATION_SCRIPT


def test_missing_source_is_unavailable() -> None:
    result = classify(_script(source=""), DEFAULT)
    assert not result.included
    assert result.reason is FilterReason.SOURCE_UNAVAILABLE


def test_source_argument_overrides_script_source() -> None:
    result = classify(_script(source=""), DEFAULT, source=APP_SOURCE)
    assert result.reason is FilterReason.APPLICATION_SCRIPT


def test_first_matching_rule_wins() -> None:
    source = "describe('lib', () => { expect(1).toBe(1); });"
    assert _reason("https://cdn.jsdelivr.net/npm/lib/index.js", source) is FilterReason.CDN_LIBRARY


def test_classification_is_idempotent() -> None:
    scripts = [
        _script(),
        _script(url=""),
        _script(url="https://cdn.jsdelivr.net/x.js"),
        _script(source="console.clear()"),
    ]
    for script in scripts:
        assert classify(script, APPLICATION) == classify(script, APPLICATION)


# ── 1. Custom include ────────────────────────────────────────────


class TestCustomInclude:
    def test_overrides_cdn_exclusion(self) -> None:
        options = replace(DEFAULT, custom_include_patterns=("lodash",))
        result = classify(_script(url="https://cdn.jsdelivr.net/npm/lodash@4/lodash.js"), options)
        assert result.included
        assert result.reason is FilterReason.CUSTOM_INCLUDE

    def test_overrides_inline_sentinel(self) -> None:
        options = replace(DEFAULT, custom_include_patterns=("inline-script-4",))
        assert _reason("inline-script-4", options=options) is FilterReason.CUSTOM_INCLUDE

    def test_overrides_too_small(self) -> None:
        options = replace(DEFAULT, custom_include_patterns=("main.js",))
        assert _reason(source="go();", options=options) is FilterReason.CUSTOM_INCLUDE

    def test_matches_source_case_insensitively(self) -> None:
        options = replace(DEFAULT, custom_include_patterns=("CONST TOTAL",))
        assert _reason("", options=options) is FilterReason.CUSTOM_INCLUDE

    def test_wins_over_custom_exclude(self) -> None:
        options = replace(
            DEFAULT,
            custom_include_patterns=("analytics",),
            custom_exclude_patterns=("analytics",),
        )
        url = "https://app.example/analytics.js"
        assert _reason(url, options=options) is FilterReason.CUSTOM_INCLUDE


# ── 2-4. URL rules ───────────────────────────────────────────────


def test_inline_sentinel_always_blocked() -> None:
    result = classify(_script(url="inline-script-0"), ALL_OFF)
    assert not result.included
    assert result.reason is FilterReason.INLINE_SCRIPT_BLOCKED


def test_inline_sentinel_is_case_sensitive() -> None:
    assert _reason("INLINE-SCRIPT-0") is FilterReason.APPLICATION_SCRIPT


def test_empty_url_excluded() -> None:
    assert _reason("") is FilterReason.EMPTY_URL


def test_empty_url_kept_when_toggle_off() -> None:
    options = replace(DEFAULT, exclude_empty_urls=False)
    assert _reason("", options=options) is FilterReason.APPLICATION_SCRIPT


@pytest.mark.parametrize(
    "url",
    [
        "chrome-extension://abcdef/content.js",
        "moz-extension://1234/background.js",
        "safari-extension://com.example/inject.js",
    ],
)
def test_browser_extension(url: str) -> None:
    assert _reason(url) is FilterReason.BROWSER_EXTENSION


def test_browser_extension_toggle_off() -> None:
    options = replace(DEFAULT, exclude_browser_extensions=False)
    assert _reason("chrome-extension://abcdef/content.js", options=options) is (
        FilterReason.APPLICATION_SCRIPT
    )


# ── 5-7. Automation, size and console no-ops ─────────────────────


def test_devtools_signature() -> None:
    source = "window.__puppeteer_evaluation_script__ = function() { return 1; };"
    assert _reason(source=source) is FilterReason.DEVTOOLS_FRAMEWORK


def test_devtools_checked_before_size() -> None:
    assert _reason(source="webdriver") is FilterReason.DEVTOOLS_FRAMEWORK


def test_devtools_toggle_off_falls_through() -> None:
    options = replace(DEFAULT, exclude_devtools=False)
    assert _reason(source="webdriver", options=options) is FilterReason.TOO_SMALL


class TestTooSmall:
    def test_below_minimum(self) -> None:
        assert _reason(source="a" * 29) is FilterReason.TOO_SMALL

    def test_exactly_minimum_is_kept(self) -> None:
        assert _reason(source="a" * 30) is FilterReason.APPLICATION_SCRIPT

    def test_length_measured_after_trimming(self) -> None:
        assert _reason(source="   \n" + "a" * 29 + "\n   ") is FilterReason.TOO_SMALL

    def test_profile_threshold(self) -> None:
        assert _reason(source="a" * 15, options=APPLICATION) is FilterReason.APPLICATION_SCRIPT
        assert _reason(source="a" * 14, options=APPLICATION) is FilterReason.TOO_SMALL


@pytest.mark.parametrize(
    "source",
    [
        "console.clear()",
        "console.clear();",
        "console.time",
        "console.group();",
        "  console.clear()\n",
    ],
)
def test_browser_console_noops(source: str) -> None:
    options = replace(DEFAULT, min_script_size=0)
    assert _reason(source=source, options=options) is FilterReason.BROWSER_INTERNAL


def test_console_call_inside_real_code_is_not_internal() -> None:
    options = replace(DEFAULT, min_script_size=0)
    assert _reason(source="console.clear(); start();", options=options) is (
        FilterReason.APPLICATION_SCRIPT
    )


# ── 8-9. Framework tooling and CDNs ──────────────────────────────


class TestFrameworkTools:
    REACT_HOOK = "window.__REACT_DEVTOOLS_GLOBAL_HOOK__ = { renderers: new Map() };"

    def test_devtools_hook_in_source(self) -> None:
        assert _reason(source=self.REACT_HOOK) is FilterReason.FRAMEWORK_TOOLS

    def test_bundler_url(self) -> None:
        assert _reason("webpack://app/./src/index.js") is FilterReason.FRAMEWORK_TOOLS

    def test_source_map_comment(self) -> None:
        source = APP_SOURCE + "//# sourceMappingURL=main.js.map"
        assert _reason(source=source) is FilterReason.FRAMEWORK_TOOLS

    def test_toggle_off(self) -> None:
        options = replace(DEFAULT, exclude_framework_tools=False)
        assert _reason(source=self.REACT_HOOK, options=options) is FilterReason.APPLICATION_SCRIPT


class TestCdnLibrary:
    def test_known_host(self) -> None:
        url = "https://cdn.jsdelivr.net/npm/lodash@4/lodash.js"
        assert _reason(url) is FilterReason.CDN_LIBRARY

    def test_host_case_insensitive(self) -> None:
        assert _reason("https://UNPKG.com/lib@18/index.js") is FilterReason.CDN_LIBRARY

    def test_checked_before_minified(self) -> None:
        url = "https://cdn.jsdelivr.net/npm/lib/dist/lib.min.js"
        assert _reason(url) is FilterReason.CDN_LIBRARY

    def test_toggle_off(self) -> None:
        options = replace(DEFAULT, exclude_cdn_libraries=False)
        assert _reason("https://unpkg.com/lib/index.js", options=options) is (
            FilterReason.APPLICATION_SCRIPT
        )


# ── 10. Minified or generated code ───────────────────────────────

MINIFIED_LINE = "x=" + "1+" * 120 + "1;"


class TestMinified:
    def test_minified_url(self) -> None:
        assert _reason("https://app.example/bundle.min.js") is FilterReason.MINIFIED_CODE

    def test_generated_marker(self) -> None:
        source = "/* This file was autogenerated. */\n" + APP_SOURCE
        assert _reason(source=source) is FilterReason.GENERATED_CODE

    def test_long_line_without_spaces(self) -> None:
        assert _reason(source=MINIFIED_LINE) is FilterReason.MINIFIED_HEURISTIC

    def test_long_comment_line_is_not_minified(self) -> None:
        assert _reason(source="//" + "x" * 250) is FilterReason.APPLICATION_SCRIPT

    def test_long_line_with_spaces_is_not_minified(self) -> None:
        assert _reason(source="x = " + "1 + " * 60 + "1;") is FilterReason.APPLICATION_SCRIPT

    def test_long_line_with_tabs_is_not_minified(self) -> None:
        assert _reason(source="x=" + "1+\t" * 80 + "1;") is FilterReason.APPLICATION_SCRIPT

    def test_only_leading_lines_scanned(self) -> None:
        source = "\n".join(["a = 1;"] * 5 + [MINIFIED_LINE])
        assert _reason(source=source) is FilterReason.APPLICATION_SCRIPT

    def test_toggle_off(self) -> None:
        options = replace(DEFAULT, exclude_minified_code=False)
        assert _reason("https://app.example/bundle.min.js", options=options) is (
            FilterReason.APPLICATION_SCRIPT
        )


# ── 11. Test frameworks ──────────────────────────────────────────


class TestTestFramework:
    SPEC_SOURCE = "describe('cart', () => {\n  expect(total).toBe(3);\n});"

    def test_source_signature(self) -> None:
        assert _reason(source=self.SPEC_SOURCE) is FilterReason.TEST_FRAMEWORK

    def test_url_signature(self) -> None:
        assert _reason("https://app.example/cypress/support.js") is FilterReason.TEST_FRAMEWORK

    def test_toggle_off(self) -> None:
        options = replace(DEFAULT, exclude_test_frameworks=False)
        assert _reason(source=self.SPEC_SOURCE, options=options) is (
            FilterReason.APPLICATION_SCRIPT
        )


# ── 12-13. Inline scripts ────────────────────────────────────────

DENSE_SOURCE = "a();b();c();d();e();f();g();"


class TestHighDensityInline:
    def test_dense_inline_script(self) -> None:
        url = "https://app.example/inline/handler.js"
        assert _reason(url, DENSE_SOURCE, APPLICATION) is FilterReason.HIGH_DENSITY_INLINE

    def test_dense_external_script_kept(self) -> None:
        url = "https://app.example/js/handler.js"
        assert _reason(url, DENSE_SOURCE, APPLICATION) is FilterReason.APPLICATION_SCRIPT

    def test_density_at_limit_kept(self) -> None:
        url = "https://app.example/inline/handler.js"
        source = "a();b();c();d();e();"
        assert _reason(url, source, APPLICATION) is FilterReason.APPLICATION_SCRIPT

    def test_toggle_off(self) -> None:
        options = replace(APPLICATION, exclude_high_density_inline_scripts=False)
        url = "https://app.example/inline/handler.js"
        assert _reason(url, DENSE_SOURCE, options) is FilterReason.APPLICATION_SCRIPT


class TestInlineSystemScript:
    OPTIONS = replace(DEFAULT, exclude_empty_urls=False)
    SOURCE = "console.log('page ready'); window.started = true;"

    def test_system_signature_without_url(self) -> None:
        assert _reason("", self.SOURCE, self.OPTIONS) is FilterReason.INLINE_SYSTEM_SCRIPT

    def test_same_source_with_url_kept(self) -> None:
        assert _reason(APP_URL, self.SOURCE, self.OPTIONS) is FilterReason.APPLICATION_SCRIPT

    def test_repetitive_source_without_url(self) -> None:
        source = "doSomething();\n" * 10
        assert _reason("", source, self.OPTIONS) is FilterReason.INLINE_SYSTEM_SCRIPT

    def test_toggle_off(self) -> None:
        options = replace(self.OPTIONS, exclude_inline_system_scripts=False)
        assert _reason("", self.SOURCE, options) is FilterReason.APPLICATION_SCRIPT


# ── 14. Custom exclude ───────────────────────────────────────────


def test_custom_exclude() -> None:
    options = replace(DEFAULT, custom_exclude_patterns=("analytics",))
    assert _reason("https://app.example/analytics.js", options=options) is (
        FilterReason.CUSTOM_EXCLUDE
    )


def test_blank_custom_patterns_ignored() -> None:
    options = replace(DEFAULT, custom_exclude_patterns=("",), custom_include_patterns=("",))
    assert _reason(options=options) is FilterReason.APPLICATION_SCRIPT


# ── ScriptView ───────────────────────────────────────────────────


def test_script_view_inline_detection() -> None:
    assert ScriptView(url="", source="x").is_captured_inline
    assert ScriptView(url="inline-script-1", source="x").is_captured_inline
    assert ScriptView(url="https://app.example/Inline.js", source="x").is_inline
    assert not ScriptView(url="https://app.example/Inline.js", source="x").is_captured_inline
    assert not ScriptView(url=APP_URL, source="x").is_inline

"""Signature tables used to recognise non-application scripts.

All tables are immutable and shared by every classification call.
Matching against them is case-insensitive unless noted otherwise.
"""

from __future__ import annotations

# URLs of inline scripts captured by the session start with this prefix (case-sensitive).
INLINE_SCRIPT_PREFIX = "inline-script-"

# Substring that marks a URL as inline for the density / system-script rules.
INLINE_URL_MARKER = "inline"

EXTENSION_SCHEMES: tuple[str, ...] = (
    "chrome-extension://",
    "moz-extension://",
    "safari-extension://",
)

DEVTOOLS_SIGNATURES: tuple[str, ...] = (
    "functions.selectable",
    "functions.element",
    "f.tostring",
    "__coverage__",
    "webdriver",
    "puppeteer",
    "playwright",
    "rod",
    "chromedriver",
    "seleniumwebdriver",
)

# Whole-script console no-ops, matched exactly (with or without a trailing ';').
BROWSER_CONSOLE_NOOPS: tuple[str, ...] = (
    "console.clear()",
    "console.time()",
    "console.group()",
    "console.clear",
    "console.time",
    "console.group",
)

FRAMEWORK_TOOL_SIGNATURES: tuple[str, ...] = (
    # React
    "__react_devtools_global_hook__",
    "react-devtools",
    "reactdevtools",
    "__react_hot_loader__",
    "react-hot-loader",
    "webpack-hot-middleware",
    # Vue
    "__vue_devtools_global_hook__",
    "vue-devtools",
    "vuedevtools",
    "vue-hot-reload-api",
    "__vue_hmr_runtime__",
    # Angular
    "ng.probe",
    "ng.coretokens",
    "getallangularrootelements",
    "@angular/core/bundles",
    "zone.js/bundles",
    # Bundler runtimes
    "webpack://",
    "webpackbootstrap",
    "__webpack_require__",
    "(function(module, exports, __webpack_require__)",
    "parcelrequire",
    "rolluppluginbabelhelpers",
    # Source maps
    "//# sourcemappingurl=",
    "//# sourceurl=",
)

CDN_HOSTS: tuple[str, ...] = (
    "cdn.jsdelivr.net",
    "unpkg.com",
    "cdnjs.cloudflare.com",
    "ajax.googleapis.com",
    "code.jquery.com",
    "stackpath.bootstrapcdn.com",
    "maxcdn.bootstrapcdn.com",
    "use.fontawesome.com",
    "fonts.googleapis.com",
    "polyfill.io",
    "cdn.polyfill.io",
    "cloudflare.com/ajax/libs",
)

MINIFIED_URL_MARKERS: tuple[str, ...] = (".min.", "-min.", "_min.", "/min/")

GENERATED_CODE_MARKERS: tuple[str, ...] = (
    "this file was autogenerated",
    "do not edit",
    "auto-generated",
    "generated by webpack",
    "generated by rollup",
    "generated by parcel",
    "compiled by babel",
    "this is a generated file",
    "/* eslint-disable */",
    "/* tslint:disable */",
)

# Only the first few lines are inspected for minified one-liners.
MINIFIED_SCAN_LINES = 5
MINIFIED_LINE_LENGTH = 200

TEST_FRAMEWORK_SIGNATURES: tuple[str, ...] = (
    # Jest
    "jest-runtime",
    "jest.fn()",
    "expect.extend",
    "__jest",
    "describe(",
    "test(",
    "it(",
    "expect(",
    "beforeeach(",
    "aftereach(",
    "jasmine.createspy",
    "jasmine.clock",
    "jest/build/",
    # Mocha / Chai
    "mocha.setup",
    "chai.expect",
    "chai.assert",
    "should.js",
    # Jasmine
    "jasmine.getenv()",
    "jasmine.default_timeout_interval",
    # Cypress
    "cypress/",
    "cy.visit(",
    "cy.get(",
    "cy.click(",
    # Testing Library
    "@testing-library/",
    "render(",
    "screen.getby",
    # QUnit
    "qunit.test",
    "qunit.module",
    # Karma
    "karma.conf",
    "__karma__",
)

# Counted (lowercased, after comment stripping) to estimate statements without ';'.
STATEMENT_KEYWORDS: tuple[str, ...] = (
    "function ",
    "var ",
    "let ",
    "const ",
    "if ",
    "for ",
    "while ",
    "return ",
    "throw ",
    "try ",
    "catch ",
    "switch ",
    "case ",
    "break",
    "continue",
    "class ",
    "import ",
    "export ",
)

INLINE_SYSTEM_SIGNATURES: tuple[str, ...] = (
    # Console / devtools
    "console.log",
    "console.warn",
    "console.error",
    "window.chrome",
    "window.__react_devtools",
    "window.__vue_devtools",
    "window.angular",
    # Performance monitoring
    "performance.mark",
    "performance.measure",
    "navigation.timing",
    "window.performance",
    # Automation detection
    "webdriver",
    "phantom",
    "selenium",
    "puppeteer",
    # Ad blockers and extensions
    "adblock",
    "ublock",
    "extension",
)

# Narrow symbols repeated this often (case-sensitive) mark generated content.
REPETITIVE_SYMBOLS: tuple[str, ...] = ("...", "===", "!!!", "???", "000", "111")
REPETITIVE_SYMBOL_LIMIT = 10
REPETITIVE_LINE_RATIO = 0.6
REPETITIVE_MIN_LENGTH = 100
REPETITIVE_MIN_LINES = 3

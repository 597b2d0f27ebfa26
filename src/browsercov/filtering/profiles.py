"""Filter options and the named filtering profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
DEVELOPMENT_PROFILE = "development"
PRODUCTION_PROFILE = "production"
APPLICATION_PROFILE = "application"

PROFILE_NAMES = (DEFAULT_PROFILE, DEVELOPMENT_PROFILE, PRODUCTION_PROFILE, APPLICATION_PROFILE)


@dataclass(frozen=True)
class FilterOptions:
    """Toggles and thresholds that drive script classification."""

    exclude_empty_urls: bool = True
    """Exclude scripts without a URL (browser internals)."""

    exclude_devtools: bool = True
    """Exclude automation and DevTools injected scripts."""

    exclude_browser_extensions: bool = True
    """Exclude scripts loaded from extension schemes."""

    exclude_framework_tools: bool = True
    """Exclude framework devtools hooks and bundler runtime artifacts."""

    exclude_cdn_libraries: bool = True
    """Exclude libraries served from well-known CDNs."""

    exclude_minified_code: bool = True
    """Exclude minified or generated code."""

    exclude_test_frameworks: bool = True
    """Exclude test framework code."""

    exclude_high_density_inline_scripts: bool = True
    """Exclude inline scripts with too many statements per line."""

    exclude_inline_system_scripts: bool = True
    """Exclude inline scripts that look browser- or tool-generated."""

    min_script_size: int = 30
    """Minimum trimmed source length, in characters."""

    max_statements_per_line: int = 50
    """Statement density above which an inline script is treated as minified."""

    custom_exclude_patterns: tuple[str, ...] = ()
    """Case-insensitive substrings of URL or source that force exclusion."""

    custom_include_patterns: tuple[str, ...] = ()
    """Case-insensitive substrings of URL or source that force inclusion."""


_BASE_OPTIONS = FilterOptions()

_PROFILES: dict[str, FilterOptions] = {
    DEFAULT_PROFILE: _BASE_OPTIONS,
    DEVELOPMENT_PROFILE: replace(
        _BASE_OPTIONS,
        exclude_framework_tools=False,
        exclude_minified_code=False,
        exclude_test_frameworks=False,
        exclude_high_density_inline_scripts=False,
        min_script_size=10,
        max_statements_per_line=100,
    ),
    PRODUCTION_PROFILE: replace(_BASE_OPTIONS, min_script_size=50, max_statements_per_line=5),
    APPLICATION_PROFILE: replace(_BASE_OPTIONS, min_script_size=15, max_statements_per_line=5),
}


def resolve_profile(name: str) -> FilterOptions:
    """Return the filter options for the profile called *name*.

    Unknown names resolve to the ``default`` profile.
    """
    options = _PROFILES.get(name)
    if options is None:
        logger.debug("Unknown filter profile %r, using %r", name, DEFAULT_PROFILE)
        return _PROFILES[DEFAULT_PROFILE]
    return options

"""Configuration parsing from ``.browsercov.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from browsercov.filtering.profiles import (
    APPLICATION_PROFILE,
    PROFILE_NAMES,
    FilterOptions,
    resolve_profile,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".browsercov.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_PATTERN_FIELDS = ("custom_include_patterns", "custom_exclude_patterns")
_OPTION_FIELDS = {f.name: f.type for f in fields(FilterOptions)}


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class FilteringConfig:
    """Script filtering configuration."""

    profile: str = APPLICATION_PROFILE
    """Named filtering profile (default, development, production, application)."""

    custom_include_patterns: list[str] = field(default_factory=list)
    """Substrings of URL or source that always include a script."""

    custom_exclude_patterns: list[str] = field(default_factory=list)
    """Substrings of URL or source that exclude a script."""

    overrides: dict[str, Any] = field(default_factory=dict)
    """Individual ``FilterOptions`` fields overriding the profile."""


@dataclass
class ProcessingConfig:
    """Report assembly configuration."""

    workers: int = 1
    """Threads used to process scripts."""

    source_timeout: float | None = None
    """Seconds to wait for a script source (None = no limit)."""


@dataclass
class BrowserCovConfig:
    """Complete configuration from ``.browsercov.yml``."""

    filtering: FilteringConfig = field(default_factory=FilteringConfig)
    """Filtering configuration."""

    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    """Processing configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""

    def filter_options(self) -> FilterOptions:
        """Resolve the profile and apply overrides and custom patterns."""
        options = resolve_profile(self.filtering.profile)
        overrides = {
            name: value
            for name, value in self.filtering.overrides.items()
            if name in _OPTION_FIELDS and name not in _PATTERN_FIELDS
        }
        return replace(
            options,
            **overrides,
            custom_include_patterns=tuple(self.filtering.custom_include_patterns),
            custom_exclude_patterns=tuple(self.filtering.custom_exclude_patterns),
        )


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def _parse_bool(value: Any) -> bool:
    """Parse a YAML or env-resolved value as a boolean.

    Raises:
        ValueError: If *value* is not a recognised boolean spelling.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    msg = f"not a boolean: {value!r}"
    raise ValueError(msg)


def _coerce_override(name: str, value: Any) -> Any:
    """Coerce a YAML value to the type of the ``FilterOptions`` field *name*."""
    if _OPTION_FIELDS[name] == "bool":
        return _parse_bool(value)
    return int(value)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item)]


def _parse_filtering_config(raw: dict[str, Any]) -> FilteringConfig:
    """Parse the ``filtering`` section from raw YAML."""
    filtering_raw = raw.get("filtering", {})
    if not isinstance(filtering_raw, dict):
        filtering_raw = {}

    overrides: dict[str, Any] = {}
    for name, value in filtering_raw.items():
        if name not in _OPTION_FIELDS or name in _PATTERN_FIELDS:
            continue
        try:
            overrides[name] = _coerce_override(name, value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for filtering.%s: %r", name, value)

    return FilteringConfig(
        profile=str(filtering_raw.get("profile", APPLICATION_PROFILE)),
        custom_include_patterns=_string_list(filtering_raw.get("custom_include_patterns")),
        custom_exclude_patterns=_string_list(filtering_raw.get("custom_exclude_patterns")),
        overrides=overrides,
    )


def _parse_processing_config(raw: dict[str, Any]) -> ProcessingConfig:
    """Parse the ``processing`` section from raw YAML."""
    processing_raw = raw.get("processing", {})
    if not isinstance(processing_raw, dict):
        processing_raw = {}

    defaults = ProcessingConfig()

    try:
        workers = int(processing_raw.get("workers", defaults.workers))
    except (TypeError, ValueError):
        logger.warning(
            "Ignoring invalid value for processing.workers: %r", processing_raw.get("workers")
        )
        workers = defaults.workers

    timeout = processing_raw.get("source_timeout")
    source_timeout = defaults.source_timeout
    if timeout is not None:
        try:
            source_timeout = float(timeout)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for processing.source_timeout: %r", timeout)

    return ProcessingConfig(workers=workers, source_timeout=source_timeout)


def load_config(root: str | Path) -> BrowserCovConfig:
    """Load and parse ``.browsercov.yml`` from *root*.

    Falls back to defaults when the file is missing or incomplete.
    """
    config_path = Path(root).resolve() / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)

    return BrowserCovConfig(
        filtering=_parse_filtering_config(raw),
        processing=_parse_processing_config(raw),
        raw=raw,
    )


def _validate_filtering_config(filtering: FilteringConfig) -> list[str]:
    """Validate filtering settings."""
    errors: list[str] = []

    if filtering.profile not in PROFILE_NAMES:
        errors.append(
            f"filtering.profile must be one of: {', '.join(PROFILE_NAMES)} "
            f"(got: {filtering.profile}; the default profile will be used)"
        )

    for name in ("min_script_size", "max_statements_per_line"):
        value = filtering.overrides.get(name)
        if value is not None and value < 0:
            errors.append(f"filtering.{name} must be non-negative (got: {value})")

    return errors


def _validate_processing_config(processing: ProcessingConfig) -> list[str]:
    """Validate processing settings."""
    errors: list[str] = []

    if processing.workers < 1:
        errors.append(f"processing.workers must be at least 1 (got: {processing.workers})")

    if processing.source_timeout is not None and processing.source_timeout <= 0:
        errors.append(
            f"processing.source_timeout must be positive (got: {processing.source_timeout})"
        )

    return errors


def validate_config(config: BrowserCovConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []
    errors.extend(_validate_filtering_config(config.filtering))
    errors.extend(_validate_processing_config(config.processing))
    return errors

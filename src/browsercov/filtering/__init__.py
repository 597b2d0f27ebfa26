"""Script classification and filtering profiles."""

from browsercov.filtering.classifier import RULES, ClassificationRule, ScriptView, classify
from browsercov.filtering.profiles import (
    APPLICATION_PROFILE,
    DEFAULT_PROFILE,
    DEVELOPMENT_PROFILE,
    PRODUCTION_PROFILE,
    PROFILE_NAMES,
    FilterOptions,
    resolve_profile,
)

__all__ = [
    "APPLICATION_PROFILE",
    "DEFAULT_PROFILE",
    "DEVELOPMENT_PROFILE",
    "PRODUCTION_PROFILE",
    "PROFILE_NAMES",
    "RULES",
    "ClassificationRule",
    "FilterOptions",
    "ScriptView",
    "classify",
    "resolve_profile",
]

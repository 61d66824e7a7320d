"""
objectenvy config package public API.

File: src/objectenvy/config/__init__.py

Purpose
- Export CLI settings loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``objectenvy.toml`` + ``OBJECTENVY_`` env overrides.
- Fail fast with clear structured validation/load errors.

Non-functional requirements
- Keep import-time surface small and deterministic.
"""

from objectenvy.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    collect_env_overrides,
    load_settings,
)
from objectenvy.config.schema import (
    DEFAULT_SETTINGS,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    SettingsConfig,
    assert_valid_settings,
    default_settings,
    merge_options_from_settings,
    merge_settings,
    objectify_options_from_settings,
    validate_settings,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_SETTINGS",
    "ENV_PREFIX",
    "SettingsConfig",
    "assert_valid_settings",
    "collect_env_overrides",
    "default_settings",
    "load_settings",
    "merge_options_from_settings",
    "merge_settings",
    "objectify_options_from_settings",
    "validate_settings",
]

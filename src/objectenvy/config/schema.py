"""
objectenvy — CLI settings schema.

File: src/objectenvy/config/schema.py

Purpose
- Define built-in defaults and strict validation for the settings the
  command-line layer reads from ``objectenvy.toml``, ``OBJECTENVY_*`` and flags.

What should be included in this file
- Typed settings shape and deterministic defaults.
- Structured validation issues with dotted paths.
- Deep-merge helper for layering setting sources.
- Conversion of validated settings into transform/merge options.

Functional requirements
- Unknown keys and ill-typed values are reported, never silently dropped.
- Validation normalizes values (trimmed text, lower-cased non-nesting prefixes,
  canonical strategy and level names).

Non-functional requirements
- Pure functions; no I/O and no environment access.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, TypedDict

from objectenvy.constants import DEFAULT_DELIMITER, DEFAULT_NON_NESTING_PREFIXES
from objectenvy.core.merge import ArrayMergeStrategy, MergeOptions, merge
from objectenvy.core.options import ObjectifyOptions

LOG_LEVEL_NAMES: Final[tuple[str, ...]] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
LIST_FIELDS: Final[tuple[str, ...]] = ("include", "exclude", "non_nesting_prefixes")


class SettingsConfig(TypedDict):
    prefix: str | None
    delimiter: str
    coerce: bool
    include: list[str]
    exclude: list[str]
    non_nesting_prefixes: list[str]
    array_merge_strategy: str
    log_level: str


DEFAULT_SETTINGS: Final[SettingsConfig] = {
    "prefix": None,
    "delimiter": DEFAULT_DELIMITER,
    "coerce": True,
    "include": [],
    "exclude": [],
    "non_nesting_prefixes": list(DEFAULT_NON_NESTING_PREFIXES),
    "array_merge_strategy": ArrayMergeStrategy.REPLACE.value,
    "log_level": "WARNING",
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized settings when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict settings validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid settings:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_settings() -> SettingsConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_SETTINGS)


def merge_settings(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Layer ``overlay`` onto ``base``; arrays are replaced, never concatenated."""

    return merge(base, overlay, MergeOptions(ArrayMergeStrategy.REPLACE))


def validate_settings(settings: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate settings and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    if not isinstance(settings, Mapping):
        issues.add("<root>", f"expected object, got {type(settings).__name__}")
        return ConfigValidationResult(config=None, issues=issues.items())

    for key in sorted(str(item) for item in settings):
        if key not in DEFAULT_SETTINGS:
            issues.add(key, "unknown field")

    normalized: dict[str, Any] = {
        "prefix": _as_prefix(settings.get("prefix"), "prefix", issues),
        "delimiter": _as_delimiter(
            settings.get("delimiter", DEFAULT_DELIMITER), "delimiter", issues
        ),
        "coerce": _as_bool(settings.get("coerce", True), "coerce", issues),
        "include": _as_text_list(settings.get("include", []), "include", issues),
        "exclude": _as_text_list(settings.get("exclude", []), "exclude", issues),
        "non_nesting_prefixes": [
            item.lower()
            for item in _as_text_list(
                settings.get("non_nesting_prefixes", list(DEFAULT_NON_NESTING_PREFIXES)),
                "non_nesting_prefixes",
                issues,
            )
        ],
        "array_merge_strategy": _as_strategy(
            settings.get("array_merge_strategy", ArrayMergeStrategy.REPLACE.value),
            "array_merge_strategy",
            issues,
        ),
        "log_level": _as_log_level(settings.get("log_level", "WARNING"), "log_level", issues),
    }

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_settings(settings: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate settings and raise ``ConfigValidationError`` on failure."""

    result = validate_settings(settings)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def objectify_options_from_settings(
    settings: Mapping[str, Any], *, schema: object | None = None
) -> ObjectifyOptions:
    """Build forward-transform options from validated settings."""

    return ObjectifyOptions(
        prefix=settings["prefix"],
        delimiter=settings["delimiter"],
        coerce=settings["coerce"],
        include=tuple(settings["include"]) or None,
        exclude=tuple(settings["exclude"]) or None,
        non_nesting_prefixes=tuple(settings["non_nesting_prefixes"]),
        schema=schema,
    )


def merge_options_from_settings(settings: Mapping[str, Any]) -> MergeOptions:
    return MergeOptions(ArrayMergeStrategy.parse(settings["array_merge_strategy"]))


def _as_prefix(value: object, path: str, issues: _IssueCollector) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    return parsed or None


def _as_delimiter(value: object, path: str, issues: _IssueCollector) -> str:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return DEFAULT_DELIMITER
    if not value:
        issues.add(path, "must not be empty")
        return DEFAULT_DELIMITER
    return value


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return True


def _as_text_list(value: object, path: str, issues: _IssueCollector) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Sequence):
        issues.add(path, f"expected list of strings, got {type(value).__name__}")
        return []
    items: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            issues.add(f"{path}[{index}]", f"expected string, got {type(item).__name__}")
            continue
        parsed = item.strip()
        if not parsed:
            issues.add(f"{path}[{index}]", "must not be empty")
            continue
        items.append(parsed)
    return items


def _as_strategy(value: object, path: str, issues: _IssueCollector) -> str:
    allowed = tuple(item.value for item in ArrayMergeStrategy)
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    issues.add(path, f"invalid value {value!r}; expected one of: {', '.join(allowed)}")
    return ArrayMergeStrategy.REPLACE.value


def _as_log_level(value: object, path: str, issues: _IssueCollector) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        name = logging.getLevelName(value)
        if name in LOG_LEVEL_NAMES:
            return name
    elif isinstance(value, str) and value.strip().upper() in LOG_LEVEL_NAMES:
        return value.strip().upper()
    issues.add(path, f"invalid value {value!r}; expected one of: {', '.join(LOG_LEVEL_NAMES)}")
    return "WARNING"


__all__ = [
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_SETTINGS",
    "LIST_FIELDS",
    "LOG_LEVEL_NAMES",
    "SettingsConfig",
    "assert_valid_settings",
    "default_settings",
    "merge_options_from_settings",
    "merge_settings",
    "objectify_options_from_settings",
    "validate_settings",
]

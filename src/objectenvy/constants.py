"""Stable constants shared across the transformation engine and its outer layers."""

from __future__ import annotations

from typing import Final

# Key segmentation.
DEFAULT_DELIMITER: Final[str] = "_"
DEFAULT_NON_NESTING_PREFIXES: Final[tuple[str, ...]] = ("max", "min", "is", "enable", "disable")

# Scalar coercion vocabularies (compared case-insensitively).
TRUE_EQUIVALENTS: Final[frozenset[str]] = frozenset({"true", "yes", "y"})
FALSE_EQUIVALENTS: Final[frozenset[str]] = frozenset({"false", "no", "n"})
ARRAY_SEPARATOR: Final[str] = ","

# Schema-guided resolution enumerates 2 ** (n - 1) groupings per key.
MAX_INTERPRETATION_SEGMENTS: Final[int] = 16

# Plain structural hints skip keys with these leading characters.
HINT_SKIPPED_KEY_PREFIXES: Final[tuple[str, ...]] = ("_", "~")

# Outer layers.
SETTINGS_ENV_PREFIX: Final[str] = "OBJECTENVY"
DEFAULT_SETTINGS_FILE: Final[str] = "objectenvy.toml"
SETTINGS_TABLE: Final[str] = "objectenvy"

__all__ = [
    "ARRAY_SEPARATOR",
    "DEFAULT_DELIMITER",
    "DEFAULT_NON_NESTING_PREFIXES",
    "DEFAULT_SETTINGS_FILE",
    "FALSE_EQUIVALENTS",
    "HINT_SKIPPED_KEY_PREFIXES",
    "MAX_INTERPRETATION_SEGMENTS",
    "SETTINGS_ENV_PREFIX",
    "SETTINGS_TABLE",
    "TRUE_EQUIVALENTS",
]

"""
objectenvy — key normalization and segmentation

File: src/objectenvy/core/keys.py

Purpose
- Strip configured prefixes, filter keys, split keys into segments, and compose
  camelCase / SCREAMING_SNAKE_CASE identifiers.

What should be included in this file
- Delimiter-aware splitting: ``_`` splits on every underscore; any other
  delimiter splits only on its literal and keeps inner underscores for
  camelCase composition within the segment.
- Deterministic nested assignment helper shared by the builders.

Non-functional requirements
- Pure functions only; no logging, no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any, Final

from objectenvy.constants import DEFAULT_DELIMITER

_CAMEL_CASE_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"([a-z0-9])([A-Z])")


def strip_prefix(key: str, prefix: str | None, delimiter: str = DEFAULT_DELIMITER) -> str | None:
    """Return ``key`` without ``prefix`` + ``delimiter``, or ``None`` when it does not match."""

    if not prefix:
        return key
    prefix_with_delimiter = prefix if prefix.endswith(delimiter) else f"{prefix}{delimiter}"
    if key.startswith(prefix_with_delimiter):
        return key[len(prefix_with_delimiter) :]
    return None


def should_include_field(
    normalized_key: str,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> bool:
    """Apply case-insensitive substring include/exclude filters."""

    lowered = normalized_key.lower()
    if include and not any(pattern.lower() in lowered for pattern in include):
        return False
    if exclude and any(pattern.lower() in lowered for pattern in exclude):
        return False
    return True


def split_key(key: str, delimiter: str = DEFAULT_DELIMITER) -> tuple[str, ...]:
    """Split ``key`` on ``delimiter``, discarding empty segments."""

    return tuple(part for part in key.split(delimiter) if part)


def segment_to_camel_case(segment: str) -> str:
    """camelCase one segment on its inner underscores (``MAX_POOL`` -> ``maxPool``)."""

    words = segment.lower().split("_")
    return words[0] + "".join(_capitalize(word) for word in words[1:])


def group_to_camel_case(group: Iterable[str], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Join an ordered group of segments into one camelCase label."""

    if delimiter == DEFAULT_DELIMITER:
        words = [segment.lower() for segment in group]
    else:
        words = [segment_to_camel_case(segment) for segment in group]
    if not words:
        return ""
    return words[0] + "".join(_capitalize(word) for word in words[1:])


def segments_to_flat_camel_case(
    segments: Sequence[str], delimiter: str = DEFAULT_DELIMITER
) -> str:
    """Compose every segment into a single flat camelCase key."""

    return group_to_camel_case(segments, delimiter)


def segments_to_camel_case_path(
    segments: Sequence[str], delimiter: str = DEFAULT_DELIMITER
) -> tuple[str, ...]:
    """One label per segment, used when an entry nests."""

    if delimiter == DEFAULT_DELIMITER:
        return tuple(segment.lower() for segment in segments)
    return tuple(segment_to_camel_case(segment) for segment in segments)


def field_name_to_camel_case(name: str) -> str:
    """Normalize a declared field name to the camelCase label space.

    Names without underscores are kept as declared so ``portNumber`` stays
    ``portNumber``; ``port_number`` becomes ``portNumber``.
    """

    if "_" not in name.strip("_"):
        return name
    words = [word for word in name.split("_") if word]
    return words[0].lower() + "".join(_capitalize(word.lower()) for word in words[1:])


def to_screaming_snake_case(name: str) -> str:
    """Convert a camelCase key to SCREAMING_SNAKE_CASE."""

    return _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", name).upper()


def set_nested_value(target: dict[str, Any], path: Sequence[str], value: object) -> None:
    """Assign ``value`` at ``path``, replacing non-dict intermediates with new dicts."""

    if not path:
        return
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


__all__ = [
    "field_name_to_camel_case",
    "group_to_camel_case",
    "segment_to_camel_case",
    "segments_to_camel_case_path",
    "segments_to_flat_camel_case",
    "set_nested_value",
    "should_include_field",
    "split_key",
    "strip_prefix",
    "to_screaming_snake_case",
]

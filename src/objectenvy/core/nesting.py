"""
objectenvy — heuristic nesting builder

File: src/objectenvy/core/nesting.py

Purpose
- Build a nested config object from an environment source without a schema.

Functional requirements
- Two passes: count first segments over every surviving entry, then decide per
  entry. A first segment seen more than once nests unless it is a
  non-nesting prefix; everything else flattens into one camelCase key.
- ``PORT_NUMBER`` alone surfaces as ``portNumber``; ``LOG_LEVEL`` + ``LOG_PATH``
  surface as ``log: {level, path}``; ``MAX_CONNECTIONS`` + ``MAX_TIMEOUT`` stay
  flat.

Non-functional requirements
- The decision table is built once before any entry is placed.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

import structlog

from objectenvy.core.coercion import coerce_value
from objectenvy.core.entries import parse_entries
from objectenvy.core.keys import (
    segments_to_camel_case_path,
    segments_to_flat_camel_case,
    set_nested_value,
)
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.types import ConfigObject, EnvSource, ParsedEntry

_logger = structlog.get_logger(__name__)


def count_first_segments(entries: list[ParsedEntry]) -> Counter[str]:
    """Frequency table of lower-cased first segments."""

    return Counter(entry.first_segment for entry in entries)


def should_nest(
    first_segment: str, counts: Counter[str], non_nesting_prefixes: tuple[str, ...]
) -> bool:
    return counts[first_segment] > 1 and first_segment not in non_nesting_prefixes


def build_config(env: EnvSource, options: ObjectifyOptions | None = None) -> ConfigObject:
    """Build a config object using sibling frequency to decide nest-vs-flatten."""

    resolved = options if options is not None else ObjectifyOptions()
    entries = parse_entries(env, resolved)
    counts = count_first_segments(entries)

    result: ConfigObject = {}
    nested = 0
    for entry in entries:
        value: Any = coerce_value(entry.raw_value) if resolved.coerce else entry.raw_value
        if should_nest(entry.first_segment, counts, resolved.non_nesting_prefixes):
            set_nested_value(
                result, segments_to_camel_case_path(entry.segments, resolved.delimiter), value
            )
            nested += 1
        else:
            result[segments_to_flat_camel_case(entry.segments, resolved.delimiter)] = value

    _logger.debug(
        "objectify_heuristic_built",
        entries=len(entries),
        nested=nested,
        flattened=len(entries) - nested,
    )
    return result


__all__ = ["build_config", "count_first_segments", "should_nest"]

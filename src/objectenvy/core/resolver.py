"""
objectenvy — schema-guided path resolver

File: src/objectenvy/core/resolver.py

Purpose
- Place environment entries at the leaf paths of a declared shape.

Functional requirements
- For ``n`` segments, enumerate the ``2 ** (n - 1)`` contiguous groupings in
  increasing mask order; bit ``i - 1`` set means "split before segment ``i``".
- The first grouping whose dot-joined labels equal a known leaf path wins;
  entries without a match flatten to one camelCase key.
- Validating shapes parse the built object; their errors propagate unchanged.

Non-functional requirements
- Keys longer than ``MAX_INTERPRETATION_SEGMENTS`` segments are not enumerated.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

import structlog

from objectenvy.constants import DEFAULT_DELIMITER, MAX_INTERPRETATION_SEGMENTS
from objectenvy.core.coercion import coerce_value
from objectenvy.core.entries import parse_entries
from objectenvy.core.keys import group_to_camel_case, segments_to_flat_camel_case, set_nested_value
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.shapes import ShapeIntrospector, introspect_shape
from objectenvy.core.types import ConfigObject, EnvSource, SchemaPath

_logger = structlog.get_logger(__name__)


def generate_path_interpretations(
    segments: Sequence[str], delimiter: str = DEFAULT_DELIMITER
) -> Iterator[tuple[str, ...]]:
    """Yield every contiguous grouping of ``segments`` as a camelCase label path."""

    count = len(segments)
    if count == 0:
        return
    for mask in range(1 << (count - 1)):
        path: list[str] = []
        group: list[str] = [segments[0]]
        for index in range(1, count):
            if mask & (1 << (index - 1)):
                path.append(group_to_camel_case(group, delimiter))
                group = [segments[index]]
            else:
                group.append(segments[index])
        path.append(group_to_camel_case(group, delimiter))
        yield tuple(path)


def index_schema_paths(schema_paths: Sequence[SchemaPath]) -> dict[str, tuple[str, ...]]:
    """Map each ``path_key`` to its declared path; the first declaration wins."""

    indexed: dict[str, tuple[str, ...]] = {}
    for item in schema_paths:
        indexed.setdefault(item.path_key, item.path)
    return indexed


def find_matching_schema_path(
    segments: Sequence[str],
    schema_paths: Mapping[str, tuple[str, ...]],
    delimiter: str = DEFAULT_DELIMITER,
) -> tuple[str, ...] | None:
    """Return the declared path of the first matching interpretation, if any."""

    if len(segments) > MAX_INTERPRETATION_SEGMENTS:
        _logger.warning(
            "objectify_interpretations_capped",
            segments=len(segments),
            limit=MAX_INTERPRETATION_SEGMENTS,
        )
        return None
    for interpretation in generate_path_interpretations(segments, delimiter):
        matched = schema_paths.get(".".join(interpretation))
        if matched is not None:
            return matched
    return None


def build_config_with_schema(
    env: EnvSource,
    shape: object,
    options: ObjectifyOptions | None = None,
) -> ConfigObject:
    """Build a config object whose nesting follows the leaf paths of ``shape``.

    The returned object is unvalidated; see :func:`resolve_with_schema`.
    """

    resolved = options if options is not None else ObjectifyOptions()
    introspector = introspect_shape(shape)
    schema_paths = index_schema_paths(introspector.extract_leaf_paths())

    result: ConfigObject = {}
    matched = 0
    entries = parse_entries(env, resolved)
    for entry in entries:
        value: Any = coerce_value(entry.raw_value) if resolved.coerce else entry.raw_value
        path = find_matching_schema_path(entry.segments, schema_paths, resolved.delimiter)
        if path is not None:
            set_nested_value(result, path, value)
            matched += 1
        else:
            result[segments_to_flat_camel_case(entry.segments, resolved.delimiter)] = value

    _logger.debug(
        "objectify_schema_built",
        entries=len(entries),
        matched=matched,
        unmatched=len(entries) - matched,
        leaf_paths=len(schema_paths),
    )
    return result


def resolve_with_schema(
    env: EnvSource,
    shape: object,
    options: ObjectifyOptions | None = None,
) -> Any:
    """Build against ``shape`` and validate when the shape is a validating kind."""

    introspector: ShapeIntrospector = introspect_shape(shape)
    built = build_config_with_schema(env, introspector, options)
    if not introspector.validates:
        return built
    return introspector.validate(built)


__all__ = [
    "build_config_with_schema",
    "find_matching_schema_path",
    "generate_path_interpretations",
    "index_schema_paths",
    "resolve_with_schema",
]

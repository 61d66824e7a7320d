"""
objectenvy — deep merge / override engine

File: src/objectenvy/core/merge.py

Purpose
- Combine two config objects recursively with a configurable array policy.

Functional requirements
- ``merge(first, second)``: ``second`` wins on collisions; nested mappings
  recurse; colliding arrays follow the strategy with ``first`` before ``second``.
- ``override(defaults, config)``: ``config`` wins; keys missing from ``config``
  are copied from ``defaults``; colliding arrays follow the strategy with
  ``config`` first, and ``replace`` keeps ``config``'s array unless it is empty.
- ``concat-unique`` compares primitives by kind and value and structured items
  by canonical JSON, keeping first-occurrence order.

Non-functional requirements
- Pure: inputs are never mutated and outputs never alias them.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from objectenvy.errors import InvalidMergeStrategyError


class ArrayMergeStrategy(StrEnum):
    """How two colliding arrays are combined."""

    REPLACE = "replace"
    CONCAT = "concat"
    CONCAT_UNIQUE = "concat-unique"

    @classmethod
    def parse(cls, value: ArrayMergeStrategy | str) -> ArrayMergeStrategy:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in cls)
            raise InvalidMergeStrategyError(
                f"unknown array merge strategy {value!r} (expected one of: {allowed})"
            ) from exc


@dataclass(frozen=True, slots=True)
class MergeOptions:
    array_merge_strategy: ArrayMergeStrategy = ArrayMergeStrategy.REPLACE

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "array_merge_strategy", ArrayMergeStrategy.parse(self.array_merge_strategy)
        )


_DEFAULT_OPTIONS = MergeOptions()


def merge(
    first: Mapping[str, Any],
    second: Mapping[str, Any],
    options: MergeOptions | None = None,
) -> dict[str, Any]:
    """Deep-merge ``second`` onto ``first``."""

    resolved = options if options is not None else _DEFAULT_OPTIONS
    _require_mapping("first", first)
    _require_mapping("second", second)

    result: dict[str, Any] = {key: copy.deepcopy(value) for key, value in first.items()}
    for key, value in second.items():
        existing = result.get(key)
        if _is_array(value) and _is_array(existing):
            result[key] = combine_arrays(existing, value, resolved.array_merge_strategy)
        elif isinstance(value, Mapping) and isinstance(existing, Mapping):
            result[key] = merge(existing, value, resolved)
        else:
            result[key] = copy.deepcopy(value)
    return result


def override(
    defaults: Mapping[str, Any],
    config: Mapping[str, Any],
    options: MergeOptions | None = None,
) -> dict[str, Any]:
    """Apply ``defaults`` underneath ``config``."""

    resolved = options if options is not None else _DEFAULT_OPTIONS
    _require_mapping("defaults", defaults)
    _require_mapping("config", config)

    result: dict[str, Any] = {key: copy.deepcopy(value) for key, value in config.items()}
    for key, default in defaults.items():
        if key not in result:
            result[key] = copy.deepcopy(default)
            continue
        current = result[key]
        if _is_array(current) and _is_array(default):
            strategy = resolved.array_merge_strategy
            if strategy is ArrayMergeStrategy.REPLACE:
                result[key] = list(current) if len(current) > 0 else copy.deepcopy(list(default))
            else:
                result[key] = combine_arrays(current, default, strategy)
        elif isinstance(current, Mapping) and isinstance(default, Mapping):
            result[key] = override(default, current, resolved)
    return result


def combine_arrays(
    first: Sequence[Any],
    second: Sequence[Any],
    strategy: ArrayMergeStrategy | str = ArrayMergeStrategy.REPLACE,
) -> list[Any]:
    """Combine two arrays; ``first`` precedes ``second`` for the concatenating strategies."""

    resolved = ArrayMergeStrategy.parse(strategy)
    if resolved is ArrayMergeStrategy.REPLACE:
        return copy.deepcopy(list(second))
    if resolved is ArrayMergeStrategy.CONCAT:
        return copy.deepcopy([*first, *second])
    return _concat_unique(first, second)


def _concat_unique(first: Sequence[Any], second: Sequence[Any]) -> list[Any]:
    result: list[Any] = copy.deepcopy(list(first))
    seen_primitives: set[tuple[str, Any]] = set()
    seen_structured: set[str] = set()
    for item in result:
        if _is_structured(item):
            seen_structured.add(_canonical(item))
        else:
            seen_primitives.add(_primitive_key(item))

    for item in second:
        if _is_structured(item):
            marker = _canonical(item)
            if marker in seen_structured:
                continue
            seen_structured.add(marker)
        else:
            key = _primitive_key(item)
            if key in seen_primitives:
                continue
            seen_primitives.add(key)
        result.append(copy.deepcopy(item))
    return result


def _primitive_key(item: object) -> tuple[str, Any]:
    # bool is an int subclass; keep True distinct from 1.
    if isinstance(item, bool):
        return ("bool", item)
    if isinstance(item, (int, float)):
        return ("number", item)
    if item is None:
        return ("null", None)
    return (type(item).__name__, item)


def _canonical(item: object) -> str:
    return json.dumps(item, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=repr)


def _is_structured(item: object) -> bool:
    return isinstance(item, (Mapping, list, tuple))


def _is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _require_mapping(name: str, value: object) -> None:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a mapping, got {type(value).__name__}")


__all__ = ["ArrayMergeStrategy", "MergeOptions", "combine_arrays", "merge", "override"]

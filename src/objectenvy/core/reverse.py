"""Reverse transform: nested config object -> flat SCREAMING_SNAKE_CASE env map."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from objectenvy.core.keys import to_screaming_snake_case
from objectenvy.core.types import FlatEnv


def envy(config: Mapping[str, Any] | Any) -> FlatEnv:
    """Flatten ``config`` into ``KEY -> string`` pairs.

    ``None`` leaves are omitted, arrays become comma-joined strings, and
    booleans render as ``true`` / ``false`` so that
    ``envy(objectify(env)) == env`` whenever coercion was lossless.
    """

    env: FlatEnv = {}
    _flatten(_as_mapping(config), "", env)
    return env


def stringify_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(value: object, key: str, env: FlatEnv) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        if key:
            env[key] = ",".join(_stringify_item(item) for item in value)
        return
    if isinstance(value, Mapping):
        for field_name, item in value.items():
            screaming = to_screaming_snake_case(str(field_name))
            _flatten(item, f"{key}_{screaming}" if key else screaming, env)
        return
    if key:
        env[key] = stringify_scalar(value)


def _stringify_item(item: object) -> str:
    if item is None or isinstance(item, (Mapping, list, tuple)):
        return json.dumps(item, separators=(",", ":"), ensure_ascii=False)
    return stringify_scalar(item)


def _as_mapping(config: object) -> Mapping[str, Any]:
    if isinstance(config, Mapping):
        return config
    model_dump = getattr(config, "model_dump", None)
    if callable(model_dump):
        dumped = model_dump(by_alias=True)
        if isinstance(dumped, Mapping):
            return dumped
    legacy_dump = getattr(config, "dict", None)
    if callable(legacy_dump) and hasattr(config, "__fields__"):
        dumped = legacy_dump(by_alias=True)
        if isinstance(dumped, Mapping):
            return dumped
    raise TypeError(f"config must be a mapping or a model instance, got {type(config).__name__}")


__all__ = ["envy", "stringify_scalar"]

"""
objectenvy — CLI settings loader.

File: src/objectenvy/config/loader.py

Purpose
- Load effective CLI settings from defaults, ``objectenvy.toml``,
  ``OBJECTENVY_*`` environment variables, and command-line overrides.

What should be included in this file
- Precedence logic: CLI > env (OBJECTENVY_) > file > defaults.
- TOML loading via ``tomllib``; settings live under the ``[objectenvy]`` table.
- Environment overrides parsed by the forward transform itself, guided by the
  settings keys.

Functional requirements
- An explicitly named settings file must exist; the default one is optional.
- Every layer is validated; failures raise ``ConfigValidationError`` or
  ``ConfigLoadError``.

Non-functional requirements
- Keep loading deterministic and reproducible.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from objectenvy.config.schema import (
    DEFAULT_SETTINGS,
    LIST_FIELDS,
    assert_valid_settings,
    default_settings,
    merge_settings,
)
from objectenvy.constants import (
    ARRAY_SEPARATOR,
    DEFAULT_SETTINGS_FILE,
    SETTINGS_ENV_PREFIX,
    SETTINGS_TABLE,
)
from objectenvy.core.coercion import coerce_scalar
from objectenvy.core.objectify import objectify

DEFAULT_CONFIG_FILE: Final[str] = DEFAULT_SETTINGS_FILE
ENV_PREFIX: Final[str] = SETTINGS_ENV_PREFIX

# Structural hint: every settings key is a leaf.
_SETTINGS_HINT: Final[dict[str, str]] = {key: "" for key in DEFAULT_SETTINGS}


class ConfigLoadError(ValueError):
    """Raised when settings or input documents cannot be loaded."""


def load_settings(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cli_overrides: Mapping[str, object] | None = None,
) -> dict[str, Any]:
    """Load effective settings with deterministic precedence: CLI > env > file > defaults."""

    resolved_path = _resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_settings_table(resolved_path, required=config_path is not None)
    merged = merge_settings(default_settings(), file_payload)
    merged = assert_valid_settings(merged)

    merged = merge_settings(merged, collect_env_overrides(env_map))
    merged = merge_settings(merged, _materialize_cli_overrides(cli_overrides or {}))
    return assert_valid_settings(merged)


def collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Settings overrides carried by ``OBJECTENVY_*`` variables in ``environ``."""

    parsed = objectify(environ, prefix=ENV_PREFIX, coerce=False, schema=_SETTINGS_HINT)
    overrides: dict[str, Any] = {}
    for key in sorted(parsed):
        if key not in DEFAULT_SETTINGS:
            continue
        overrides[key] = _coerce_env(str(parsed[key]), key)
    return overrides


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_settings_table(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"settings file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read settings file {path}: {exc}") from exc

    table = parsed.get(SETTINGS_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigLoadError(f"[{SETTINGS_TABLE}] must be a table: {path}")
    return table


def _coerce_env(raw: str, key: str) -> object:
    env_name = f"{ENV_PREFIX}_{key.upper()}"
    if key in LIST_FIELDS:
        return [piece.strip() for piece in raw.split(ARRAY_SEPARATOR) if piece.strip()]
    if key == "coerce":
        parsed = coerce_scalar(raw.strip())
        if not isinstance(parsed, bool):
            raise ConfigLoadError(f"{env_name} must be a boolean (true/false/yes/no/y/n)")
        return parsed
    if key == "delimiter":
        return raw
    return raw.strip()


def _materialize_cli_overrides(cli_overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(cli_overrides):
        value = cli_overrides[key]
        if value is None:
            continue
        if isinstance(value, tuple):
            value = list(value)
        payload[key] = value
    return payload


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "collect_env_overrides",
    "load_settings",
]

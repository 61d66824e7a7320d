"""
objectenvy — env-file and document I/O

File: src/objectenvy/ui/envfile.py

Purpose
- Read ``.env`` files into environment sources, render flat environments as
  ``.env`` text, and load JSON/YAML/TOML config documents for the CLI.

Functional requirements
- ``.env`` parsing is delegated to ``python-dotenv``; variable interpolation is
  disabled so values are read verbatim.
- Values containing whitespace, quotes, ``$``, backticks or backslashes, and
  empty values, are double-quoted with ``"``, newline and carriage return
  escaped.
- Document roots must be mappings.

Non-functional requirements
- Output text is deterministic; files are written atomically.
"""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import yaml
from dotenv import dotenv_values

from objectenvy.config.loader import ConfigLoadError
from objectenvy.utils.fs import PathLike, atomic_write

_NEEDS_QUOTING: Final[re.Pattern[str]] = re.compile(r"[\s\"'$`\\]")
_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
_TOML_SUFFIXES: Final[frozenset[str]] = frozenset({".toml"})


def read_env_file(path: PathLike) -> dict[str, str | None]:
    """Parse a ``.env`` file; keys declared without a value map to ``None``."""

    target = Path(path)
    if not target.is_file():
        raise ConfigLoadError(f"env file not found: {target}")
    try:
        return dict(dotenv_values(target, interpolate=False, encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"unable to read env file {target}: {exc}") from exc


def needs_quoting(value: str) -> bool:
    return value == "" or _NEEDS_QUOTING.search(value) is not None


def escape_value(value: str) -> str:
    return value.replace('"', '\\"').replace("\n", "\\n").replace("\r", "\\r")


def format_env_line(key: str, value: str) -> str:
    rendered = f'"{escape_value(value)}"' if needs_quoting(value) else value
    return f"{key}={rendered}"


def format_env_content(
    entries: Mapping[str, str],
    *,
    comments: Mapping[str, str] | None = None,
) -> str:
    """Render ``entries`` as ``.env`` text in insertion order.

    A key with a comment gets a ``# comment`` line above it and a blank line
    after it. The result never ends with blank lines.
    """

    lines: list[str] = []
    for key, value in entries.items():
        comment = comments.get(key) if comments is not None else None
        if comment:
            lines.append(f"# {comment}")
        lines.append(format_env_line(key, value))
        if comment:
            lines.append("")

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def prefix_entries(entries: Mapping[str, str], prefix: str | None) -> dict[str, str]:
    """Prepend ``PREFIX_`` to every key; an empty prefix leaves keys unchanged."""

    if not prefix:
        return dict(entries)
    head = prefix if prefix.endswith("_") else f"{prefix}_"
    return {f"{head}{key}": value for key, value in entries.items()}


def write_env_file(
    path: PathLike,
    entries: Mapping[str, str],
    *,
    comments: Mapping[str, str] | None = None,
) -> Path:
    """Write ``entries`` as a ``.env`` file, creating parent directories."""

    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(target, format_env_content(entries, comments=comments) + "\n")
    except OSError as exc:
        raise ConfigLoadError(f"unable to write env file {target}: {exc}") from exc
    return target


def load_document(path: PathLike) -> dict[str, Any]:
    """Load a JSON, YAML or TOML document whose root is a mapping."""

    target = Path(path)
    suffix = target.suffix.lower()
    if suffix not in _JSON_SUFFIXES | _YAML_SUFFIXES | _TOML_SUFFIXES:
        raise ConfigLoadError(
            f"unsupported document type {suffix or '<none>'!r}: {target} "
            "(expected .json, .yaml, .yml or .toml)"
        )
    if not target.is_file():
        raise ConfigLoadError(f"document not found: {target}")

    try:
        if suffix in _TOML_SUFFIXES:
            with target.open("rb") as handle:
                parsed: object = tomllib.load(handle)
        elif suffix in _YAML_SUFFIXES:
            parsed = yaml.safe_load(target.read_text(encoding="utf-8"))
        else:
            parsed = json.loads(target.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigLoadError(f"invalid document {target}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"unable to read document {target}: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ConfigLoadError(f"document root must be an object: {target}")
    return parsed


__all__ = [
    "escape_value",
    "format_env_content",
    "format_env_line",
    "load_document",
    "needs_quoting",
    "prefix_entries",
    "read_env_file",
    "write_env_file",
]

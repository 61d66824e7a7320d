"""Derive :class:`ParsedEntry` records from an environment source."""

from __future__ import annotations

from collections.abc import Mapping

from objectenvy.core.keys import should_include_field, split_key, strip_prefix
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.types import EnvSource, ParsedEntry


def parse_entries(env: EnvSource, options: ObjectifyOptions) -> list[ParsedEntry]:
    """Return entries in source order, skipping absent, unprefixed, filtered, or empty keys."""

    if not isinstance(env, Mapping):
        raise TypeError(f"env source must be a mapping, got {type(env).__name__}")

    entries: list[ParsedEntry] = []
    for key, value in env.items():
        if value is None:
            continue
        normalized_key = strip_prefix(key, options.prefix, options.delimiter)
        if normalized_key is None:
            continue
        if not should_include_field(normalized_key, options.include, options.exclude):
            continue
        segments = split_key(normalized_key, options.delimiter)
        if not segments:
            continue
        entries.append(
            ParsedEntry(normalized_key=normalized_key, segments=segments, raw_value=str(value))
        )
    return entries


__all__ = ["parse_entries"]

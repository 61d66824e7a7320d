"""
objectenvy — memoized loader factory

File: src/objectenvy/core/loader.py

Purpose
- Bind default forward-transform options once and memoize results per
  (environment source, effective options).

What should be included in this file
- A registration table keyed by source identity. Two structurally equal but
  distinct sources get independent entries; a hit returns the cached object by
  reference.
- Fingerprints derived from the effective options (prefix, coerce flag,
  delimiter, filters, non-nesting prefixes, schema object identity). Cached
  schemas are held by reference so their ids stay unique.

Functional requirements
- Per-call overrides are applied on top of the factory defaults.
- The process environment is read only when no source was supplied.
- ``clear()`` releases every registered source and result.

Non-functional requirements
- The cache is lock-guarded; results are computed outside the lock, so a racing
  miss computes the same pure result and the last write wins.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Any

import structlog

from objectenvy.core.objectify import objectify
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.reverse import envy
from objectenvy.core.shapes import introspect_shape
from objectenvy.core.types import EnvSource, FlatEnv
from objectenvy.utils.hashing import sha256_json


def options_fingerprint(options: ObjectifyOptions) -> str:
    """Deterministic fingerprint of the options that affect the built object."""

    payload = {
        "prefix": options.prefix,
        "coerce": options.coerce,
        "delimiter": options.delimiter,
        "include": sorted(options.include) if options.include is not None else None,
        "exclude": sorted(options.exclude) if options.exclude is not None else None,
        "non_nesting_prefixes": sorted(options.non_nesting_prefixes),
        "schema": introspect_shape(options.schema).identity()
        if options.schema is not None
        else None,
    }
    return sha256_json(payload)


@dataclass(slots=True)
class _SourceRegistration:
    source: EnvSource
    results: dict[str, Any] = field(default_factory=dict)
    # Pins each fingerprinted schema so its id is not reused while cached.
    schemas: dict[str, Any] = field(default_factory=dict)


class Loader:
    """Callable forward transform with preset options and a private result cache."""

    def __init__(
        self,
        defaults: ObjectifyOptions | None = None,
        *,
        env: EnvSource | None = None,
        logger: Any | None = None,
    ) -> None:
        self._defaults = defaults if defaults is not None else ObjectifyOptions()
        self._default_env = env
        self._registrations: dict[int, _SourceRegistration] = {}
        self._lock = threading.Lock()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def defaults(self) -> ObjectifyOptions:
        return self._defaults

    @property
    def registered_sources(self) -> int:
        with self._lock:
            return len(self._registrations)

    def __call__(self, *, env: EnvSource | None = None, **overrides: Any) -> Any:
        options = self._defaults.with_overrides(overrides)
        source = self._resolve_source(env)
        fingerprint = options_fingerprint(options)
        handle = id(source)

        with self._lock:
            registration = self._registrations.get(handle)
            if registration is not None and registration.source is source:
                if fingerprint in registration.results:
                    self._logger.debug("loader_cache_hit", fingerprint=fingerprint[:12])
                    return registration.results[fingerprint]

        self._logger.debug("loader_cache_miss", fingerprint=fingerprint[:12])
        result = objectify(source, options)

        with self._lock:
            registration = self._registrations.get(handle)
            if registration is None or registration.source is not source:
                registration = _SourceRegistration(source=source)
                self._registrations[handle] = registration
            registration.results[fingerprint] = result
            registration.schemas[fingerprint] = options.schema
        return result

    def envy(self, config: Any) -> FlatEnv:
        """Reverse transform; see :func:`objectenvy.core.reverse.envy`."""

        return envy(config)

    def clear(self) -> None:
        """Release every registered source and cached result."""

        with self._lock:
            self._registrations.clear()

    def _resolve_source(self, env: EnvSource | None) -> EnvSource:
        if env is not None:
            return env
        if self._default_env is not None:
            return self._default_env
        return os.environ


def create_loader(
    *,
    env: EnvSource | None = None,
    logger: Any | None = None,
    **defaults: Any,
) -> Loader:
    """Create a :class:`Loader` whose defaults are ``defaults`` (``ObjectifyOptions`` fields)."""

    return Loader(ObjectifyOptions.from_fields(defaults), env=env, logger=logger)


__all__ = ["Loader", "create_loader", "options_fingerprint"]

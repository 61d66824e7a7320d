"""
objectenvy — package root

File: src/objectenvy/__init__.py

Purpose
- Convert flat environment sources into nested, typed configuration objects and
  back, and deep-merge configuration objects.

Functional requirements
- Must not have side effects at import time (no environment reads, no logging
  init).

Key interfaces / contracts
- ``objectify`` / ``objectify_environ``: forward transform.
- ``envy``: reverse transform.
- ``merge`` / ``override``: deep merge with array strategies.
- ``create_loader``: memoized loader factory.
"""

from objectenvy.core import (
    ArrayMergeStrategy,
    ConfigObject,
    ConfigValue,
    EnvSource,
    Loader,
    MergeOptions,
    ObjectifyOptions,
    coerce_value,
    create_loader,
    envy,
    extract_schema_paths,
    merge,
    objectify,
    objectify_environ,
    override,
)
from objectenvy.errors import InvalidMergeStrategyError, InvalidOptionsError, ObjectEnvyError

__version__ = "0.4.0"

__all__ = [
    "ArrayMergeStrategy",
    "ConfigObject",
    "ConfigValue",
    "EnvSource",
    "InvalidMergeStrategyError",
    "InvalidOptionsError",
    "Loader",
    "MergeOptions",
    "ObjectEnvyError",
    "ObjectifyOptions",
    "__version__",
    "coerce_value",
    "create_loader",
    "envy",
    "extract_schema_paths",
    "merge",
    "objectify",
    "objectify_environ",
    "override",
]

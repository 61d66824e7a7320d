"""Typed failures raised by the transformation engine.

Schema validation failures are not wrapped here: they propagate exactly as the
supplied schema raised them.
"""

from __future__ import annotations


class ObjectEnvyError(Exception):
    """Base class for engine-level programming errors."""


class InvalidOptionsError(ObjectEnvyError, ValueError):
    """Raised when transform options are malformed (e.g. an empty delimiter)."""


class InvalidMergeStrategyError(ObjectEnvyError, ValueError):
    """Raised when an unknown array merge strategy is requested."""


__all__ = ["InvalidMergeStrategyError", "InvalidOptionsError", "ObjectEnvyError"]

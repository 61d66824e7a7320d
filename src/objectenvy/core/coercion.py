"""
objectenvy — type coercion engine

File: src/objectenvy/core/coercion.py

Purpose
- Convert raw environment strings into booleans, integers, floats, or arrays.

Functional requirements
- Scalars: case-insensitive boolean vocabulary, then integer, then float,
  otherwise the string unchanged.
- Comma-separated values become arrays of scalar-coerced, stripped, non-empty
  pieces; a single surviving piece collapses to a scalar.

Non-functional requirements
- Total and pure: identical input always yields identical output, never raises.
"""

from __future__ import annotations

import re
import sys
from typing import Final

from objectenvy.constants import ARRAY_SEPARATOR, FALSE_EQUIVALENTS, TRUE_EQUIVALENTS
from objectenvy.core.types import CoercedValue, Primitive

_INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"-?[0-9]+")
_FLOAT_PATTERN: Final[re.Pattern[str]] = re.compile(r"-?[0-9]+\.[0-9]+")


def coerce_scalar(raw: str) -> Primitive:
    """Coerce one comma-free string to ``bool``, ``int``, ``float`` or ``str``."""

    lowered = raw.lower()
    if lowered in TRUE_EQUIVALENTS:
        return True
    if lowered in FALSE_EQUIVALENTS:
        return False
    if _INTEGER_PATTERN.fullmatch(raw):
        # Digit strings past the interpreter's int conversion limit stay text.
        limit = sys.get_int_max_str_digits()
        if limit and len(raw.lstrip("-")) > limit:
            return raw
        return int(raw)
    if _FLOAT_PATTERN.fullmatch(raw):
        return float(raw)
    return raw


def coerce_value(raw: str) -> CoercedValue:
    """Coerce a raw environment value, splitting comma-separated arrays."""

    if ARRAY_SEPARATOR not in raw:
        return coerce_scalar(raw)

    pieces = [piece.strip() for piece in raw.split(ARRAY_SEPARATOR)]
    pieces = [piece for piece in pieces if piece]
    if not pieces:
        return ""
    if len(pieces) == 1:
        return coerce_scalar(pieces[0])
    return [coerce_scalar(piece) for piece in pieces]


__all__ = ["coerce_scalar", "coerce_value"]

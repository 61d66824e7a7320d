"""Value model shared by the forward and reverse transforms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

Primitive = str | int | float | bool
ConfigObject = dict[str, "ConfigValue"]
ConfigArray = list["Primitive | ConfigObject"]
ConfigValue = Primitive | ConfigObject | ConfigArray
CoercedValue = Primitive | list[Primitive]

EnvSource = Mapping[str, "str | None"]
FlatEnv = dict[str, str]


@dataclass(frozen=True, slots=True)
class ParsedEntry:
    """One environment entry after prefix stripping, filtering, and splitting."""

    normalized_key: str
    segments: tuple[str, ...]
    raw_value: str

    @property
    def first_segment(self) -> str:
        return self.segments[0].lower()


@dataclass(frozen=True, slots=True)
class SchemaPath:
    """Leaf field of a declared shape.

    ``path`` holds the field names as declared; ``path_key`` holds their
    camelCase labels joined by ``.`` and is what key interpretations are matched
    against.
    """

    path: tuple[str, ...]
    path_key: str


__all__ = [
    "CoercedValue",
    "ConfigArray",
    "ConfigObject",
    "ConfigValue",
    "EnvSource",
    "FlatEnv",
    "ParsedEntry",
    "Primitive",
    "SchemaPath",
]

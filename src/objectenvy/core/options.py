"""Forward-transform options and their override rules."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from objectenvy.constants import DEFAULT_DELIMITER, DEFAULT_NON_NESTING_PREFIXES
from objectenvy.errors import InvalidOptionsError


@dataclass(frozen=True, slots=True)
class ObjectifyOptions:
    """Options accepted by :func:`objectenvy.core.objectify.objectify`.

    ``schema`` is either a validating model class (pydantic 2 or the pydantic 1
    API) or a plain nested mapping used as a structural hint.
    """

    prefix: str | None = None
    delimiter: str = DEFAULT_DELIMITER
    coerce: bool = True
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    non_nesting_prefixes: tuple[str, ...] = field(default=DEFAULT_NON_NESTING_PREFIXES)
    schema: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.delimiter, str) or not self.delimiter:
            raise InvalidOptionsError("delimiter must be a non-empty string")
        if self.prefix is not None and not isinstance(self.prefix, str):
            raise InvalidOptionsError(f"prefix must be a string, got {type(self.prefix).__name__}")
        object.__setattr__(self, "coerce", bool(self.coerce))
        object.__setattr__(self, "include", _optional_patterns("include", self.include))
        object.__setattr__(self, "exclude", _optional_patterns("exclude", self.exclude))
        non_nesting = _optional_patterns("non_nesting_prefixes", self.non_nesting_prefixes)
        object.__setattr__(
            self,
            "non_nesting_prefixes",
            tuple(item.lower() for item in non_nesting) if non_nesting is not None else (),
        )

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> ObjectifyOptions:
        return cls().with_overrides(fields)

    def with_overrides(self, overrides: Mapping[str, object]) -> ObjectifyOptions:
        """Return a copy with ``overrides`` applied on top of these options."""

        unknown = sorted(set(overrides) - _FIELD_NAMES)
        if unknown:
            raise InvalidOptionsError(f"unknown option field(s): {', '.join(unknown)}")
        if not overrides:
            return self
        return dataclasses.replace(self, **overrides)


_FIELD_NAMES = frozenset(item.name for item in dataclasses.fields(ObjectifyOptions))


def _optional_patterns(name: str, value: object) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Sequence) and not isinstance(value, (set, frozenset)):
        raise InvalidOptionsError(f"{name} must be a sequence of strings")
    items = tuple(value)
    for item in items:
        if not isinstance(item, str):
            raise InvalidOptionsError(f"{name} entries must be strings, got {type(item).__name__}")
    return items


__all__ = ["ObjectifyOptions"]

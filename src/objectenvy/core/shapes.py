"""
objectenvy — declared-shape introspection

File: src/objectenvy/core/shapes.py

Purpose
- Detect which kind of declared shape a caller supplied and extract its leaf
  paths.

What should be included in this file
- ``PydanticV2Shape``: model classes exposing ``model_fields`` / ``model_validate``.
- ``PydanticV1Shape``: model classes exposing the pydantic 1 API
  (``__fields__`` / ``parse_obj``).
- ``PlainHintShape``: nested mappings used only as structural hints.

Functional requirements
- Optional / nullable / ``Annotated`` wrappers are unwrapped before deciding
  whether a field is a nested model.
- Field aliases win over attribute names; hint keys starting with ``_`` or ``~``
  and callable hint values are skipped.
- A nested model without fields, an empty nested hint, and any other value are
  leaves. Self-referencing models stop at the first repeat.

Non-functional requirements
- Extraction never validates and never mutates the shape.
"""

from __future__ import annotations

import json
import types
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Protocol, Union, get_args, get_origin, runtime_checkable

from objectenvy.constants import HINT_SKIPPED_KEY_PREFIXES
from objectenvy.core.keys import field_name_to_camel_case
from objectenvy.core.types import SchemaPath

_NONE_TYPE = type(None)


@runtime_checkable
class ShapeIntrospector(Protocol):
    """Capability implemented by every supported declared-shape kind."""

    @property
    def validates(self) -> bool: ...

    def extract_leaf_paths(self) -> tuple[SchemaPath, ...]: ...

    def validate(self, value: dict[str, Any]) -> Any: ...

    def identity(self) -> str: ...


@dataclass(frozen=True, slots=True)
class PydanticV2Shape:
    model: type[Any]

    @property
    def validates(self) -> bool:
        return True

    def extract_leaf_paths(self) -> tuple[SchemaPath, ...]:
        return tuple(_collect(self.model, (), frozenset()))

    def validate(self, value: dict[str, Any]) -> Any:
        return self.model.model_validate(value)

    def identity(self) -> str:
        return _model_identity(self.model)


@dataclass(frozen=True, slots=True)
class PydanticV1Shape:
    model: type[Any]

    @property
    def validates(self) -> bool:
        return True

    def extract_leaf_paths(self) -> tuple[SchemaPath, ...]:
        return tuple(_collect(self.model, (), frozenset()))

    def validate(self, value: dict[str, Any]) -> Any:
        return self.model.parse_obj(value)

    def identity(self) -> str:
        return _model_identity(self.model)


@dataclass(frozen=True, slots=True)
class PlainHintShape:
    hint: Mapping[str, Any]

    @property
    def validates(self) -> bool:
        return False

    def extract_leaf_paths(self) -> tuple[SchemaPath, ...]:
        return tuple(_collect(self.hint, (), frozenset()))

    def validate(self, value: dict[str, Any]) -> Any:
        return value

    def identity(self) -> str:
        return json.dumps(
            self.hint, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=repr
        )


def introspect_shape(shape: object) -> ShapeIntrospector:
    """Return the introspector variant matching ``shape``."""

    if isinstance(shape, ShapeIntrospector):
        return shape
    model = _model_class(shape)
    if model is not None:
        if _is_pydantic_v2_model(model):
            return PydanticV2Shape(model)
        return PydanticV1Shape(model)
    if isinstance(shape, Mapping):
        return PlainHintShape(shape)
    raise TypeError(
        "schema must be a pydantic model class or a mapping of field hints, "
        f"got {type(shape).__name__}"
    )


def extract_schema_paths(shape: object) -> tuple[SchemaPath, ...]:
    """Leaf paths of ``shape`` in declaration order."""

    return introspect_shape(shape).extract_leaf_paths()


def unwrap_annotation(annotation: Any) -> Any:
    """Strip ``Annotated[...]`` and single-member ``Optional`` / ``X | None`` wrappers."""

    current = annotation
    while True:
        origin = get_origin(current)
        if origin is Annotated:
            current = get_args(current)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = get_args(current)
            non_null = [member for member in members if member is not _NONE_TYPE]
            if len(non_null) == 1 and len(non_null) < len(members):
                current = non_null[0]
                continue
        return current


def _collect(
    shape: object, prefix: tuple[str, ...], chain: frozenset[int]
) -> list[SchemaPath]:
    model = _model_class(shape)
    if model is not None:
        if id(model) in chain:
            return []
        return _collect_fields(_iter_model_fields(model), prefix, chain | {id(model)})
    if isinstance(shape, Mapping):
        return _collect_fields(_iter_hint_fields(shape), prefix, chain)
    return []


def _collect_fields(
    fields: list[tuple[str, object]],
    prefix: tuple[str, ...],
    chain: frozenset[int],
) -> list[SchemaPath]:
    paths: list[SchemaPath] = []
    for label, child in fields:
        path = (*prefix, label)
        nested = _collect(child, path, chain)
        if nested:
            paths.extend(nested)
        else:
            paths.append(_schema_path(path))
    return paths


def _iter_model_fields(model: type[Any]) -> list[tuple[str, object]]:
    fields: list[tuple[str, object]] = []
    if _is_pydantic_v2_model(model):
        for name, info in model.model_fields.items():
            label = getattr(info, "alias", None) or name
            fields.append((label, unwrap_annotation(getattr(info, "annotation", None))))
        return fields
    for name, info in model.__fields__.items():
        label = getattr(info, "alias", None) or name
        annotation = getattr(info, "outer_type_", None) or getattr(info, "type_", None)
        fields.append((label, unwrap_annotation(annotation)))
    return fields


def _iter_hint_fields(hint: Mapping[Any, Any]) -> list[tuple[str, object]]:
    fields: list[tuple[str, object]] = []
    for key, value in hint.items():
        if not isinstance(key, str) or key.startswith(HINT_SKIPPED_KEY_PREFIXES):
            continue
        if callable(value) and _model_class(value) is None:
            continue
        fields.append((key, value))
    return fields


def _schema_path(path: tuple[str, ...]) -> SchemaPath:
    return SchemaPath(
        path=path, path_key=".".join(field_name_to_camel_case(part) for part in path)
    )


def _model_class(shape: object) -> type[Any] | None:
    candidate = shape if isinstance(shape, type) else None
    if candidate is None:
        return None
    if _is_pydantic_v2_model(candidate) or _is_pydantic_v1_model(candidate):
        return candidate
    return None


def _is_pydantic_v2_model(model: type[Any]) -> bool:
    return isinstance(getattr(model, "model_fields", None), Mapping) and callable(
        getattr(model, "model_validate", None)
    )


def _is_pydantic_v1_model(model: type[Any]) -> bool:
    return isinstance(getattr(model, "__fields__", None), Mapping) and callable(
        getattr(model, "parse_obj", None)
    )


def _model_identity(model: type[Any]) -> str:
    # Same-named classes from one factory are distinct schemas.
    return f"{model.__module__}.{model.__qualname__}#{id(model)}"


__all__ = [
    "PlainHintShape",
    "PydanticV1Shape",
    "PydanticV2Shape",
    "ShapeIntrospector",
    "extract_schema_paths",
    "introspect_shape",
    "unwrap_annotation",
]

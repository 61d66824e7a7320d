"""Bidirectional transformation engine: env source <-> nested config object."""

from objectenvy.core.coercion import coerce_scalar, coerce_value
from objectenvy.core.keys import (
    segment_to_camel_case,
    should_include_field,
    split_key,
    strip_prefix,
    to_screaming_snake_case,
)
from objectenvy.core.loader import Loader, create_loader, options_fingerprint
from objectenvy.core.merge import ArrayMergeStrategy, MergeOptions, combine_arrays, merge, override
from objectenvy.core.nesting import build_config
from objectenvy.core.objectify import objectify, objectify_environ
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.resolver import (
    build_config_with_schema,
    find_matching_schema_path,
    generate_path_interpretations,
)
from objectenvy.core.reverse import envy
from objectenvy.core.shapes import (
    PlainHintShape,
    PydanticV1Shape,
    PydanticV2Shape,
    ShapeIntrospector,
    extract_schema_paths,
    introspect_shape,
)
from objectenvy.core.types import (
    ConfigObject,
    ConfigValue,
    EnvSource,
    FlatEnv,
    ParsedEntry,
    SchemaPath,
)

__all__ = [
    "ArrayMergeStrategy",
    "ConfigObject",
    "ConfigValue",
    "EnvSource",
    "FlatEnv",
    "Loader",
    "MergeOptions",
    "ObjectifyOptions",
    "ParsedEntry",
    "PlainHintShape",
    "PydanticV1Shape",
    "PydanticV2Shape",
    "SchemaPath",
    "ShapeIntrospector",
    "build_config",
    "build_config_with_schema",
    "coerce_scalar",
    "coerce_value",
    "combine_arrays",
    "create_loader",
    "envy",
    "extract_schema_paths",
    "find_matching_schema_path",
    "generate_path_interpretations",
    "introspect_shape",
    "merge",
    "objectify",
    "objectify_environ",
    "options_fingerprint",
    "override",
    "segment_to_camel_case",
    "should_include_field",
    "split_key",
    "strip_prefix",
    "to_screaming_snake_case",
]

"""Forward transform entry points."""

from __future__ import annotations

import os
from typing import Any

from objectenvy.core.nesting import build_config
from objectenvy.core.options import ObjectifyOptions
from objectenvy.core.resolver import resolve_with_schema
from objectenvy.core.types import EnvSource


def objectify(
    env: EnvSource,
    options: ObjectifyOptions | None = None,
    **option_fields: Any,
) -> Any:
    """Build a nested config object from ``env``.

    With ``schema`` set, nesting follows the declared leaf paths and a
    validating schema parses the result (its errors propagate unchanged).
    Without a schema, sibling frequency decides nest-vs-flatten.

    ``option_fields`` are applied on top of ``options``, e.g.
    ``objectify(env, prefix="APP", delimiter="__")``.
    """

    resolved = (options if options is not None else ObjectifyOptions()).with_overrides(
        option_fields
    )
    if resolved.schema is not None:
        return resolve_with_schema(env, resolved.schema, resolved)
    return build_config(env, resolved)


def objectify_environ(options: ObjectifyOptions | None = None, **option_fields: Any) -> Any:
    """:func:`objectify` over the current process environment."""

    return objectify(os.environ, options, **option_fields)


__all__ = ["objectify", "objectify_environ"]

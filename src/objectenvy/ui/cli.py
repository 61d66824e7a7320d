"""Command-line interface router for objectenvy."""

from __future__ import annotations

import argparse
import importlib
import json
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from objectenvy.config import (
    ConfigLoadError,
    ConfigValidationError,
    load_settings,
    merge_options_from_settings,
    objectify_options_from_settings,
)
from objectenvy.core.merge import ArrayMergeStrategy, MergeOptions, merge, override
from objectenvy.core.objectify import objectify
from objectenvy.core.reverse import envy
from objectenvy.errors import ObjectEnvyError
from objectenvy.observability import LoggingConfig, configure_logging, redact_mapping
from objectenvy.ui.envfile import (
    format_env_content,
    load_document,
    prefix_entries,
    read_env_file,
    write_env_file,
)
from objectenvy.utils.fs import atomic_write

_logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="objectenvy",
        description=(
            "objectenvy — flat environment variables <-> nested config objects.\n\n"
            "Common workflows:\n"
            "  objectenvy objectify --env-file .env          Nest a .env file as JSON\n"
            "  objectenvy envy config.yaml --prefix APP      Flatten a config to .env text\n"
            "  objectenvy merge base.json local.json         Deep-merge two configs\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to settings TOML (default: ./objectenvy.toml if present).",
    )
    common.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG).",
    )
    common.add_argument(
        "--log-json",
        action="store_true",
        default=False,
        help="Emit logs on stderr as JSON lines.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # objectify -------------------------------------------------------------
    objectify_parser = subparsers.add_parser(
        "objectify",
        parents=[common],
        help="Build a nested config object from environment variables",
        description=(
            "Read a .env file (or the process environment) and print the nested\n"
            "config object as JSON.\n\n"
            "Examples:\n"
            "  objectenvy objectify --env-file .env --prefix APP\n"
            "  objectenvy objectify --schema shape.json --no-coerce\n"
            "  objectenvy objectify --schema myapp.settings:AppConfig\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    objectify_parser.add_argument(
        "--env-file", default=None, help="Path to a .env file (default: process environment)"
    )
    objectify_parser.add_argument(
        "--schema",
        default=None,
        help="Shape document (.json/.yaml/.toml) or a 'module:Model' pydantic class",
    )
    objectify_parser.add_argument("--prefix", default=None, help="Only read keys with PREFIX_")
    objectify_parser.add_argument("--delimiter", default=None, help="Key segment delimiter")
    objectify_parser.add_argument(
        "--no-coerce",
        dest="coerce",
        action="store_const",
        const=False,
        default=None,
        help="Keep every value as a string",
    )
    objectify_parser.add_argument(
        "--include",
        action="append",
        default=None,
        help="Keep only keys containing this text (repeatable)",
    )
    objectify_parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Drop keys containing this text (repeatable)",
    )
    objectify_parser.add_argument(
        "--non-nesting",
        dest="non_nesting_prefixes",
        action="append",
        default=None,
        help="First segment that never nests (repeatable; replaces the defaults)",
    )
    objectify_parser.set_defaults(handler=_cmd_objectify)

    # envy ------------------------------------------------------------------
    envy_parser = subparsers.add_parser(
        "envy",
        parents=[common],
        help="Flatten a config document into .env text",
        description=(
            "Flatten a JSON/YAML/TOML config document into SCREAMING_SNAKE_CASE\n"
            "environment variables.\n\n"
            "Examples:\n"
            "  objectenvy envy config.yaml\n"
            "  objectenvy envy config.json --prefix APP --output .env\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    envy_parser.add_argument("config_document", help="Path to the config document")
    envy_parser.add_argument("--prefix", default=None, help="Prepend PREFIX_ to every key")
    envy_parser.add_argument("--output", default=None, help="Write a .env file instead of stdout")
    envy_parser.set_defaults(handler=_cmd_envy)

    # merge -----------------------------------------------------------------
    merge_parser = subparsers.add_parser(
        "merge",
        parents=[common],
        help="Deep-merge two config documents",
        description=(
            "Deep-merge SECOND onto FIRST and print the result as JSON. With\n"
            "--override, FIRST is treated as defaults underneath SECOND.\n\n"
            "Examples:\n"
            "  objectenvy merge base.json local.yaml\n"
            "  objectenvy merge defaults.toml app.json --override --strategy concat-unique\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    merge_parser.add_argument("first", help="Base (or defaults) document")
    merge_parser.add_argument("second", help="Document applied on top")
    merge_parser.add_argument(
        "--strategy",
        dest="array_merge_strategy",
        choices=[item.value for item in ArrayMergeStrategy],
        default=None,
        help="How colliding arrays are combined",
    )
    merge_parser.add_argument(
        "--override",
        action="store_true",
        default=False,
        help="Fill keys missing from SECOND with FIRST's values",
    )
    merge_parser.add_argument("--output", default=None, help="Write JSON to a file")
    merge_parser.set_defaults(handler=_cmd_merge)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        settings = _load_effective_settings(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code

    logging_handle = configure_logging(
        LoggingConfig(level=settings["log_level"], json_lines=_flag(namespace, "log_json"))
    )
    try:
        result = handler(namespace, settings)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    finally:
        logging_handle.shutdown()
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_objectify(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    env_file = _optional_str(getattr(args, "env_file", None))
    schema = _load_schema(_optional_str(getattr(args, "schema", None)))

    try:
        source = read_env_file(env_file) if env_file is not None else os.environ
        options = objectify_options_from_settings(settings, schema=schema)
        _logger.info(
            "cli_objectify",
            source=env_file or "<environ>",
            entries=len(source),
            prefix=options.prefix,
            schema=type(schema).__name__ if schema is not None else None,
        )
        _logger.debug("cli_objectify_source", values=redact_mapping(source))
        result = objectify(source, options)
    except ValidationError as exc:
        raise CLIError(f"schema validation failed:\n{exc}", exit_code=1) from exc
    except (ConfigLoadError, ObjectEnvyError, TypeError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    if isinstance(result, BaseModel):
        payload: object = result.model_dump(mode="json", by_alias=True)
    else:
        payload = result
    _emit_json(payload)
    return 0


def _cmd_envy(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    document_path = _require_str(getattr(args, "config_document", None), "config_document")
    prefix: str | None = settings["prefix"]
    output = _optional_str(getattr(args, "output", None))

    try:
        document = load_document(document_path)
        entries = prefix_entries(envy(document), prefix)
        _logger.info("cli_envy", document=document_path, entries=len(entries), prefix=prefix)
        if output is not None:
            written = write_env_file(output, entries)
            _logger.info("cli_envy_written", path=str(written))
            return 0
    except (ConfigLoadError, TypeError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    content = format_env_content(entries)
    if content:
        print(content)
    return 0


def _cmd_merge(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    first_path = _require_str(getattr(args, "first", None), "first")
    second_path = _require_str(getattr(args, "second", None), "second")
    output = _optional_str(getattr(args, "output", None))
    options: MergeOptions = merge_options_from_settings(settings)

    try:
        first = load_document(first_path)
        second = load_document(second_path)
    except ConfigLoadError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    combined = override(first, second, options) if _flag(args, "override") else merge(
        first, second, options
    )
    _logger.info(
        "cli_merge",
        first=first_path,
        second=second_path,
        strategy=options.array_merge_strategy.value,
        override=_flag(args, "override"),
    )
    if output is not None:
        try:
            Path(output).parent.mkdir(parents=True, exist_ok=True)
            atomic_write(output, _render_json(combined) + "\n")
        except OSError as exc:
            raise CLIError(f"unable to write {output}: {exc}", exit_code=2) from exc
        return 0
    _emit_json(combined)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_settings(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))
    cli_overrides: dict[str, object] = {
        "prefix": getattr(args, "prefix", None),
        "delimiter": getattr(args, "delimiter", None),
        "coerce": getattr(args, "coerce", None),
        "include": getattr(args, "include", None),
        "exclude": getattr(args, "exclude", None),
        "non_nesting_prefixes": getattr(args, "non_nesting_prefixes", None),
        "array_merge_strategy": getattr(args, "array_merge_strategy", None),
        "log_level": getattr(args, "log_level", None),
    }
    try:
        return load_settings(config_path, cli_overrides=cli_overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _load_schema(reference: str | None) -> object | None:
    if reference is None:
        return None
    candidate = Path(reference).expanduser()
    if candidate.suffix.lower() in {".json", ".yaml", ".yml", ".toml"} or candidate.exists():
        try:
            return load_document(candidate)
        except ConfigLoadError as exc:
            raise CLIError(str(exc), exit_code=2) from exc

    module_name, separator, attribute = reference.partition(":")
    if not separator or not module_name or not attribute:
        raise CLIError(
            f"invalid schema {reference!r}: expected a document path or 'module:Model'",
            exit_code=2,
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise CLIError(
            f"unable to import schema module {module_name!r}: {exc}", exit_code=2
        ) from exc
    target: object = module
    for part in attribute.split("."):
        if not hasattr(target, part):
            raise CLIError(f"schema {reference!r} not found", exit_code=2)
        target = getattr(target, part)
    return target


def _render_json(payload: object) -> str:
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def _emit_json(payload: object) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(_render_json(payload))


def _require_str(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise CLIError(f"invalid {name}: expected string", exit_code=2)
    cleaned = value.strip()
    if not cleaned:
        raise CLIError(f"invalid {name}: value cannot be empty", exit_code=2)
    return cleaned


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CLIError("invalid optional string argument", exit_code=2)
    cleaned = value.strip()
    return cleaned or None


def _flag(args: argparse.Namespace, name: str) -> bool:
    value = getattr(args, name, False)
    return bool(value)


__all__ = ["CLIError", "build_parser", "main", "run_cli"]

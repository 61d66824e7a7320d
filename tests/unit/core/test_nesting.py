"""
objectenvy — unit tests for the heuristic nesting builder

File: tests/unit/core/test_nesting.py

Purpose
- Validate the two-pass nest-vs-flatten decision without a schema.

What this test file should cover
- Sibling frequency nesting, lone keys, and non-nesting prefixes.
- Prefix stripping, include/exclude filters, custom delimiters, coercion toggle.
- Absent (``None``) values and keys that reduce to no segments.

Functional requirements
- Offline only; never reads the process environment.
"""

from __future__ import annotations

import pytest

from objectenvy.core.entries import parse_entries
from objectenvy.core.nesting import build_config, count_first_segments, should_nest
from objectenvy.core.options import ObjectifyOptions
from objectenvy.errors import InvalidOptionsError


def test_lone_first_segment_flattens_to_camel_case() -> None:
    assert build_config({"PORT_NUMBER": "8080"}) == {"portNumber": 8080}


def test_shared_first_segment_nests() -> None:
    env = {"LOG_LEVEL": "debug", "LOG_PATH": "/var/log/app.log", "PORT": "3000"}
    assert build_config(env) == {
        "log": {"level": "debug", "path": "/var/log/app.log"},
        "port": 3000,
    }


def test_non_nesting_prefixes_stay_flat() -> None:
    env = {"MAX_CONNECTIONS": "100", "MAX_TIMEOUT": "30", "IS_ENABLED": "yes", "IS_DEBUG": "n"}
    assert build_config(env) == {
        "maxConnections": 100,
        "maxTimeout": 30,
        "isEnabled": True,
        "isDebug": False,
    }


def test_custom_non_nesting_prefixes_replace_defaults() -> None:
    env = {"MAX_A": "1", "MAX_B": "2", "FEATURE_X": "on", "FEATURE_Y": "off"}
    options = ObjectifyOptions(non_nesting_prefixes=("feature",))
    assert build_config(env, options) == {
        "max": {"a": 1, "b": 2},
        "featureX": "on",
        "featureY": "off",
    }


def test_later_sibling_replaces_a_scalar_leaf_with_a_branch() -> None:
    env = {"DB_HOST": "localhost", "DB": "bare", "DB_PORT": "5432"}
    assert build_config(env) == {"db": {"port": 5432}}


def test_deeper_paths_nest_on_every_segment() -> None:
    env = {"DATABASE_PRIMARY_HOST": "a", "DATABASE_REPLICA_HOST": "b"}
    assert build_config(env) == {
        "database": {"primary": {"host": "a"}, "replica": {"host": "b"}},
    }


def test_first_segment_counting_is_case_insensitive() -> None:
    env = {"Db_Host": "a", "DB_PORT": "1"}
    assert build_config(env) == {"db": {"host": "a", "port": 1}}


def test_prefix_filters_and_strips_keys() -> None:
    env = {"APP_PORT": "3000", "APP_LOG_LEVEL": "info", "APP_LOG_FILE": "x.log", "HOME": "/root"}
    assert build_config(env, ObjectifyOptions(prefix="APP")) == {
        "port": 3000,
        "log": {"level": "info", "file": "x.log"},
    }


def test_include_filter_is_applied_before_counting() -> None:
    env = {
        "DATABASE_HOST": "localhost",
        "DATABASE_PORT": "5432",
        "API_KEY": "secret",
        "PORT": "3000",
    }
    options = ObjectifyOptions(include=("database",))
    assert build_config(env, options) == {"database": {"host": "localhost", "port": 5432}}


def test_include_and_exclude_combine() -> None:
    env = {
        "DATABASE_HOST": "localhost",
        "DATABASE_PASSWORD": "secret",
        "API_KEY": "key",
        "PORT": "3000",
    }
    options = ObjectifyOptions(include=("database",), exclude=("password",))
    assert build_config(env, options) == {"databaseHost": "localhost"}


def test_filters_are_case_insensitive() -> None:
    env = {"DATABASE_HOST": "localhost", "API_KEY": "key"}
    options = ObjectifyOptions(include=("DaTaBaSe",))
    assert build_config(env, options) == {"databaseHost": "localhost"}


def test_custom_delimiter_keeps_inner_underscores_in_labels() -> None:
    env = {
        "DATABASE__CONNECTION_STRING": "postgres://db",
        "DATABASE__MAX_POOL": "10",
        "LOG_LEVEL": "warn",
    }
    options = ObjectifyOptions(delimiter="__")
    assert build_config(env, options) == {
        "database": {"connectionString": "postgres://db", "maxPool": 10},
        "logLevel": "warn",
    }


def test_coerce_false_keeps_raw_strings() -> None:
    env = {"HOSTS": "host1,host2,host3", "PORT": "8080", "DEBUG": "true"}
    assert build_config(env, ObjectifyOptions(coerce=False)) == {
        "hosts": "host1,host2,host3",
        "port": "8080",
        "debug": "true",
    }


def test_none_values_are_absent() -> None:
    env = {"LOG_LEVEL": "debug", "LOG_PATH": None, "PORT": None}
    assert build_config(env) == {"logLevel": "debug"}


def test_keys_without_segments_are_skipped() -> None:
    assert build_config({"___": "x", "APP_": "y"}, ObjectifyOptions(prefix="APP")) == {}


def test_empty_source_builds_empty_object() -> None:
    assert build_config({}) == {}


def test_non_mapping_source_is_rejected() -> None:
    with pytest.raises(TypeError):
        build_config([("PORT", "1")])  # type: ignore[arg-type]


def test_empty_delimiter_is_rejected() -> None:
    with pytest.raises(InvalidOptionsError):
        ObjectifyOptions(delimiter="")


def test_result_never_aliases_source_values() -> None:
    env = {"TAGS": "a,b"}
    first = build_config(env)
    second = build_config(env)
    assert first == second
    assert first["tags"] is not second["tags"]


def test_count_first_segments_and_should_nest() -> None:
    entries = parse_entries(
        {"LOG_LEVEL": "a", "LOG_PATH": "b", "MAX_A": "1", "MAX_B": "2", "PORT": "1"},
        ObjectifyOptions(),
    )
    counts = count_first_segments(entries)
    assert counts == {"log": 2, "max": 2, "port": 1}
    assert should_nest("log", counts, ("max",))
    assert not should_nest("max", counts, ("max",))
    assert not should_nest("port", counts, ())

"""
objectenvy — unit tests for the memoized loader factory

File: tests/unit/core/test_memoized_loader.py

Purpose
- Validate default/override option layering and identity-keyed memoization.

What this test file should cover
- Cache hits return the identical object; distinct sources and distinct
  effective options miss.
- Fingerprints cover filters and non-nesting prefixes.
- Process environment fallback, explicit release, and thread safety.

Functional requirements
- Offline only; process environment touched only through ``monkeypatch``.
"""

from __future__ import annotations

import threading

import pytest
from pydantic import BaseModel
from structlog.testing import capture_logs

from objectenvy.core.loader import Loader, create_loader, options_fingerprint
from objectenvy.core.options import ObjectifyOptions
from objectenvy.errors import InvalidOptionsError


def test_loader_applies_factory_defaults() -> None:
    load = create_loader(prefix="APP")
    env = {"APP_PORT": "3000", "OTHER": "x"}
    assert load(env=env) == {"port": 3000}
    assert load.defaults.prefix == "APP"


def test_loader_overrides_apply_on_top_of_defaults() -> None:
    load = create_loader(prefix="APP", coerce=True)
    env = {"APP_PORT": "3000"}
    assert load(env=env, coerce=False) == {"port": "3000"}


def test_cache_hit_returns_identical_object() -> None:
    load = create_loader()
    env = {"LOG_LEVEL": "debug", "LOG_PATH": "/tmp"}
    first = load(env=env)
    second = load(env=env)
    assert first is second
    assert load.registered_sources == 1


def test_structurally_equal_sources_are_cached_independently() -> None:
    load = create_loader()
    first = load(env={"PORT": "1"})
    second = load(env={"PORT": "1"})
    assert first == second
    assert first is not second
    assert load.registered_sources == 2


def test_distinct_options_miss_the_cache() -> None:
    load = create_loader()
    env = {"DATABASE_HOST": "h", "DATABASE_PORT": "1", "API_KEY": "k"}
    everything = load(env=env)
    only_database = load(env=env, include=["database"])
    assert everything is not only_database
    assert only_database == {"database": {"host": "h", "port": 1}}
    assert load(env=env, include=["database"]) is only_database


def test_fingerprint_covers_filters_and_non_nesting_prefixes() -> None:
    base = options_fingerprint(ObjectifyOptions())
    assert options_fingerprint(ObjectifyOptions()) == base
    assert options_fingerprint(ObjectifyOptions(include=("a",))) != base
    assert options_fingerprint(ObjectifyOptions(exclude=("a",))) != base
    assert options_fingerprint(ObjectifyOptions(non_nesting_prefixes=("max",))) != base
    assert options_fingerprint(ObjectifyOptions(schema={"port": 0})) != base


def test_fingerprint_ignores_filter_order() -> None:
    first = options_fingerprint(ObjectifyOptions(include=("a", "b")))
    second = options_fingerprint(ObjectifyOptions(include=("b", "a")))
    assert first == second


def test_loader_with_schema_caches_validated_result() -> None:
    load = create_loader(schema={"features": [""]}, prefix="APP")
    env = {"APP_FEATURES": "alpha,beta"}
    assert load(env=env) == {"features": ["alpha", "beta"]}
    assert load(env=env) is load(env=env)


def _service_model(port_type: type) -> type[BaseModel]:
    class ServiceConfig(BaseModel):
        port: port_type  # type: ignore[valid-type]

    return ServiceConfig


def test_same_named_schema_classes_are_cached_separately() -> None:
    int_model = _service_model(int)
    str_model = _service_model(str)
    load = create_loader(prefix="APP", coerce=False)
    env = {"APP_PORT": "8080"}

    first = load(env=env, schema=int_model)
    second = load(env=env, schema=str_model)

    assert first is not second
    assert isinstance(first, int_model)
    assert isinstance(second, str_model)
    assert first.port == 8080
    assert second.port == "8080"
    assert options_fingerprint(ObjectifyOptions(schema=int_model)) != options_fingerprint(
        ObjectifyOptions(schema=str_model)
    )


def test_loader_falls_back_to_factory_env_then_process_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    bound = create_loader(env={"PORT": "1"})
    assert bound() == {"port": 1}

    monkeypatch.setenv("OBJECTENVY_TEST_LOADER_PORT", "4242")
    unbound = create_loader(prefix="OBJECTENVY_TEST_LOADER")
    assert unbound() == {"port": 4242}


def test_clear_releases_registrations() -> None:
    load = create_loader()
    env = {"PORT": "1"}
    first = load(env=env)
    load.clear()
    assert load.registered_sources == 0
    assert load(env=env) is not first


def test_unknown_override_fields_are_rejected() -> None:
    load = create_loader()
    with pytest.raises(InvalidOptionsError, match="unknown option"):
        load(env={}, prefixx="APP")
    with pytest.raises(InvalidOptionsError):
        create_loader(colour="blue")


def test_loader_envy_is_the_reverse_transform() -> None:
    load = create_loader()
    assert load.envy({"log": {"level": "debug"}}) == {"LOG_LEVEL": "debug"}


def test_loader_logs_cache_hits_and_misses() -> None:
    load = Loader()
    env = {"PORT": "1"}
    with capture_logs() as logs:
        load(env=env)
        load(env=env)
    events = [entry["event"] for entry in logs if entry["event"].startswith("loader_")]
    assert events == ["loader_cache_miss", "loader_cache_hit"]


def test_concurrent_calls_share_one_registration() -> None:
    load = create_loader()
    env = {f"KEY_{index}": str(index) for index in range(50)}
    results: list[object] = []
    lock = threading.Lock()

    def worker() -> None:
        value = load(env=env)
        with lock:
            results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(item == results[0] for item in results)
    assert load.registered_sources == 1
    assert load(env=env) is load(env=env)

"""Regression tests for atomic writes and deterministic hashing helpers."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from objectenvy.utils import atomic_write, canonical_json, sha256_json, sha256_text


def test_atomic_write_replaces_content_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / ".env"
    target.write_text("OLD=1\n", encoding="utf-8")

    atomic_write(target, "NEW=2\r\nNEXT=3\n")

    assert target.read_bytes() == b"NEW=2\r\nNEXT=3\n"
    assert sorted(path.name for path in tmp_path.iterdir()) == [".env"]


def test_atomic_write_requires_existing_parent(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        atomic_write(tmp_path / "missing" / "out.json", "{}")


def test_atomic_write_cleans_temp_file_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(src: object, dst: object) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", _fail)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write(tmp_path / "out.json", "{}")
    assert list(tmp_path.iterdir()) == []


def test_canonical_json_is_key_order_independent() -> None:
    first = {"b": [1, 2], "a": {"y": "ü", "x": None}}
    second = {"a": {"x": None, "y": "ü"}, "b": [1, 2]}

    assert canonical_json(first) == '{"a":{"x":null,"y":"ü"},"b":[1,2]}'
    assert sha256_json(first) == sha256_json(second)


def test_sha256_text_known_vector() -> None:
    assert sha256_text("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

"""
objectenvy — unit tests for env-file and document I/O

File: tests/unit/ui/test_envfile.py

Purpose
- Validate ``.env`` rendering/quoting, python-dotenv backed parsing, prefixing,
  and JSON/YAML/TOML document loading.

Functional requirements
- Offline; all files live under ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from objectenvy.config.loader import ConfigLoadError
from objectenvy.ui.envfile import (
    format_env_content,
    format_env_line,
    load_document,
    needs_quoting,
    prefix_entries,
    read_env_file,
    write_env_file,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", False),
        ("/var/log/app.log", False),
        ("a,b,c", False),
        ("", True),
        ("has space", True),
        ('say "hi"', True),
        ("it's", True),
        ("$HOME", True),
        ("`cmd`", True),
        ("back\\slash", True),
        ("tab\there", True),
    ],
)
def test_needs_quoting(value: str, expected: bool) -> None:
    assert needs_quoting(value) is expected


def test_format_env_line_escapes_quotes_and_newlines() -> None:
    assert format_env_line("PORT", "8080") == "PORT=8080"
    assert format_env_line("EMPTY", "") == 'EMPTY=""'
    assert format_env_line("GREETING", 'say "hi"') == 'GREETING="say \\"hi\\""'
    assert format_env_line("BODY", "one\ntwo\r") == 'BODY="one\\ntwo\\r"'


def test_format_env_content_places_comments_and_trims_trailing_blank_lines() -> None:
    entries = {"PORT": "8080", "LOG_LEVEL": "debug", "DEBUG": "true"}
    comments = {"LOG_LEVEL": "verbosity", "DEBUG": "developer mode"}

    assert format_env_content(entries, comments=comments) == "\n".join(
        [
            "PORT=8080",
            "# verbosity",
            "LOG_LEVEL=debug",
            "",
            "# developer mode",
            "DEBUG=true",
        ]
    )


def test_format_env_content_empty() -> None:
    assert format_env_content({}) == ""


def test_prefix_entries() -> None:
    entries = {"PORT": "1"}
    assert prefix_entries(entries, "APP") == {"APP_PORT": "1"}
    assert prefix_entries(entries, "APP_") == {"APP_PORT": "1"}
    assert prefix_entries(entries, None) == {"PORT": "1"}
    assert prefix_entries(entries, "") == {"PORT": "1"}


def test_write_then_read_env_file_preserves_values(tmp_path: Path) -> None:
    entries = {
        "PLAIN": "value",
        "SPACED": "has space",
        "QUOTED": 'say "hi"',
        "MULTILINE": "one\ntwo",
        "EMPTY": "",
        "DOLLAR": "$HOME/x",
    }
    target = write_env_file(tmp_path / "nested" / ".env", entries, comments={"PLAIN": "first"})

    assert target.read_text(encoding="utf-8").endswith("\n")
    assert read_env_file(target) == entries


def test_read_env_file_handles_export_comments_and_bare_keys(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "# comment\nexport APP_PORT=8080\nAPP_NAME='single quoted'\nAPP_BARE\n",
        encoding="utf-8",
    )
    assert read_env_file(env_path) == {
        "APP_PORT": "8080",
        "APP_NAME": "single quoted",
        "APP_BARE": None,
    }


def test_read_env_file_missing_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="env file not found"):
        read_env_file(tmp_path / "absent.env")


def test_load_document_supports_json_yaml_and_toml(tmp_path: Path) -> None:
    (tmp_path / "c.json").write_text('{"log": {"level": "debug"}}', encoding="utf-8")
    (tmp_path / "c.yaml").write_text("log:\n  level: debug\n", encoding="utf-8")
    (tmp_path / "c.toml").write_text('[log]\nlevel = "debug"\n', encoding="utf-8")

    expected = {"log": {"level": "debug"}}
    for name in ("c.json", "c.yaml", "c.toml"):
        assert load_document(tmp_path / name) == expected


def test_load_document_rejects_unsupported_suffix_before_existence(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="unsupported document type"):
        load_document(tmp_path / "config.ini")


def test_load_document_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="document not found"):
        load_document(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="invalid document"):
        load_document(broken)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="document root must be an object"):
        load_document(listing)

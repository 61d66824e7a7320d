"""Module entrypoint for ``python -m objectenvy``."""

from __future__ import annotations

from objectenvy.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())

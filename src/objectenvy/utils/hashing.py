"""
objectenvy — hashing utilities

File: src/objectenvy/utils/hashing.py

Purpose
- Provide deterministic SHA-256 helpers for bytes, text, and JSON-compatible
  payloads (memoized loader option fingerprints).

Non-functional requirements
- Standard library only; behavior is cross-platform deterministic.
"""

from __future__ import annotations

import hashlib
import json

__all__ = [
    "canonical_json",
    "sha256_bytes",
    "sha256_json",
    "sha256_text",
]


def sha256_bytes(data: bytes) -> str:
    """Return SHA-256 hex digest for raw bytes."""

    return hashlib.sha256(data).hexdigest()


def sha256_text(text: str, *, encoding: str = "utf-8") -> str:
    """Return SHA-256 hex digest for text encoded with ``encoding``."""

    return sha256_bytes(text.encode(encoding))


def canonical_json(payload: object) -> str:
    """Compact, key-sorted JSON used wherever output must be byte-stable."""

    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_json(payload: object) -> str:
    """Return SHA-256 hex digest of ``canonical_json(payload)``."""

    return sha256_text(canonical_json(payload))

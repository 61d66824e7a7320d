"""Utility exports for filesystem and hashing helpers."""

from objectenvy.utils.fs import atomic_write
from objectenvy.utils.hashing import canonical_json, sha256_bytes, sha256_json, sha256_text

__all__ = [
    "atomic_write",
    "canonical_json",
    "sha256_bytes",
    "sha256_json",
    "sha256_text",
]

"""
objectenvy — filesystem utilities

File: src/objectenvy/utils/fs.py

Purpose
- Write generated ``.env`` and JSON output files without leaving partial files
  behind.

Functional requirements
- Atomic writes use temp files in the destination directory and replace in a
  single step.

Non-functional requirements
- Standard library only and cross-platform behavior where feasible.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

PathLike = str | os.PathLike[str]

__all__ = ["PathLike", "atomic_write"]


def atomic_write(path: PathLike, data: str, *, encoding: str = "utf-8") -> None:
    """Write ``data`` to ``path`` through a same-directory temp file and ``os.replace``."""

    target = Path(path)
    target_parent = target.parent.resolve(strict=True)
    if not target_parent.is_dir():
        raise NotADirectoryError(f"{target_parent!s} is not a directory")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target_parent),
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as file_handle:
            file_handle.write(data)
            file_handle.flush()
            os.fsync(file_handle.fileno())
        os.replace(temp_path, target)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise

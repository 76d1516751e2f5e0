"""
draftkit.io - JSON/text helpers, atomic writes and media copies.

Documents and descriptor files are written through a temp file and
renamed into place.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, TextIO


def _atomic_write(path: Path, write: Callable[[TextIO], None]) -> None:
    """Write through a sibling temp file, then replace ``path``.

    The temp file is removed if ``write`` raises.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            write(tmp)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)


def read_json(path: Path) -> dict[str, Any]:
    """Read a UTF-8 JSON document.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: dict[str, Any], indent: int | None = 2) -> None:
    """Write JSON atomically, keeping non-ASCII text (CJK names) readable.

    Args:
        path: Destination path
        data: JSON-serializable mapping
        indent: Pretty-print indent, or None for the compact form the
            editor uses in its descriptor files
    """
    _atomic_write(path, lambda f: json.dump(data, f, indent=indent, ensure_ascii=False))


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, dropping a leading BOM if present."""
    with open(path, encoding="utf-8-sig") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    """Write a text file atomically."""
    _atomic_write(path, lambda f: f.write(content))


def copy_file(source: Path, destination: Path) -> Path:
    """Copy a media file, preserving timestamps.

    Copying a file onto itself is a no-op.

    Returns:
        The destination path
    """
    if source.resolve() == destination.resolve():
        return destination
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    return destination

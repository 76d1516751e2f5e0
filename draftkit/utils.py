"""
draftkit.utils - Shared utility functions.

Contains common functions used across multiple modules to avoid duplication.
"""

from __future__ import annotations

import re
from pathlib import Path

_DIGITS = re.compile(r"(\d+)")


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (HH:MM:SS if >= 1 hour, otherwise MM:SS)
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_size(path: Path) -> str:
    """Format file size in human-readable format."""
    if not path.exists():
        return "-"
    size = path.stat().st_size
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def natural_sort_key(name: str) -> tuple:
    """Sort key that orders embedded numbers numerically.

    ``scene_2.png`` sorts before ``scene_10.png``. Comparison is
    case-insensitive; the raw name breaks ties so ordering stays total.
    """
    parts = _DIGITS.split(name.lower())
    key = tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in parts)
    return key, name


def clean_path(path: str) -> str:
    """Strip control characters from a path, keeping tabs and newlines.

    Non-ASCII characters (e.g. CJK file names) are preserved.
    """
    return "".join(ch for ch in path if ord(ch) >= 32 or ch in "\t\n\r")

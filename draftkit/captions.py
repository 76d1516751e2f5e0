"""
draftkit.captions - SRT caption parsing.

Parses blank-line-delimited SRT blocks into time-stamped entries.
A malformed block is skipped; it never fails the rest of the file.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field

from draftkit.exceptions import CaptionError
from draftkit.io import read_text
from draftkit.logging import logger
from draftkit.timerange import TimeRange, parse_srt_timestamp

_BLOCK_SPLIT = re.compile(r"\n[ \t]*\n")
_ARROW = "-->"


class SrtEntry(BaseModel):
    """One caption. Times are in microseconds; lines are joined with ``\\n``."""

    sequence_number: int
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    text: str

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, duration=self.end - self.start)

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


def parse_timing_line(line: str) -> tuple[int, int]:
    """Parse ``start --> end`` into microseconds.

    Anything after the end timestamp (position cues) is ignored.

    Raises:
        ValueError: If the line is not a valid timing line
    """
    if _ARROW not in line:
        raise ValueError(f"Missing '{_ARROW}' in timing line: {line!r}")
    left, right = line.split(_ARROW, 1)
    right_parts = right.split()
    if not right_parts:
        raise ValueError(f"Missing end timestamp: {line!r}")
    start = parse_srt_timestamp(left)
    end = parse_srt_timestamp(right_parts[0])
    if end < start:
        raise ValueError(f"End precedes start: {line!r}")
    return start, end


def _parse_block(block: str) -> SrtEntry:
    lines = [line.strip() for line in block.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 3:
        raise ValueError("block needs an index, a timing line and text")

    try:
        sequence_number = int(lines[0])
    except ValueError as e:
        raise ValueError(f"invalid index {lines[0]!r}") from e

    start, end = parse_timing_line(lines[1])
    return SrtEntry(
        sequence_number=sequence_number,
        start=start,
        end=end,
        text="\n".join(lines[2:]),
    )


def parse_srt(content: str) -> list[SrtEntry]:
    """Parse SRT text into entries in file order.

    Args:
        content: Raw SRT text (LF or CRLF line endings)

    Returns:
        List of parsed entries; malformed blocks are omitted
    """
    normalized = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    entries = []
    skipped = 0
    for block in _BLOCK_SPLIT.split(normalized):
        if not block.strip():
            continue
        try:
            entries.append(_parse_block(block))
        except ValueError as e:
            skipped += 1
            logger.debug("Skipping malformed caption block: %s", e)

    if skipped:
        logger.debug("Parsed %d caption entries, skipped %d", len(entries), skipped)
    return entries


def parse_srt_file(path: Path) -> list[SrtEntry]:
    """Read and parse an SRT file.

    Raises:
        CaptionError: If the file cannot be read or decoded
    """
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise CaptionError(f"Cannot read caption file {path}: {e}") from e
    return parse_srt(content)

"""
draftkit.timerange - Microsecond time ranges and time math.

The editor stores every time value as an integer number of microseconds.
TimeRange is the (start, duration) pair used by segments; the helpers
below convert between seconds, SRT timestamps and microseconds.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

SEC = 1_000_000
"""Microseconds per second."""

_SRT_TIMESTAMP = re.compile(r"^\s*(\d{1,3}):(\d{1,2}):(\d{1,2})[,.](\d{1,3})\s*$")


class TimeRange(BaseModel):
    """A half-open ``[start, start + duration)`` span in microseconds."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0)

    @property
    def end(self) -> int:
        return self.start + self.duration

    def is_contiguous_with(self, other: TimeRange) -> bool:
        """True if ``other`` begins exactly where this range ends."""
        return self.end == other.start

    def overlaps(self, other: TimeRange) -> bool:
        return self.start < other.end and other.start < self.end

    def clamp(self, limit: int) -> TimeRange:
        """Restrict the range to ``[0, limit)``.

        A range starting at or beyond ``limit`` collapses to zero duration
        at ``limit``.
        """
        start = min(self.start, limit)
        end = min(self.end, limit)
        return TimeRange(start=start, duration=end - start)

    def extend_to(self, end: int) -> TimeRange:
        """Keep the start but make the range finish exactly at ``end``."""
        if end < self.start:
            raise ValueError(f"end {end} precedes start {self.start}")
        return TimeRange(start=self.start, duration=end - self.start)

    def divide(self, count: int) -> list[TimeRange]:
        """Split into ``count`` contiguous parts of equal length.

        Integer division leaves a remainder; the final part absorbs it so
        the parts tile this range exactly.
        """
        if count < 1:
            raise ValueError("count must be at least 1")
        step = self.duration // count
        parts = []
        for i in range(count):
            part = TimeRange(start=self.start + i * step, duration=step)
            if i == count - 1:
                part = part.extend_to(self.end)
            parts.append(part)
        return parts

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "duration": self.duration}


def partition(total: int, count: int) -> list[TimeRange]:
    """Partition ``[0, total)`` into ``count`` even, gap-free ranges."""
    return TimeRange(start=0, duration=total).divide(count)


def seconds_to_us(seconds: float) -> int:
    """Convert float seconds to integer microseconds."""
    return round(seconds * SEC)


def us_to_seconds(micros: int) -> float:
    """Convert integer microseconds to float seconds."""
    return micros / SEC


def parse_srt_timestamp(value: str) -> int:
    """Convert an SRT timestamp to microseconds.

    Args:
        value: Timestamp like ``00:01:02,345`` (a ``.`` separator is accepted)

    Returns:
        Time in microseconds

    Raises:
        ValueError: If the timestamp is malformed
    """
    match = _SRT_TIMESTAMP.match(value)
    if not match:
        raise ValueError(f"Invalid SRT timestamp: {value!r}")
    hours, minutes, seconds, millis = (int(g) for g in match.groups())
    if minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid SRT timestamp: {value!r}")
    return (((hours * 3600 + minutes * 60 + seconds) * 1000) + millis) * 1000


def format_srt_timestamp(micros: int) -> str:
    """Convert microseconds to an ``HH:MM:SS,mmm`` SRT timestamp."""
    total_ms = micros // 1000
    ms = total_ms % 1000
    total_seconds = total_ms // 1000
    ss = total_seconds % 60
    mm = (total_seconds // 60) % 60
    hh = total_seconds // 3600
    return f"{hh:02d}:{mm:02d}:{ss:02d},{ms:03d}"

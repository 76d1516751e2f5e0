"""
draftkit.probe - Media duration probing with ffprobe.

The narration length defines the project length, so it is always
probed. A failed probe is an error unless the caller supplies a
fallback estimate.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

from draftkit.exceptions import InvalidDurationError, ProbeError
from draftkit.logging import logger
from draftkit.timerange import seconds_to_us


def probe_media(path: Path) -> dict[str, Any]:
    """Run ffprobe on a media file and return its JSON report.

    Raises:
        ProbeError: If ffprobe is missing, fails, or prints invalid JSON
    """
    ffprobe = shutil.which("ffprobe")
    if not ffprobe:
        raise ProbeError("ffprobe not found in PATH")

    cmd = [
        ffprobe,
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        str(path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        raise ProbeError(f"ffprobe failed for {path}: {result.stderr.strip()}")

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(f"ffprobe returned invalid JSON for {path}") from e


def probe_audio_duration(path: Path) -> int:
    """Return the duration of an audio file in microseconds.

    Prefers the container duration and falls back to the first audio
    stream's duration.

    Raises:
        ProbeError: If no positive duration can be read
    """
    data = probe_media(path)

    candidates = [data.get("format", {}).get("duration")]
    for stream in data.get("streams", []):
        if stream.get("codec_type") == "audio":
            candidates.append(stream.get("duration"))
            break

    for raw in candidates:
        try:
            seconds = float(raw)
        except (TypeError, ValueError):
            continue
        if seconds > 0:
            return seconds_to_us(seconds)

    raise ProbeError(f"No usable duration reported for {path}")


def resolve_audio_duration(path: Path, fallback_seconds: float | None = None) -> tuple[int, bool]:
    """Probe the audio duration, using ``fallback_seconds`` if probing fails.

    Args:
        path: Audio file
        fallback_seconds: Caller-supplied estimate used only on probe failure

    Returns:
        (duration in microseconds, whether the fallback was used)

    Raises:
        ProbeError: If probing fails and no fallback was given
        InvalidDurationError: If the fallback is not positive
    """
    try:
        return probe_audio_duration(path), False
    except ProbeError as e:
        if fallback_seconds is None:
            raise
        if fallback_seconds <= 0:
            raise InvalidDurationError(f"Fallback duration must be positive, got {fallback_seconds}") from e
        logger.warning("%s; using fallback duration of %.3fs", e, fallback_seconds)
        return seconds_to_us(fallback_seconds), True

"""Tests for draftkit.probe module."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from draftkit.exceptions import InvalidDurationError, ProbeError
from draftkit.probe import probe_audio_duration, probe_media, resolve_audio_duration


def _completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="boom")


class TestProbeMedia:
    def test_missing_ffprobe(self) -> None:
        with patch("draftkit.probe.shutil.which", return_value=None):
            with pytest.raises(ProbeError, match="not found"):
                probe_media(Path("a.mp3"))

    def test_parses_json(self) -> None:
        report = {"format": {"duration": "1.0"}}
        with (
            patch("draftkit.probe.shutil.which", return_value="/usr/bin/ffprobe"),
            patch("draftkit.probe.subprocess.run", return_value=_completed(json.dumps(report))) as run,
        ):
            assert probe_media(Path("a.mp3")) == report
        assert run.call_args[0][0][0] == "/usr/bin/ffprobe"

    def test_nonzero_exit(self) -> None:
        with (
            patch("draftkit.probe.shutil.which", return_value="/usr/bin/ffprobe"),
            patch("draftkit.probe.subprocess.run", return_value=_completed("", returncode=1)),
        ):
            with pytest.raises(ProbeError, match="boom"):
                probe_media(Path("a.mp3"))

    def test_invalid_json(self) -> None:
        with (
            patch("draftkit.probe.shutil.which", return_value="/usr/bin/ffprobe"),
            patch("draftkit.probe.subprocess.run", return_value=_completed("not json")),
        ):
            with pytest.raises(ProbeError):
                probe_media(Path("a.mp3"))


class TestProbeAudioDuration:
    def test_format_duration(self) -> None:
        with patch("draftkit.probe.probe_media", return_value={"format": {"duration": "12.345678"}}):
            assert probe_audio_duration(Path("a.mp3")) == 12_345_678

    def test_stream_duration_fallback(self) -> None:
        report = {
            "format": {},
            "streams": [
                {"codec_type": "video", "duration": "99.0"},
                {"codec_type": "audio", "duration": "4.5"},
            ],
        }
        with patch("draftkit.probe.probe_media", return_value=report):
            assert probe_audio_duration(Path("a.mp3")) == 4_500_000

    def test_no_duration(self) -> None:
        with patch("draftkit.probe.probe_media", return_value={"format": {"duration": "N/A"}}):
            with pytest.raises(ProbeError):
                probe_audio_duration(Path("a.mp3"))

    def test_zero_duration(self) -> None:
        with patch("draftkit.probe.probe_media", return_value={"format": {"duration": "0.0"}}):
            with pytest.raises(ProbeError):
                probe_audio_duration(Path("a.mp3"))


class TestResolveAudioDuration:
    def test_probe_success(self, fake_probe: dict) -> None:
        assert resolve_audio_duration(Path("a.mp3"), fallback_seconds=30) == (9_000_000, False)

    def test_uses_fallback(self, failing_probe: None) -> None:
        assert resolve_audio_duration(Path("a.mp3"), fallback_seconds=30) == (30_000_000, True)

    def test_no_fallback_raises(self, failing_probe: None) -> None:
        with pytest.raises(ProbeError):
            resolve_audio_duration(Path("a.mp3"))

    def test_non_positive_fallback(self, failing_probe: None) -> None:
        with pytest.raises(InvalidDurationError):
            resolve_audio_duration(Path("a.mp3"), fallback_seconds=0)

"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_SRT = """1
00:00:01,000 --> 00:00:03,000
Line one
Line two

2
00:00:04,500 --> 00:00:06,000
Second caption

3
00:00:07,000 --> 00:00:08,250
Third caption
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's config file and draft store."""
    monkeypatch.delenv("DRAFTKIT_DRAFT_ROOTS", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_srt() -> str:
    return SAMPLE_SRT


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Create a chapter directory with narration, three scenes and captions."""
    chapter = tmp_path / "chapter"
    chapter.mkdir()
    (chapter / "narration.mp3").write_bytes(b"fake audio")
    (chapter / "scene_1.png").write_bytes(b"fake png 1")
    (chapter / "scene_10.png").write_bytes(b"fake png 10")
    (chapter / "scene_2.png").write_bytes(b"fake png 2")
    (chapter / "captions.srt").write_text(SAMPLE_SRT, encoding="utf-8")
    (chapter / "notes.txt").write_text("not media")
    return chapter


@pytest.fixture
def draft_root(tmp_path: Path) -> Path:
    """Create an empty editor draft store."""
    root = tmp_path / "drafts" / "com.lveditor.draft"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def fake_probe(monkeypatch: pytest.MonkeyPatch):
    """Make ffprobe report a 9 second narration."""
    report = {
        "format": {"duration": "9.000000"},
        "streams": [{"codec_type": "audio", "duration": "9.000000"}],
    }

    def probe(path: Path) -> dict:
        return report

    monkeypatch.setattr("draftkit.probe.probe_media", probe)
    return report


@pytest.fixture
def failing_probe(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every ffprobe call fail."""
    from draftkit.exceptions import ProbeError

    def probe(path: Path) -> dict:
        raise ProbeError("ffprobe not found in PATH")

    monkeypatch.setattr("draftkit.probe.probe_media", probe)

"""Tests for draftkit CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from draftkit.cli import app

runner = CliRunner()


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "draftkit" in result.output


class TestGenerateCommand:
    def test_generate_installs_draft(self, input_dir: Path, draft_root: Path, fake_probe: dict) -> None:
        result = runner.invoke(app, ["generate", str(input_dir), "--draft-root", str(draft_root)])
        assert result.exit_code == 0
        assert "Draft installed" in result.output
        (project_dir,) = list(draft_root.iterdir())
        assert (project_dir / "draft_info.json").exists()

    def test_generate_with_name(self, input_dir: Path, draft_root: Path, fake_probe: dict) -> None:
        for _ in range(2):
            result = runner.invoke(
                app, ["generate", str(input_dir), "-d", str(draft_root), "--name", "chapter-1"]
            )
            assert result.exit_code == 0
        assert [p.name for p in draft_root.iterdir()] == ["chapter-1"]

    def test_generate_rejects_parent_name(self, input_dir: Path, draft_root: Path, fake_probe: dict) -> None:
        result = runner.invoke(app, ["generate", str(input_dir), "-d", str(draft_root), "--name", ".."])
        assert result.exit_code == 1
        assert "Invalid project name" in result.output
        assert not (draft_root.parent / "draft_info.json").exists()

    def test_generate_missing_store(self, input_dir: Path, tmp_path: Path, fake_probe: dict) -> None:
        result = runner.invoke(app, ["generate", str(input_dir), "-d", str(tmp_path / "absent")])
        assert result.exit_code == 1
        assert "Nothing was written" in result.output

    def test_generate_missing_assets(self, tmp_path: Path, draft_root: Path, fake_probe: dict) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["generate", str(empty), "-d", str(draft_root)])
        assert result.exit_code == 1
        assert "No audio file" in result.output

    def test_generate_with_fallback_warns(self, input_dir: Path, draft_root: Path, failing_probe: None) -> None:
        result = runner.invoke(
            app,
            ["generate", str(input_dir), "-d", str(draft_root), "--fallback-duration", "12"],
        )
        assert result.exit_code == 0
        assert "warning" in result.output

    def test_generate_bad_config(self, input_dir: Path, draft_root: Path, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("canvas_profile: cinema\n")
        result = runner.invoke(app, ["generate", str(input_dir), "-d", str(draft_root), "-c", str(config)])
        assert result.exit_code == 1
        assert "Unknown profile" in result.output


class TestExportCommand:
    def test_export_writes_json(self, input_dir: Path, tmp_path: Path, fake_probe: dict) -> None:
        out = tmp_path / "out"
        result = runner.invoke(app, ["export", str(input_dir), "--output", str(out)])
        assert result.exit_code == 0
        (document_path,) = list(out.glob("*.json"))
        document = json.loads(document_path.read_text(encoding="utf-8"))
        assert document["duration"] == 9_000_000


class TestScanCommand:
    def test_scan_lists_assets(self, input_dir: Path) -> None:
        result = runner.invoke(app, ["scan", str(input_dir)])
        assert result.exit_code == 0
        assert "narration.mp3" in result.output
        assert "scene_10.png" in result.output

    def test_scan_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 1


class TestCaptionsCommand:
    def test_lists_captions(self, input_dir: Path) -> None:
        result = runner.invoke(app, ["captions", str(input_dir / "captions.srt")])
        assert result.exit_code == 0
        assert "Captions (3)" in result.output
        assert "00:00:04,500" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["captions", str(tmp_path / "missing.srt")])
        assert result.exit_code == 1


class TestDoctorCommand:
    def test_doctor_all_passed(self, input_dir: Path, draft_root: Path, monkeypatch) -> None:
        monkeypatch.setenv("DRAFTKIT_DRAFT_ROOTS", str(draft_root))
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            result = runner.invoke(app, ["doctor", str(input_dir)])
        assert result.exit_code == 0
        assert "All checks passed" in result.output
        assert "Disk space" in result.output

    def test_doctor_without_input(self, draft_root: Path, monkeypatch) -> None:
        monkeypatch.setenv("DRAFTKIT_DRAFT_ROOTS", str(draft_root))
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        assert "Disk space" in result.output
        assert "Input" not in result.output

    def test_doctor_invalid_input(self, tmp_path: Path, draft_root: Path, monkeypatch) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        monkeypatch.setenv("DRAFTKIT_DRAFT_ROOTS", str(draft_root))
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            result = runner.invoke(app, ["doctor", str(empty)])
        assert result.exit_code == 1
        assert "Invalid" in result.output
        assert "Disk space" not in result.output

    def test_doctor_missing_store(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("DRAFTKIT_DRAFT_ROOTS", str(tmp_path / "absent"))
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 1
        assert "Some checks failed" in result.output


class TestInitConfigCommand:
    def test_writes_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init-config", str(tmp_path), "--profile", "landscape"])
        assert result.exit_code == 0
        content = (tmp_path / "draftkit.yaml").read_text()
        assert "landscape" in content

    def test_refuses_overwrite(self, tmp_path: Path) -> None:
        (tmp_path / "draftkit.yaml").write_text("copy_workers: 2\n")
        result = runner.invoke(app, ["init-config", str(tmp_path)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_unknown_profile(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init-config", str(tmp_path), "-p", "cinema"])
        assert result.exit_code == 1

"""Tests for draftkit.validation module."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from draftkit.exceptions import DependencyError, ValidationError
from draftkit.validation import (
    check_disk_space,
    check_draft_store,
    check_ffprobe,
    estimate_media_size_mb,
    run_preflight_checks,
    validate_input_dir,
)


class TestCheckFfprobe:
    def test_missing(self):
        with patch("draftkit.validation.shutil.which", return_value=None):
            with pytest.raises(DependencyError) as exc_info:
                check_ffprobe()
        assert "ffmpeg" in exc_info.value.install_hint


class TestCheckDiskSpace:
    def test_sufficient(self, tmp_path):
        result = check_disk_space(tmp_path, 0)
        assert result["sufficient"] is True

    def test_missing_path_uses_parent(self, tmp_path):
        result = check_disk_space(tmp_path / "not_yet", 0)
        assert result["available_mb"] >= 0

    def test_unreadable(self, tmp_path):
        with patch("draftkit.validation.shutil.disk_usage", side_effect=OSError("nope")):
            with pytest.raises(ValidationError):
                check_disk_space(tmp_path, 1)


class TestEstimateMediaSize:
    def test_rounds_up(self, tmp_path):
        path = tmp_path / "a.png"
        path.write_bytes(b"x")
        assert estimate_media_size_mb([path]) == 1

    def test_missing_files_ignored(self, tmp_path):
        assert estimate_media_size_mb([tmp_path / "missing.png"]) == 0


class TestValidateInputDir:
    def test_valid(self, input_dir):
        result = validate_input_dir(input_dir)
        assert result["valid"] is True
        assert result["images"] == 3
        assert result["captions"].endswith("captions.srt")

    def test_invalid(self, tmp_path):
        result = validate_input_dir(tmp_path / "missing")
        assert result["valid"] is False
        assert "not found" in result["error"]


class TestCheckDraftStore:
    def test_found(self, draft_root):
        assert check_draft_store([draft_root]) == {"found": True, "path": str(draft_root)}

    def test_not_found(self, tmp_path):
        result = check_draft_store([tmp_path / "absent"])
        assert result["found"] is False


class TestRunPreflightChecks:
    def test_all_pass(self, input_dir, draft_root):
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            results = run_preflight_checks(input_dir, [draft_root])
        assert results["passed"] is True
        assert results["checks"]["disk_space"]["sufficient"] is True

    def test_missing_store_fails(self, input_dir, tmp_path):
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            results = run_preflight_checks(input_dir, [tmp_path / "absent"])
        assert results["passed"] is False
        assert "disk_space" not in results["checks"]

    def test_missing_ffprobe_fails(self, input_dir, draft_root):
        error = DependencyError("ffprobe", "not found", "install ffmpeg")
        with patch("draftkit.validation.check_ffprobe", side_effect=error):
            results = run_preflight_checks(input_dir, [draft_root])
        assert results["passed"] is False
        assert results["checks"]["ffprobe"]["install_hint"] == "install ffmpeg"

    def test_without_input_dir(self, draft_root):
        with patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}):
            results = run_preflight_checks(None, [draft_root])
        assert results["passed"] is True
        assert "input" not in results["checks"]
        assert results["checks"]["disk_space"]["required_mb"] == 0

    def test_insufficient_space_fails(self, input_dir, draft_root):
        usage = SimpleNamespace(total=10, used=10, free=0)
        with (
            patch("draftkit.validation.check_ffprobe", return_value={"ffprobe_version": "6.0"}),
            patch("draftkit.validation.shutil.disk_usage", return_value=usage),
        ):
            results = run_preflight_checks(input_dir, [draft_root])
        assert results["passed"] is False
        assert results["checks"]["disk_space"]["sufficient"] is False

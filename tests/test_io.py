"""Tests for draftkit.io module - JSON, text and media file helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from draftkit.io import copy_file, read_json, read_text, write_json, write_text


class TestJson:
    def test_write_then_read(self, tmp_path: Path) -> None:
        data = {"materials": {"videos": [{"id": "a"}]}, "duration": 9_000_000}
        path = tmp_path / "draft_info.json"
        write_json(path, data)
        assert read_json(path) == data

    def test_compact_output(self, tmp_path: Path) -> None:
        path = tmp_path / "draft_meta_info.json"
        write_json(path, {"version": "1.0", "name": "x"}, indent=None)
        assert "\n" not in path.read_text(encoding="utf-8")

    def test_keeps_cjk_unescaped(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        write_json(path, {"display_name": "素材"})
        content = path.read_text(encoding="utf-8")
        assert "素材" in content
        assert "\\u" not in content

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "out.json"
        write_json(path, {})
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_json(tmp_path / "out.json", {"k": 1})
        assert not any(tmp_path.glob("*.tmp"))

    def test_unserializable_data_leaves_no_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        with pytest.raises(TypeError):
            write_json(path, {"bad": object()})
        assert not path.exists()
        assert not any(tmp_path.glob("*.tmp"))

    def test_read_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "invalid.json"
        path.write_text("{not valid json}")
        with pytest.raises(json.JSONDecodeError):
            read_json(path)


class TestText:
    def test_write_then_read(self, tmp_path: Path) -> None:
        path = tmp_path / "template.tmp"
        write_text(path, "{}")
        assert read_text(path) == "{}"

    def test_read_strips_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "captions.srt"
        path.write_bytes("\ufeff1\n".encode("utf-8"))
        assert read_text(path) == "1\n"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "nonexistent.txt")


class TestCopyFile:
    def test_copies_content(self, tmp_path: Path) -> None:
        source = tmp_path / "scene.png"
        source.write_bytes(b"png")
        destination = copy_file(source, tmp_path / "project" / "scene.png")
        assert destination.read_bytes() == b"png"
        assert source.exists()

    def test_same_file_is_noop(self, tmp_path: Path) -> None:
        source = tmp_path / "scene.png"
        source.write_bytes(b"png")
        assert copy_file(source, source) == source
        assert source.read_bytes() == b"png"

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            copy_file(tmp_path / "missing.png", tmp_path / "out.png")

"""
draftkit.validation - Dependency checks and validation utilities.

Validates environment, dependencies, and input directories before
generation.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Any, Iterable

from draftkit.exceptions import DependencyError, MissingAssetError, TargetNotFoundError, ValidationError
from draftkit.install import find_draft_root
from draftkit.scan import scan_assets


def check_ffprobe() -> dict[str, str]:
    """Check if FFprobe is installed and get its version.

    Returns:
        Dict with 'ffprobe_version'

    Raises:
        DependencyError: If FFprobe not found
    """
    ffprobe_path = shutil.which("ffprobe")
    if not ffprobe_path:
        raise DependencyError(
            "ffprobe",
            "FFprobe not found in PATH",
            "Install with: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)",
        )

    result = {}
    try:
        proc = subprocess.run(
            [ffprobe_path, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        version_line = proc.stdout.split("\n")[0]
        result["ffprobe_version"] = version_line.split()[2] if version_line else "unknown"
    except (subprocess.TimeoutExpired, IndexError):
        result["ffprobe_version"] = "unknown"

    return result


def check_disk_space(path: Path, required_mb: int) -> dict[str, Any]:
    """Check if there's enough disk space at the given path.

    Args:
        path: Path to check (will use parent directory if file)
        required_mb: Required space in megabytes

    Returns:
        Dict with 'available_mb', 'required_mb', 'sufficient'

    Raises:
        ValidationError: If disk usage cannot be read
    """
    check_path = path.parent if path.is_file() else path

    if not check_path.exists():
        check_path = check_path.parent

    try:
        stat = shutil.disk_usage(check_path)
        available_mb = stat.free // (1024 * 1024)

        return {
            "available_mb": available_mb,
            "required_mb": required_mb,
            "sufficient": available_mb >= required_mb,
        }
    except OSError as e:
        raise ValidationError(f"Cannot check disk space: {e}") from e


def estimate_media_size_mb(files: Iterable[Path]) -> int:
    """Total size of ``files`` in megabytes, rounded up; missing files count as 0."""
    total = sum(f.stat().st_size for f in files if f.is_file())
    return -(-total // (1024 * 1024))


def validate_input_dir(path: Path) -> dict[str, Any]:
    """Classify an input directory and report what generation would use.

    Returns:
        Dict with 'valid', 'audio', 'images', 'captions', 'size_mb' and
        'error' when invalid
    """
    try:
        bundle = scan_assets(path)
    except MissingAssetError as e:
        return {"valid": False, "error": str(e)}

    return {
        "valid": True,
        "audio": str(bundle.audio_file),
        "images": len(bundle.image_files),
        "captions": str(bundle.caption_file) if bundle.caption_file else None,
        "size_mb": estimate_media_size_mb(bundle.media_files),
    }


def check_draft_store(candidates: list[Path] | None = None) -> dict[str, Any]:
    """Report whether the editor's draft store can be found."""
    try:
        root = find_draft_root(candidates)
    except TargetNotFoundError as e:
        return {"found": False, "error": str(e)}
    return {"found": True, "path": str(root)}


def run_preflight_checks(input_dir: Path | None, candidates: list[Path] | None = None) -> dict[str, Any]:
    """Run all preflight checks before generation.

    Without ``input_dir`` the input check is skipped and the disk check
    only reports free space in the draft store.

    Returns:
        Dict with 'passed' and per-check results
    """
    results: dict[str, Any] = {"passed": True, "checks": {}}

    try:
        results["checks"]["ffprobe"] = check_ffprobe()
    except DependencyError as e:
        results["checks"]["ffprobe"] = {"error": str(e), "install_hint": e.install_hint}
        results["passed"] = False

    required_mb = 0
    input_valid = True
    if input_dir is not None:
        input_check = validate_input_dir(input_dir)
        results["checks"]["input"] = input_check
        input_valid = input_check["valid"]
        if input_valid:
            required_mb = input_check["size_mb"]
        else:
            results["passed"] = False

    store = check_draft_store(candidates)
    results["checks"]["draft_store"] = store
    if not store["found"]:
        results["passed"] = False
    elif input_valid:
        try:
            disk = check_disk_space(Path(store["path"]), required_mb)
            results["checks"]["disk_space"] = disk
            if not disk["sufficient"]:
                results["passed"] = False
        except ValidationError as e:
            results["checks"]["disk_space"] = {"error": str(e)}
            results["passed"] = False

    return results

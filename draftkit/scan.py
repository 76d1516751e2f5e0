"""
draftkit.scan - Input directory classification.

Sorts the files of a chapter directory into narration audio, scene
images and captions. Images are ordered by natural filename order,
never by raw directory listing order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from draftkit.exceptions import MissingAssetError
from draftkit.logging import logger
from draftkit.utils import clean_path, natural_sort_key

AUDIO_EXTENSIONS = frozenset({".wav", ".mp3"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg"})
CAPTION_EXTENSIONS = frozenset({".srt"})
MEDIA_EXTENSIONS = AUDIO_EXTENSIONS | IMAGE_EXTENSIONS | CAPTION_EXTENSIONS


@dataclass
class AssetBundle:
    """Classified contents of an input directory."""

    directory: Path
    audio_file: Path | None
    image_files: list[Path]
    caption_file: Path | None = None

    @property
    def media_files(self) -> list[Path]:
        """Every file that belongs in the installed project."""
        files = list(self.image_files)
        if self.audio_file is not None:
            files.insert(0, self.audio_file)
        if self.caption_file is not None:
            files.append(self.caption_file)
        return files


def classify(path: Path) -> str | None:
    """Return 'audio', 'image', 'caption' or None for a file path."""
    ext = path.suffix.lower()
    if ext in AUDIO_EXTENSIONS:
        return "audio"
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in CAPTION_EXTENSIONS:
        return "caption"
    return None


def scan_assets(directory: Path) -> AssetBundle:
    """Classify the files of ``directory`` (non-recursive).

    Args:
        directory: Input directory

    Returns:
        AssetBundle with absolute, cleaned paths

    Raises:
        MissingAssetError: If the directory is missing, has no audio file,
            or has no images
    """
    directory = Path(clean_path(str(directory.expanduser().resolve())))
    if not directory.is_dir():
        raise MissingAssetError(f"Input directory not found: {directory}")

    entries = sorted(
        (p for p in directory.iterdir() if p.is_file() and not p.name.startswith(".")),
        key=lambda p: natural_sort_key(p.name),
    )

    audio_files: list[Path] = []
    image_files: list[Path] = []
    caption_files: list[Path] = []
    buckets = {"audio": audio_files, "image": image_files, "caption": caption_files}

    for entry in entries:
        kind = classify(entry)
        if kind is None:
            continue
        buckets[kind].append(Path(clean_path(str(entry))))

    if not audio_files:
        raise MissingAssetError(f"No audio file (.wav/.mp3) found in {directory}")
    if not image_files:
        raise MissingAssetError(f"No image files (.png/.jpg/.jpeg) found in {directory}")

    if len(audio_files) > 1:
        logger.warning(
            "Found %d audio files in %s, using %s",
            len(audio_files),
            directory,
            audio_files[0].name,
        )
    if len(caption_files) > 1:
        logger.warning(
            "Found %d caption files in %s, using %s",
            len(caption_files),
            directory,
            caption_files[0].name,
        )

    return AssetBundle(
        directory=directory,
        audio_file=audio_files[0],
        image_files=image_files,
        caption_file=caption_files[0] if caption_files else None,
    )

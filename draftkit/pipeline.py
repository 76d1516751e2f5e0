"""
draftkit.pipeline - Generation entry points.

All entry points share one assembly path (scan → captions → probe →
timeline → serialize) and differ only in where the document goes:

- export_project: a JSON document in a directory of your choice
- generate_project: a new draft in the editor's draft store
- import_project: a draft with a stable, reusable folder name
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from draftkit.captions import SrtEntry, parse_srt_file
from draftkit.config import DraftkitConfig, resolve_config
from draftkit.exceptions import CaptionError, DraftkitError
from draftkit.export.draft import serialize_project, write_document
from draftkit.install import DraftInstaller, find_draft_root
from draftkit.logging import logger
from draftkit.models import Project
from draftkit.probe import resolve_audio_duration
from draftkit.scan import AssetBundle, scan_assets
from draftkit.timeline import AudioAsset, ImageAsset, build_project


class GenerationStatus(str, Enum):
    NOTHING_WRITTEN = "nothing_written"
    WRITTEN = "written"
    WRITTEN_WITH_WARNINGS = "written_with_warnings"


@dataclass
class GenerationResult:
    """What a generation run produced.

    ``status`` separates runs that wrote nothing from runs that wrote a
    (possibly incomplete) project.
    """

    status: GenerationStatus
    project_id: str | None = None
    project_dir: Path | None = None
    document_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
    error: DraftkitError | None = None

    @property
    def written(self) -> bool:
        return self.status != GenerationStatus.NOTHING_WRITTEN

    @classmethod
    def failed(cls, error: DraftkitError) -> GenerationResult:
        return cls(status=GenerationStatus.NOTHING_WRITTEN, error=error)


@dataclass
class AssembledProject:
    """In-memory result of the shared assembly path."""

    bundle: AssetBundle
    project: Project
    document: dict[str, Any]
    captions: list[SrtEntry] | None = None
    warnings: list[str] = field(default_factory=list)


def _status_for(warnings: list[str]) -> GenerationStatus:
    return GenerationStatus.WRITTEN_WITH_WARNINGS if warnings else GenerationStatus.WRITTEN


def assemble(
    input_dir: Path,
    config: DraftkitConfig | None = None,
    fallback_seconds: float | None = None,
    name: str = "",
) -> AssembledProject:
    """Scan an input directory and build its serialized draft document.

    Args:
        input_dir: Directory with narration, images and optional captions
        config: Settings (discovered or defaulted if None)
        fallback_seconds: Duration to use if the audio cannot be probed;
            overrides the config value
        name: Draft name stored in the document

    Raises:
        MissingAssetError: If audio or images are missing
        InvalidDurationError: If the audio duration is unusable
        IntegrityError: If the built project has dangling references
    """
    config = config or resolve_config(input_dir)
    warnings: list[str] = []

    bundle = scan_assets(input_dir)

    captions = None
    if bundle.caption_file is not None:
        try:
            captions = parse_srt_file(bundle.caption_file)
        except CaptionError as e:
            logger.warning("%s; continuing without captions", e)
            warnings.append(str(e))

    fallback = fallback_seconds if fallback_seconds is not None else config.fallback_duration_seconds
    duration, used_fallback = resolve_audio_duration(bundle.audio_file, fallback)
    if used_fallback:
        warnings.append(f"Audio duration could not be probed; used fallback of {fallback}s")

    project = build_project(
        AudioAsset(path=bundle.audio_file, duration=duration),
        [ImageAsset(path=p) for p in bundle.image_files],
        captions,
        config,
    )
    document = serialize_project(project, name=name)
    return AssembledProject(
        bundle=bundle,
        project=project,
        document=document,
        captions=captions,
        warnings=warnings,
    )


def export_project(
    input_dir: Path,
    output_dir: Path,
    config: DraftkitConfig | None = None,
    fallback_seconds: float | None = None,
) -> GenerationResult:
    """Write the draft document to ``output_dir/<project id>.json``.

    Media stay where they are; material paths point at the input files.
    """
    try:
        assembled = assemble(input_dir, config, fallback_seconds)
    except DraftkitError as e:
        logger.debug("Export aborted: %s", e)
        return GenerationResult.failed(e)

    document_path = output_dir / f"{assembled.project.id}.json"
    try:
        write_document(assembled.document, document_path)
    except OSError as e:
        return GenerationResult.failed(DraftkitError(f"Cannot write {document_path}: {e}"))

    return GenerationResult(
        status=_status_for(assembled.warnings),
        project_id=assembled.project.id,
        document_path=document_path,
        warnings=assembled.warnings,
    )


def generate_project(
    input_dir: Path,
    config: DraftkitConfig | None = None,
    name: str | None = None,
    draft_root: Path | None = None,
    fallback_seconds: float | None = None,
) -> GenerationResult:
    """Assemble a draft and install it into the editor's draft store.

    Args:
        input_dir: Directory with narration, images and optional captions
        config: Settings (discovered or defaulted if None)
        name: Stable folder name; a fresh id is used when None
        draft_root: Draft store directory; located automatically if None
        fallback_seconds: Duration to use if the audio cannot be probed

    Returns:
        GenerationResult; NOTHING_WRITTEN if the store, assets, duration or
        project integrity were unusable
    """
    try:
        config = config or resolve_config(input_dir)
        root = draft_root or find_draft_root(config.draft_roots)
        assembled = assemble(input_dir, config, fallback_seconds, name=name or "")
        installer = DraftInstaller(root, max_workers=config.copy_workers)
        installed = installer.install(
            assembled.document,
            assembled.bundle.media_files,
            name=name,
            display_name=config.project_display_name,
            meta_version=config.meta_version,
        )
    except DraftkitError as e:
        logger.debug("Generation aborted: %s", e)
        return GenerationResult.failed(e)

    warnings = assembled.warnings + installed.warnings
    return GenerationResult(
        status=_status_for(warnings),
        project_id=installed.project_name,
        project_dir=installed.project_dir,
        document_path=installed.document_path,
        warnings=warnings,
    )


def import_project(
    input_dir: Path,
    name: str,
    config: DraftkitConfig | None = None,
    draft_root: Path | None = None,
    fallback_seconds: float | None = None,
) -> GenerationResult:
    """Install under a stable ``name``; re-running overwrites that draft."""
    return generate_project(
        input_dir,
        config=config,
        name=name,
        draft_root=draft_root,
        fallback_seconds=fallback_seconds,
    )

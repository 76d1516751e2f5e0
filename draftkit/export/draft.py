"""
draftkit.export.draft - Draft document serializer.

Renders a Project into the editor's draft_info.json shape and rewrites
material paths once media have been copied next to it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from draftkit.exceptions import IntegrityError
from draftkit.io import read_json, write_json
from draftkit.logging import logger
from draftkit.models import (
    AudioMaterial,
    AudioSegment,
    ClipSettings,
    PhotoMaterial,
    Project,
    TextMaterial,
    TextSegment,
    TrackKind,
    VideoSegment,
)

DRAFT_VERSION = 360000
DRAFT_NEW_VERSION = "110.0.0"
PHOTO_DURATION = 10_800_000_000
"""Source length the editor assigns to still images (three hours)."""

SEGMENT_BUCKETS = {
    "video": "photos",
    "audio": "audios",
    "text": "texts",
}
"""Segment kind → material bucket it must reference."""

MATERIAL_PATH_BUCKETS = ("videos", "audios")

TEXT_MATERIAL_DEFAULTS: dict[str, Any] = {
    "add_type": 2,
    "background_alpha": 1.0,
    "background_color": "",
    "background_height": 1.0,
    "background_horizontal_offset": 0.0,
    "background_round_radius": 0.0,
    "background_vertical_offset": 0.0,
    "background_width": 1.0,
    "bold_width": 0.0,
    "border_color": "",
    "border_width": 0.08,
    "check_flag": 7,
    "font_category_id": "",
    "font_category_name": "",
    "font_id": "",
    "font_name": "",
    "font_resource_id": "",
    "font_title": "none",
    "font_url": "",
    "fonts": [],
    "global_alpha": 1.0,
    "has_shadow": False,
    "initial_scale": 1.0,
    "is_rich_text": False,
    "italic_degree": 0,
    "ktv_color": "",
    "layer_weight": 1,
    "letter_spacing": 0.0,
    "line_spacing": 0.02,
    "recognize_type": 0,
    "shadow_alpha": 0.8,
    "shadow_angle": -45.0,
    "shadow_color": "",
    "shadow_distance": 8.0,
    "shadow_point": {"x": 1.0182337649086284, "y": -1.0182337649086284},
    "shadow_smoothing": 1.0,
    "shape_clip_x": False,
    "shape_clip_y": False,
    "style_name": "",
    "sub_type": 0,
    "text_alpha": 1.0,
    "text_to_audio_ids": [],
    "type": "subtitle",
    "typesetting": 0,
    "underline": False,
    "underline_offset": 0.22,
    "underline_width": 0.05,
    "use_effect_default_color": True,
}


def validate_references(project: Project) -> None:
    """Check every segment reference and the duration invariant.

    Raises:
        IntegrityError: Listing every dangling reference or broken invariant
    """
    problems = []

    for track, segment in project.iter_segments():
        bucket_name = SEGMENT_BUCKETS[segment.kind]
        bucket = getattr(project.materials, bucket_name)
        if segment.material_id not in bucket:
            problems.append(
                f"{segment.kind} segment {segment.id} on track '{track.name}' "
                f"references unknown material {segment.material_id}"
            )

    audio_segments = [s for t in project.tracks.audio for s in t.segments]
    if len(audio_segments) != 1:
        problems.append(f"expected exactly one audio segment, found {len(audio_segments)}")
    elif audio_segments[0].target_range.duration != project.total_duration:
        problems.append(
            f"total duration {project.total_duration}us does not match "
            f"audio duration {audio_segments[0].target_range.duration}us"
        )

    for track in project.tracks.video:
        if track.end > project.total_duration:
            problems.append(f"video track '{track.name}' runs past the project end")

    if problems:
        raise IntegrityError(problems)


def _clip_dict(clip: ClipSettings) -> dict[str, Any]:
    return {
        "alpha": clip.alpha,
        "flip": {"horizontal": clip.flip_horizontal, "vertical": clip.flip_vertical},
        "rotation": clip.rotation,
        "scale": {"x": clip.scale_x, "y": clip.scale_y},
        "transform": {"x": clip.transform_x, "y": clip.transform_y},
    }


def _photo_dict(material: PhotoMaterial) -> dict[str, Any]:
    return {
        "id": material.id,
        "type": "photo",
        "path": material.path,
        "material_name": material.name,
        "duration": PHOTO_DURATION,
        "width": material.width or 0,
        "height": material.height or 0,
        "category_name": "local",
        "crop_ratio": "free",
        "crop_scale": 1.0,
    }


def _audio_dict(material: AudioMaterial) -> dict[str, Any]:
    return {
        "id": material.id,
        "type": "extract_music",
        "path": material.path,
        "name": material.name,
        "duration": material.duration,
        "category_name": "local",
        "check_flag": 1,
    }


def _text_dict(material: TextMaterial) -> dict[str, Any]:
    return {
        **TEXT_MATERIAL_DEFAULTS,
        **material.style,
        "id": material.id,
        "content": material.content,
    }


def _video_segment_dict(segment: VideoSegment, render_index: int) -> dict[str, Any]:
    return {
        "id": segment.id,
        "material_id": segment.material_id,
        "source_timerange": segment.source_range.to_dict(),
        "target_timerange": segment.target_range.to_dict(),
        "speed": segment.speed,
        "volume": segment.volume,
        "clip": _clip_dict(segment.clip),
        "render_index": render_index,
        "visible": True,
    }


def _audio_segment_dict(segment: AudioSegment, render_index: int) -> dict[str, Any]:
    source = segment.source_range or segment.target_range.model_copy(update={"start": 0})
    return {
        "id": segment.id,
        "material_id": segment.material_id,
        "source_timerange": source.to_dict(),
        "target_timerange": segment.target_range.to_dict(),
        "speed": segment.speed,
        "volume": segment.volume,
        "clip": None,
        "render_index": render_index,
        "visible": True,
    }


def _text_segment_dict(segment: TextSegment, render_index: int) -> dict[str, Any]:
    style = segment.style
    return {
        "id": segment.id,
        "material_id": segment.material_id,
        "source_timerange": None,
        "target_timerange": segment.target_range.to_dict(),
        "clip": _clip_dict(segment.clip),
        "text_style": {
            "size": style.size,
            "color": list(style.color),
            "bold": style.bold,
            "italic": style.italic,
            "underline": style.underline,
            "align": style.align,
            "alpha": style.alpha,
        },
        "render_index": render_index,
        "visible": True,
    }


_SEGMENT_RENDERERS = {
    "video": _video_segment_dict,
    "audio": _audio_segment_dict,
    "text": _text_segment_dict,
}


def _ratio(width: int, height: int) -> str:
    ratios = {(16, 9): "16:9", (9, 16): "9:16", (1, 1): "1:1", (4, 3): "4:3", (3, 4): "3:4"}
    for (w, h), label in ratios.items():
        if width * h == height * w:
            return label
    return "original"


def serialize_project(project: Project, name: str = "") -> dict[str, Any]:
    """Render a Project as a draft document.

    Args:
        project: Project to render
        name: Draft name stored in the document

    Returns:
        JSON-serializable draft document

    Raises:
        IntegrityError: If any segment references an unknown material
    """
    validate_references(project)

    tracks: dict[str, list[dict[str, Any]]] = {}
    render_index = 0
    for kind in TrackKind:
        rendered_tracks = []
        for track in project.tracks.for_kind(kind):
            render = _SEGMENT_RENDERERS[kind.value]
            segments = []
            for segment in track.segments:
                segments.append(render(segment, render_index))
                render_index += 1
            rendered_tracks.append(
                {
                    "id": track.id,
                    "type": kind.value,
                    "name": track.name,
                    "attribute": 0,
                    "flag": 0,
                    "segments": segments,
                }
            )
        tracks[kind.value] = rendered_tracks

    return {
        "id": project.id,
        "name": name,
        "canvas_config": {
            "width": project.canvas_width,
            "height": project.canvas_height,
            "ratio": _ratio(project.canvas_width, project.canvas_height),
        },
        "fps": float(project.frame_rate),
        "duration": project.total_duration,
        "version": DRAFT_VERSION,
        "new_version": DRAFT_NEW_VERSION,
        "materials": {
            "videos": [_photo_dict(m) for m in project.materials.photos.values()],
            "audios": [_audio_dict(m) for m in project.materials.audios.values()],
            "texts": [_text_dict(m) for m in project.materials.texts.values()],
        },
        "tracks": tracks,
    }


def rewrite_material_paths(document: dict[str, Any], path_map: dict[str, str]) -> list[str]:
    """Point material paths at relocated copies.

    Args:
        document: Draft document, modified in place
        path_map: Original absolute path → new absolute path

    Returns:
        Paths that were not in the map and were left untouched
    """
    unmapped = []
    materials = document.get("materials", {})
    for bucket in MATERIAL_PATH_BUCKETS:
        for material in materials.get(bucket, []):
            path = material.get("path")
            if not path:
                continue
            new_path = path_map.get(path)
            if new_path is None:
                logger.warning("No relocated copy for %s, keeping original path", path)
                unmapped.append(path)
                continue
            material["path"] = new_path
    return unmapped


def write_document(document: dict[str, Any], path: Path) -> Path:
    """Write a draft document as UTF-8 JSON."""
    write_json(path, document, indent=4)
    return path


def read_document(path: Path) -> dict[str, Any]:
    """Read a draft document written by write_document."""
    return read_json(path)

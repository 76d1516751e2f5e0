"""
draftkit.timeline - Timeline construction.

Turns one narration track, an ordered list of scene images and optional
captions into a Project:

- the narration length is split evenly across the images, the last scene
  absorbing the integer-division remainder so the video track ends exactly
  where the audio does
- the narration sits on its own audio track spanning the whole project
- each caption becomes a text segment near the bottom of the canvas
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from draftkit.captions import SrtEntry
from draftkit.config import CaptionStyle, DraftkitConfig
from draftkit.exceptions import InsufficientAssetsError, InvalidDurationError
from draftkit.logging import logger
from draftkit.models import (
    PARAGRAPH_SEPARATOR,
    AudioMaterial,
    AudioSegment,
    ClipSettings,
    PhotoMaterial,
    Project,
    TextMaterial,
    TextSegment,
    TextStyle,
    TrackKind,
    VideoSegment,
    new_id,
)
from draftkit.timerange import TimeRange, partition

VIDEO_TRACK_NAME = "scenes"
AUDIO_TRACK_NAME = "narration"
TEXT_TRACK_NAME = "captions"


@dataclass
class AudioAsset:
    """Narration file with its probed duration in microseconds."""

    path: Path
    duration: int


@dataclass
class ImageAsset:
    path: Path


def partition_scenes(duration: int, count: int) -> list[TimeRange]:
    """Split ``[0, duration)`` into ``count`` scene ranges.

    Raises:
        InvalidDurationError: If duration is not positive or shorter than
            one microsecond per scene
        InsufficientAssetsError: If count is less than 1
    """
    if duration <= 0:
        raise InvalidDurationError(f"Audio duration must be positive, got {duration}us")
    if count < 1:
        raise InsufficientAssetsError("At least one image is required to build a timeline")
    if duration < count:
        raise InvalidDurationError(
            f"Audio duration {duration}us is too short for {count} scenes (each needs at least 1us)"
        )
    return partition(duration, count)


def render_caption_content(text: str, style: CaptionStyle) -> str:
    """Render caption text as the editor's rich-text markup.

    Lines are flattened with the editor's paragraph separator.
    """
    r, g, b = style.rgb()
    flattened = text.replace("\n", PARAGRAPH_SEPARATOR)
    return (
        f'<font id="{new_id()}" path="{style.font_path}">'
        f"<color=({r:.6f}, {g:.6f}, {b:.6f}, 1.000000)>"
        f"<size={style.font_size:.6f}>{flattened}</size>"
        "</color></font>"
    )


def caption_material_style(style: CaptionStyle) -> dict:
    """Per-material style fields derived from the caption style."""
    return {
        "alignment": style.align,
        "font_path": style.font_path,
        "font_size": style.font_size,
        "text_color": style.text_color,
        "text_size": style.text_size,
    }


def _caption_range(entry: SrtEntry, limit: int) -> TimeRange | None:
    span = entry.time_range
    if span.start >= limit:
        logger.warning(
            "Caption %d starts after the narration ends, dropping it",
            entry.sequence_number,
        )
        return None
    if span.end > limit:
        logger.warning("Caption %d runs past the narration, trimming it", entry.sequence_number)
        span = span.clamp(limit)
    if span.duration == 0:
        logger.debug("Caption %d has zero length, dropping it", entry.sequence_number)
        return None
    return span


def build_project(
    audio: AudioAsset,
    images: list[ImageAsset],
    captions: list[SrtEntry] | None = None,
    config: DraftkitConfig | None = None,
) -> Project:
    """Assemble a Project from narration, scene images and captions.

    Captions that start at or after the end of the narration, or have no
    length, are dropped; those running past the end are trimmed to it. The
    text track can therefore hold fewer segments than there are captions.

    Args:
        audio: Narration file and its duration
        images: Scene images in display order
        captions: Parsed caption entries, or None
        config: Canvas and caption settings (defaults if None)

    Returns:
        Populated Project whose total duration equals the narration length

    Raises:
        InsufficientAssetsError: If no images are given
        InvalidDurationError: If the audio duration is not positive or is
            shorter than one microsecond per image
    """
    config = config or DraftkitConfig()

    if not images:
        raise InsufficientAssetsError("At least one image is required to build a timeline")
    scenes = partition_scenes(audio.duration, len(images))

    project = Project(
        canvas_width=config.canvas_width,
        canvas_height=config.canvas_height,
        frame_rate=config.frame_rate,
        total_duration=audio.duration,
    )

    video_track = project.add_track(TrackKind.VIDEO, VIDEO_TRACK_NAME)
    for image, scene in zip(images, scenes):
        material = PhotoMaterial(path=str(image.path), name=image.path.name)
        project.add_material(material)
        video_track.add_segment(
            VideoSegment(
                material_id=material.id,
                source_range=scene,
                target_range=scene,
                speed=1.0,
                volume=1.0,
            )
        )

    audio_material = AudioMaterial(
        path=str(audio.path),
        name=audio.path.name,
        duration=audio.duration,
    )
    project.add_material(audio_material)
    audio_track = project.add_track(TrackKind.AUDIO, AUDIO_TRACK_NAME)
    audio_track.add_segment(
        AudioSegment(
            material_id=audio_material.id,
            target_range=TimeRange(start=0, duration=audio.duration),
            speed=1.0,
            volume=1.0,
        )
    )

    if captions:
        _add_captions(project, captions, config.caption_style)

    logger.debug(
        "Built project %s: %d scenes, %d captions, %dus",
        project.id,
        len(scenes),
        len(project.materials.texts),
        project.total_duration,
    )
    return project


def _add_captions(project: Project, captions: list[SrtEntry], style: CaptionStyle) -> None:
    text_track = project.add_track(TrackKind.TEXT, TEXT_TRACK_NAME)
    r, g, b = style.rgb()
    text_style = TextStyle(size=style.text_size, color=(r, g, b), bold=style.bold, align=style.align)
    clip = ClipSettings(transform_y=style.offset_y)

    for entry in captions:
        span = _caption_range(entry, project.total_duration)
        if span is None:
            continue
        material = TextMaterial(
            text=entry.text,
            content=render_caption_content(entry.text, style),
            style=caption_material_style(style),
        )
        project.add_material(material)
        text_track.add_segment(
            TextSegment(
                material_id=material.id,
                target_range=span,
                style=text_style,
                clip=clip,
            )
        )

"""
draftkit.models - Draft data model.

Materials and segments are closed unions discriminated by ``kind``.
Segments reference materials only by id; the project owns each material
exactly once in an id-keyed bucket.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, Field

from draftkit.exceptions import TimelineError
from draftkit.timerange import TimeRange

PARAGRAPH_SEPARATOR = "\u0001"
"""Line separator the editor expects inside rich text content."""


def new_id() -> str:
    """Generate a process-unique opaque id."""
    return str(uuid.uuid4())


class TrackKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"


# Materials


class PhotoMaterial(BaseModel):
    """A still image shown for the length of one scene."""

    kind: Literal["photo"] = "photo"
    id: str = Field(default_factory=new_id)
    path: str
    name: str
    width: int | None = None
    height: int | None = None


class AudioMaterial(BaseModel):
    """The narration file. ``duration`` is in microseconds."""

    kind: Literal["audio"] = "audio"
    id: str = Field(default_factory=new_id)
    path: str
    name: str
    duration: int = Field(gt=0)


class TextMaterial(BaseModel):
    """A caption. ``content`` is the editor's rich-text markup of ``text``."""

    kind: Literal["text"] = "text"
    id: str = Field(default_factory=new_id)
    text: str
    content: str
    style: dict[str, Any] = Field(default_factory=dict)


Material = Annotated[
    Union[PhotoMaterial, AudioMaterial, TextMaterial],
    Field(discriminator="kind"),
]


# Segment parameters


class ClipSettings(BaseModel):
    """Placement of a segment on the canvas.

    Transforms are in normalized canvas units; ``transform_y = -1.0`` is the
    bottom edge.
    """

    alpha: float = Field(default=1.0, ge=0.0, le=1.0)
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    transform_x: float = 0.0
    transform_y: float = 0.0
    flip_horizontal: bool = False
    flip_vertical: bool = False


class TextStyle(BaseModel):
    size: float = Field(default=24.0, gt=0.0)
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    bold: bool = True
    italic: bool = False
    underline: bool = False
    align: int = Field(default=1, ge=0, le=2)
    alpha: float = Field(default=1.0, ge=0.0, le=1.0)


# Segments


class VideoSegment(BaseModel):
    kind: Literal["video"] = "video"
    id: str = Field(default_factory=new_id)
    material_id: str
    source_range: TimeRange
    target_range: TimeRange
    speed: float = Field(default=1.0, gt=0.0)
    volume: float = Field(default=1.0, ge=0.0)
    clip: ClipSettings = Field(default_factory=ClipSettings)


class AudioSegment(BaseModel):
    kind: Literal["audio"] = "audio"
    id: str = Field(default_factory=new_id)
    material_id: str
    target_range: TimeRange
    source_range: TimeRange | None = None
    speed: float = Field(default=1.0, gt=0.0)
    volume: float = Field(default=1.0, ge=0.0)


class TextSegment(BaseModel):
    kind: Literal["text"] = "text"
    id: str = Field(default_factory=new_id)
    material_id: str
    target_range: TimeRange
    style: TextStyle = Field(default_factory=TextStyle)
    clip: ClipSettings = Field(default_factory=ClipSettings)


Segment = Annotated[
    Union[VideoSegment, AudioSegment, TextSegment],
    Field(discriminator="kind"),
]


class Track(BaseModel):
    """An ordered channel of segments of one kind.

    Video and audio tracks hold a single row: segments stay sorted by
    target start and never overlap. Text tracks may overlap.
    """

    id: str = Field(default_factory=new_id)
    kind: TrackKind
    name: str = ""
    segments: list[Segment] = Field(default_factory=list)

    def add_segment(self, segment: VideoSegment | AudioSegment | TextSegment) -> None:
        if segment.kind != self.kind.value:
            raise TimelineError(f"Cannot place a {segment.kind} segment on a {self.kind.value} track")

        if self.kind == TrackKind.TEXT:
            self.segments.append(segment)
            return

        for existing in self.segments:
            if existing.target_range.overlaps(segment.target_range):
                raise TimelineError(
                    f"Segment at {segment.target_range.start}us overlaps "
                    f"{existing.target_range.start}us on track '{self.name}'"
                )
        self.segments.append(segment)
        self.segments.sort(key=lambda s: s.target_range.start)

    @property
    def end(self) -> int:
        return max((s.target_range.end for s in self.segments), default=0)


class Materials(BaseModel):
    """Id-keyed material buckets."""

    photos: dict[str, PhotoMaterial] = Field(default_factory=dict)
    audios: dict[str, AudioMaterial] = Field(default_factory=dict)
    texts: dict[str, TextMaterial] = Field(default_factory=dict)

    def add(self, material: PhotoMaterial | AudioMaterial | TextMaterial) -> str:
        bucket = self.bucket_for(material.kind)
        bucket[material.id] = material
        return material.id

    def bucket_for(self, kind: str) -> dict:
        buckets = {"photo": self.photos, "audio": self.audios, "text": self.texts}
        return buckets[kind]

    def all_ids(self) -> list[str]:
        return [*self.photos, *self.audios, *self.texts]


class Tracks(BaseModel):
    video: list[Track] = Field(default_factory=list)
    audio: list[Track] = Field(default_factory=list)
    text: list[Track] = Field(default_factory=list)

    def for_kind(self, kind: TrackKind) -> list[Track]:
        return getattr(self, kind.value)


class Project(BaseModel):
    """A complete draft: canvas, materials and tracks.

    ``total_duration`` is in microseconds and equals the narration length.
    """

    id: str = Field(default_factory=new_id)
    canvas_width: int = Field(default=1080, gt=0)
    canvas_height: int = Field(default=1920, gt=0)
    frame_rate: float = Field(default=30.0, gt=0.0)
    total_duration: int = Field(default=0, ge=0)
    materials: Materials = Field(default_factory=Materials)
    tracks: Tracks = Field(default_factory=Tracks)

    def add_material(self, material: PhotoMaterial | AudioMaterial | TextMaterial) -> str:
        return self.materials.add(material)

    def add_track(self, kind: TrackKind, name: str = "") -> Track:
        track = Track(kind=kind, name=name)
        self.tracks.for_kind(kind).append(track)
        return track

    def iter_segments(self) -> Iterator[tuple[Track, VideoSegment | AudioSegment | TextSegment]]:
        for kind in TrackKind:
            for track in self.tracks.for_kind(kind):
                for segment in track.segments:
                    yield track, segment

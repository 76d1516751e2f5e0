"""
draftkit.config - YAML config loading, profile merging, validation.

Handles loading draftkit.yaml, applying canvas profile defaults, and
validating all parameters. Draft store candidates can also be supplied
through the DRAFTKIT_DRAFT_ROOTS environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from draftkit.exceptions import ConfigError

CONFIG_FILENAME = "draftkit.yaml"
DRAFT_ROOTS_ENV = "DRAFTKIT_DRAFT_ROOTS"

DEFAULT_FONT_PATH = "/Applications/VideoFusion-macOS.app/Contents/Resources/Font/SystemFont/zh-hans.ttf"


class CaptionStyle(BaseModel):
    """Appearance of caption text segments."""

    font_path: str = DEFAULT_FONT_PATH
    font_size: float = Field(default=5.0, gt=0.0)
    text_size: float = Field(default=24.0, gt=0.0)
    text_color: str = "#FFFFFF"
    bold: bool = True
    align: int = Field(default=1, ge=0, le=2)
    offset_y: float = Field(default=-0.8, ge=-1.0, le=1.0)

    @field_validator("text_color")
    @classmethod
    def validate_text_color(cls, v: str) -> str:
        value = v.strip()
        if len(value) != 7 or not value.startswith("#"):
            raise ValueError("text_color must look like #RRGGBB")
        try:
            int(value[1:], 16)
        except ValueError as e:
            raise ValueError("text_color must look like #RRGGBB") from e
        return value.upper()

    def rgb(self) -> tuple[float, float, float]:
        """Text colour as 0..1 floats."""
        value = self.text_color.lstrip("#")
        return tuple(int(value[i : i + 2], 16) / 255 for i in (0, 2, 4))


class DraftkitConfig(BaseModel):
    """Resolved configuration for one generation run."""

    canvas_profile: str = "portrait"
    canvas_width: int = Field(default=1080, gt=0)
    canvas_height: int = Field(default=1920, gt=0)
    frame_rate: float = Field(default=30.0, gt=0.0)

    caption_style: CaptionStyle = Field(default_factory=CaptionStyle)

    draft_roots: list[Path] = Field(default_factory=list)
    copy_workers: int = Field(default=4, ge=1, le=32)

    fallback_duration_seconds: float | None = Field(default=None, gt=0.0)

    project_display_name: str = "Generated Project"
    meta_version: str = "1.0"

    config_path: Path | None = None

    @field_validator("canvas_profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        valid = set(BUILTIN_PROFILES)
        if v not in valid:
            raise ValueError(f"canvas_profile must be one of: {sorted(valid)}")
        return v

    @field_validator("draft_roots", mode="before")
    @classmethod
    def expand_draft_roots(cls, v: Any) -> Any:
        if isinstance(v, (str, Path)):
            v = [v]
        if isinstance(v, list):
            return [Path(os.path.expandvars(str(p))).expanduser() for p in v]
        return v

    @model_validator(mode="after")
    def validate_canvas_even(self) -> DraftkitConfig:
        if self.canvas_width % 2 or self.canvas_height % 2:
            raise ValueError("canvas dimensions must be even")
        return self


BUILTIN_PROFILES: dict[str, dict[str, Any]] = {
    "portrait": {
        "canvas_width": 1080,
        "canvas_height": 1920,
        "frame_rate": 30.0,
    },
    "landscape": {
        "canvas_width": 1920,
        "canvas_height": 1080,
        "frame_rate": 30.0,
    },
    "square": {
        "canvas_width": 1080,
        "canvas_height": 1080,
        "frame_rate": 30.0,
    },
}


def load_profile(name: str) -> dict[str, Any]:
    """Load a built-in canvas profile by name."""
    if name in BUILTIN_PROFILES:
        return BUILTIN_PROFILES[name].copy()
    raise ValueError(f"Unknown profile: {name}")


def merge_config(project_config: dict[str, Any], profile: dict[str, Any]) -> dict[str, Any]:
    """Merge config with profile defaults. Explicit config takes precedence."""
    merged = profile.copy()
    for key, value in project_config.items():
        if key == "caption_style" and isinstance(value, dict):
            merged.setdefault("caption_style", {})
            merged["caption_style"] = {**merged["caption_style"], **value}
        elif value is not None:
            merged[key] = value
    return merged


def env_draft_roots() -> list[Path]:
    """Draft store candidates from the environment, if set."""
    raw = os.environ.get(DRAFT_ROOTS_ENV, "")
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


def build_config(raw_config: dict[str, Any] | None = None) -> DraftkitConfig:
    """Validate a raw config mapping against its profile and the environment."""
    raw_config = dict(raw_config or {})
    profile_name = raw_config.get("canvas_profile", "portrait")
    try:
        profile = load_profile(profile_name)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    merged = merge_config(raw_config, profile)

    env_roots = env_draft_roots()
    if env_roots:
        merged["draft_roots"] = env_roots

    try:
        return DraftkitConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(config_file: Path) -> DraftkitConfig:
    """Load and validate configuration from a YAML file."""
    if not config_file.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} found at {config_file}")

    with open(config_file, encoding="utf-8") as f:
        try:
            raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {config_file}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a mapping")

    raw_config["config_path"] = config_file
    return build_config(raw_config)


def find_config(input_dir: Path | None = None) -> Path | None:
    """Find draftkit.yaml in the input directory, then the working directory."""
    candidates = []
    if input_dir is not None:
        candidates.append(input_dir / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def resolve_config(input_dir: Path | None = None, config_file: Path | None = None) -> DraftkitConfig:
    """Load an explicit config, a discovered one, or the defaults."""
    if config_file is not None:
        return load_config(config_file)
    found = find_config(input_dir)
    if found is not None:
        return load_config(found)
    return build_config()


def create_default_config(profile: str = "portrait") -> dict[str, Any]:
    """Create a default config mapping for a new draftkit.yaml."""
    defaults: dict[str, Any] = {
        "canvas_profile": profile,
        "copy_workers": 4,
        "project_display_name": "Generated Project",
        "caption_style": CaptionStyle().model_dump(),
        "draft_roots": [],
    }
    if profile in BUILTIN_PROFILES:
        defaults = merge_config(defaults, BUILTIN_PROFILES[profile])
    return defaults


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

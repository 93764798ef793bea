"""
Configuration models and loader for the overlay renderer.

Scenes are described by YAML files; every option has a default so an
empty ``overlay`` block reproduces the stock animation.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, field_validator, model_validator

from .colors import parse_hex_color


FloatRange = Tuple[float, float]
IntRange = Tuple[int, int]


def _check_ordered(name: str, value: Tuple[float, float]) -> None:
    low, high = value
    if low > high:
        raise ValueError(f"{name} must be ordered as (low, high), got {value}")


class CanvasConfig(BaseModel):
    """Output canvas and timing parameters."""

    resolution: Tuple[PositiveInt, PositiveInt] = Field(
        default=(640, 480), description="(width, height) in pixels"
    )
    fps: PositiveFloat = Field(default=10.0, description="Frames per second of the output video")
    duration_s: PositiveFloat = Field(default=30.0, description="Total video duration in seconds")
    background: str = Field(default="#fffceb", description="Background fill color (hex)")
    background_image: Optional[Path] = Field(
        default=None, description="Optional image drawn under the overlay instead of the fill color"
    )

    @field_validator("background")
    @classmethod
    def _validate_background(cls, value: str) -> str:
        parse_hex_color(value)
        return value

    @field_validator("background_image")
    @classmethod
    def _validate_background_image(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return value
        if not value.exists():
            raise ValueError(f"Background image not found: {value}")
        return value

    @property
    def total_frames(self) -> int:
        return int(round(self.duration_s * self.fps))


class OverlayConfig(BaseModel):
    """Parameters of the text-path animation."""

    label: str = Field(default="NYU", min_length=1, description="Text drawn at every glyph placement")
    color: str = Field(default="#8B5FBF", description="Fill and stroke color of the label (hex)")
    glyph_size: PositiveFloat = Field(default=18.0, description="Label height in pixels")
    spacing_factor: PositiveFloat = Field(
        default=1.5, description="Distance between glyphs as a multiple of glyph_size"
    )
    max_paths: PositiveInt = Field(default=40, description="Maximum number of live paths")
    spawn_interval: PositiveInt = Field(default=3, description="Frames between spawn attempts")
    fade_in_frames: PositiveInt = Field(default=30)
    fade_out_frames: PositiveInt = Field(default=60)
    peak_opacity_range: FloatRange = Field(default=(150.0, 255.0))
    lifespan_range: IntRange = Field(default=(180, 300), description="Inclusive lifespan bounds in frames")
    control_point_range: IntRange = Field(
        default=(3, 6), description="Half-open range for the number of control points"
    )
    step_distance_range: FloatRange = Field(default=(100.0, 300.0))
    jitter_range: FloatRange = Field(default=(-3.0, 3.0))
    phase_range: FloatRange = Field(default=(0.0, 2.0 * math.pi))
    stroke_weight: PositiveFloat = Field(default=0.5)

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        parse_hex_color(value)
        return value

    @field_validator("peak_opacity_range")
    @classmethod
    def _validate_peak_opacity(cls, value: FloatRange) -> FloatRange:
        _check_ordered("peak_opacity_range", value)
        if value[0] < 0 or value[1] > 255:
            raise ValueError("peak_opacity_range must lie within [0, 255]")
        return value

    @field_validator("lifespan_range")
    @classmethod
    def _validate_lifespan(cls, value: IntRange) -> IntRange:
        _check_ordered("lifespan_range", value)
        if value[0] < 1:
            raise ValueError("lifespan_range must start at 1 frame or more")
        return value

    @field_validator("step_distance_range", "jitter_range", "phase_range")
    @classmethod
    def _validate_ordered(cls, value, info):
        _check_ordered(info.field_name, value)
        return value

    @field_validator("control_point_range")
    @classmethod
    def _validate_control_points(cls, value: IntRange) -> IntRange:
        low, high = value
        if low < 2 or high <= low:
            raise ValueError("control_point_range must satisfy 2 <= low < high")
        return value

    @property
    def spacing(self) -> float:
        return self.glyph_size * self.spacing_factor


class SceneConfig(BaseModel):
    """Top-level configuration object for a rendered scene."""

    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    seed: Optional[int] = Field(default=None, description="Seed for the shared random generator")
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Optional metadata for bookkeeping"
    )

    @model_validator(mode="after")
    def _check_canvas_fits_frames(self) -> "SceneConfig":
        if self.canvas.total_frames <= 0:
            raise ValueError("duration_s * fps must produce at least one frame")
        return self


def load_scene_config(path: Union[str, Path]) -> SceneConfig:
    """
    Load and validate a scene from a YAML file.

    Relative ``background_image`` paths are resolved against the YAML
    file's directory.
    """

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    canvas = raw_data.get("canvas")
    if isinstance(canvas, dict) and canvas.get("background_image"):
        image_path = Path(canvas["background_image"])
        if not image_path.is_absolute():
            canvas["background_image"] = (config_path.parent / image_path).resolve()

    return SceneConfig.model_validate(raw_data)

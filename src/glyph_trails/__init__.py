"""
Animated text-path overlay.

Random Catmull-Rom curves are populated with a repeating label that fades
in, wobbles and fades out; a capped population of such paths is advanced
once per frame and composited over a background.
"""

from .config import CanvasConfig, OverlayConfig, SceneConfig, load_scene_config
from .core.arclength import ArcSample, path_length, point_at_distance
from .core.curve import CanvasBounds, catmull_rom, generate_curve_points, interpolate_control_polygon
from .core.population import PathPopulation, TickStats
from .core.renderer import AssetLoadingError, Renderer, load_background
from .core.surface import CanvasSurface, DrawSurface
from .core.text_path import GlyphPlacement, PathState, TextPath, opacity_at
from .settings import output_root, reset_settings_cache
from .exporters import (
    DEFAULT_VIDEO_CODEC,
    determine_scenario_name,
    prepare_output_directory,
    export_video,
    export_population_csv,
    export_metadata_json,
    export_png_frames,
    export_render_outputs,
)

__all__ = [
    "CanvasConfig",
    "OverlayConfig",
    "SceneConfig",
    "load_scene_config",
    "ArcSample",
    "path_length",
    "point_at_distance",
    "CanvasBounds",
    "catmull_rom",
    "generate_curve_points",
    "interpolate_control_polygon",
    "PathPopulation",
    "TickStats",
    "AssetLoadingError",
    "Renderer",
    "load_background",
    "CanvasSurface",
    "DrawSurface",
    "GlyphPlacement",
    "PathState",
    "TextPath",
    "opacity_at",
    "output_root",
    "reset_settings_cache",
    "DEFAULT_VIDEO_CODEC",
    "determine_scenario_name",
    "prepare_output_directory",
    "export_video",
    "export_population_csv",
    "export_metadata_json",
    "export_png_frames",
    "export_render_outputs",
]

"""Text-path animation engine."""

from .arclength import ArcSample, cumulative_lengths, path_length, point_at_distance, segment_lengths
from .curve import (
    CanvasBounds,
    catmull_rom,
    generate_curve_points,
    interpolate_control_polygon,
    random_control_polygon,
)
from .population import PathPopulation, TickStats
from .renderer import AssetLoadingError, Renderer, load_background
from .surface import CanvasSurface, DrawSurface
from .text_path import GlyphPlacement, PathState, TextPath, opacity_at

__all__ = [
    "ArcSample",
    "cumulative_lengths",
    "path_length",
    "point_at_distance",
    "segment_lengths",
    "CanvasBounds",
    "catmull_rom",
    "generate_curve_points",
    "interpolate_control_polygon",
    "random_control_polygon",
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
]

"""Random smooth path generation.

A path starts as a short random walk of control points (the control
polygon) which is then interpolated with Catmull-Rom splines into a
dense polyline. The polyline is what glyphs are laid out on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from ..config import OverlayConfig

logger = logging.getLogger(__name__)

SAMPLES_PER_SEGMENT = 21

Scalar = Union[float, np.ndarray]


@dataclass(frozen=True)
class CanvasBounds:
    """Drawable area in canvas pixels."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas bounds must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_resolution(cls, resolution: Tuple[int, int]) -> "CanvasBounds":
        width, height = resolution
        return cls(float(width), float(height))


def catmull_rom(p0: Scalar, p1: Scalar, p2: Scalar, p3: Scalar, t: Scalar) -> Scalar:
    """
    Evaluate the Catmull-Rom cubic between ``p1`` and ``p2``.

    ``p0`` and ``p3`` only shape the tangents at the segment ends. All
    arguments broadcast, so coordinate arrays and vectors of ``t`` work.

    Evaluated in cubic Hermite form: the basis weights are exactly 0 or 1
    at ``t = 0`` and ``t = 1``, so the segment ends reproduce ``p1`` and
    ``p2`` bit for bit.
    """
    v0 = (p2 - p0) * 0.5
    v1 = (p3 - p1) * 0.5
    t2 = t * t
    t3 = t * t2
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2
    return h00 * p1 + h10 * v0 + h01 * p2 + h11 * v1


def random_control_polygon(bounds: CanvasBounds, rng: np.random.Generator, settings: OverlayConfig) -> np.ndarray:
    """
    Random walk of control points starting inside the central 80% of the canvas.

    Returns
    -------
    np.ndarray
        Array of shape (n, 2) where n is drawn from ``settings.control_point_range``.
    """
    start = np.array(
        [
            rng.uniform(bounds.width * 0.1, bounds.width * 0.9),
            rng.uniform(bounds.height * 0.1, bounds.height * 0.9),
        ],
        dtype=np.float64,
    )
    low, high = settings.control_point_range
    count = int(rng.integers(low, high))

    control = np.empty((count, 2), dtype=np.float64)
    control[0] = start
    step_low, step_high = settings.step_distance_range
    for idx in range(1, count):
        heading = np.radians(rng.uniform(0.0, 360.0))
        distance = rng.uniform(step_low, step_high)
        control[idx] = control[idx - 1] + distance * np.array([np.cos(heading), np.sin(heading)])
    return control


def interpolate_control_polygon(control_points, samples_per_segment: int = SAMPLES_PER_SEGMENT) -> np.ndarray:
    """
    Sample a Catmull-Rom spline through ``control_points``.

    Each segment ``i`` uses neighbours ``i - 1`` and ``i + 2`` clamped to
    the ends of the polygon and is sampled at ``samples_per_segment``
    evenly spaced parameters including both ends. Segment samples are
    concatenated, so junction points appear twice.

    Raises
    ------
    ValueError
        If fewer than two control points are given.
    """
    control = np.asarray(control_points, dtype=np.float64)
    if control.ndim != 2 or control.shape[1] != 2:
        raise ValueError("Control points must have shape (n, 2)")
    count = control.shape[0]
    if count < 2:
        raise ValueError("At least two control points are required to build a path")

    t_values = np.linspace(0.0, 1.0, num=samples_per_segment, endpoint=True)[:, None]
    segments = []
    for idx in range(count - 1):
        p0 = control[max(0, idx - 1)]
        p1 = control[idx]
        p2 = control[idx + 1]
        p3 = control[min(count - 1, idx + 2)]
        segments.append(catmull_rom(p0, p1, p2, p3, t_values))

    points = np.concatenate(segments, axis=0)
    points.setflags(write=False)
    return points


def generate_curve_points(bounds: CanvasBounds, rng: np.random.Generator, settings: OverlayConfig) -> np.ndarray:
    """Build one smooth random path as a read-only (N, 2) array."""
    control = random_control_polygon(bounds, rng, settings)
    points = interpolate_control_polygon(control)
    logger.debug("Generated path with %d control points, %d samples", control.shape[0], points.shape[0])
    return points

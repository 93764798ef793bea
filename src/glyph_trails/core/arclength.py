"""Arc-length sampling along polylines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class ArcSample:
    """Point on a polyline with the direction of the segment it lies on (degrees)."""

    position: Tuple[float, float]
    tangent_angle: float


def segment_lengths(points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[0] < 2:
        return np.zeros(0, dtype=np.float64)
    return np.hypot(*np.diff(pts, axis=0).T)


def cumulative_lengths(points: np.ndarray) -> np.ndarray:
    """Distance from the first point to every point, starting at 0."""
    return np.concatenate([[0.0], np.cumsum(segment_lengths(points))])


def path_length(points: np.ndarray) -> float:
    return float(cumulative_lengths(points)[-1])


def point_at_distance(
    points: np.ndarray,
    target_distance: float,
    cumulative: Optional[np.ndarray] = None,
) -> Optional[ArcSample]:
    """
    Locate the point ``target_distance`` along the polyline.

    The containing segment is the first one whose cumulative end reaches
    ``target_distance``. The tangent angle is that segment's direction and
    does not vary within it. Returns ``None`` once ``target_distance`` runs
    past the end of the path.

    Parameters
    ----------
    cumulative:
        Output of :func:`cumulative_lengths` for ``points``. Pass it when
        sampling the same path repeatedly.
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[0] < 2:
        return None
    if cumulative is None:
        cumulative = cumulative_lengths(pts)

    idx = int(np.searchsorted(cumulative[1:], target_distance, side="left"))
    if idx >= pts.shape[0] - 1:
        return None

    x1, y1 = pts[idx]
    x2, y2 = pts[idx + 1]
    dx = x2 - x1
    dy = y2 - y1
    seg_len = cumulative[idx + 1] - cumulative[idx]
    t = (target_distance - cumulative[idx]) / seg_len if seg_len > 0 else 0.0
    return ArcSample(
        position=(float(x1 + dx * t), float(y1 + dy * t)),
        tangent_angle=math.degrees(math.atan2(dy, dx)),
    )

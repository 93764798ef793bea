"""
Animated text paths.

A :class:`TextPath` owns one random curve, the label placements laid
out along it and the age-driven opacity envelope that fades it in, holds
it and fades it out again.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..config import OverlayConfig
from .arclength import cumulative_lengths, point_at_distance
from .curve import CanvasBounds, generate_curve_points
from .surface import DrawSurface

logger = logging.getLogger(__name__)


class PathState(enum.Enum):
    PENDING = "pending"  # glyphs not laid out yet
    ACTIVE = "active"


@dataclass(frozen=True)
class GlyphPlacement:
    """One label instance along a path.

    ``jitter_offset`` and ``phase`` are drawn once and drive the per-frame
    wobble; angles are in degrees.
    """

    position: Tuple[float, float]
    tangent_angle: float
    jitter_offset: float
    phase: float


def _lerp(start: float, stop: float, amount: float) -> float:
    return start + (stop - start) * amount


def opacity_at(age: int, peak: float, lifespan: int, fade_in: int = 30, fade_out: int = 60) -> float:
    """
    Opacity envelope for a path of the given age.

    Fade-in is checked before fade-out so that when the two windows
    overlap (short lifespans) the fade-out wins. The result is clamped to
    ``[0, peak]``.
    """
    opacity = peak
    if age < fade_in:
        opacity = _lerp(0.0, peak, age / fade_in)
    if age > lifespan - fade_out:
        opacity = _lerp(peak, 0.0, (age - (lifespan - fade_out)) / fade_out)
    return min(max(opacity, 0.0), peak)


class TextPath:
    """
    One curved path carrying repeated copies of a label.

    Parameters
    ----------
    points:
        Dense (N, 2) samples along the curve.
    settings:
        Overlay configuration (label, sizes, fade windows, random ranges).
    rng:
        Shared random generator; glyph jitter and phase are drawn from it
        when the path is first updated.
    peak_opacity, lifespan:
        Drawn from ``settings`` when omitted.
    """

    def __init__(
        self,
        points: np.ndarray,
        settings: OverlayConfig,
        rng: np.random.Generator,
        peak_opacity: Optional[float] = None,
        lifespan: Optional[int] = None,
    ):
        self.points = np.asarray(points, dtype=np.float64)
        self.settings = settings
        self.color = settings.color
        self._rng = rng

        if peak_opacity is None:
            peak_opacity = float(rng.uniform(*settings.peak_opacity_range))
        if lifespan is None:
            low, high = settings.lifespan_range
            lifespan = int(rng.integers(low, high + 1))
        self.peak_opacity = float(peak_opacity)
        self.lifespan = int(lifespan)

        self.age = 0
        self.opacity = 0.0
        self.glyphs: List[GlyphPlacement] = []
        self.state = PathState.PENDING
        self.total_length = 0.0

    @classmethod
    def spawn(cls, bounds: CanvasBounds, settings: OverlayConfig, rng: np.random.Generator) -> "TextPath":
        return cls(generate_curve_points(bounds, rng, settings), settings, rng)

    def __repr__(self) -> str:
        return (
            f"TextPath(age={self.age}, lifespan={self.lifespan}, opacity={self.opacity:.1f}, "
            f"glyphs={len(self.glyphs)}, state={self.state.value})"
        )

    def _layout_glyphs(self) -> None:
        spacing = self.settings.spacing
        cumulative = cumulative_lengths(self.points)
        self.total_length = float(cumulative[-1])
        count = int(math.floor(self.total_length / spacing))

        jitter_low, jitter_high = self.settings.jitter_range
        phase_low, phase_high = self.settings.phase_range
        for idx in range(count):
            sample = point_at_distance(self.points, idx * spacing, cumulative)
            if sample is None:
                break
            self.glyphs.append(
                GlyphPlacement(
                    position=sample.position,
                    tangent_angle=sample.tangent_angle,
                    jitter_offset=float(self._rng.uniform(jitter_low, jitter_high)),
                    phase=float(self._rng.uniform(phase_low, phase_high)),
                )
            )
        logger.debug("Laid out %d glyphs over %.1f px", len(self.glyphs), self.total_length)

    def update(self) -> None:
        self.age += 1
        if self.state is PathState.PENDING:
            self._layout_glyphs()
            self.state = PathState.ACTIVE

        self.opacity = opacity_at(
            self.age,
            self.peak_opacity,
            self.lifespan,
            fade_in=self.settings.fade_in_frames,
            fade_out=self.settings.fade_out_frames,
        )

    def render(self, surface: DrawSurface) -> None:
        if not self.glyphs:
            return

        label = self.settings.label
        for glyph in self.glyphs:
            wave = math.sin(math.radians(self.age * 3 + glyph.phase)) * 2
            pulse = 1 + math.sin(math.radians(self.age * 2 + glyph.phase)) * 0.1
            x, y = glyph.position

            with surface.transform():
                surface.translate(x, y + wave)
                surface.rotate(glyph.tangent_angle + glyph.jitter_offset * 0.1)
                surface.scale(pulse)
                surface.fill(self.color, self.opacity)
                surface.stroke(self.color, self.opacity * 0.5)
                surface.stroke_weight(self.settings.stroke_weight)
                surface.text(label)

    def is_expired(self) -> bool:
        return self.opacity <= 0 and self.age >= 1

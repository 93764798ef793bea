"""
Frame rendering for the overlay.

The renderer is the timing driver: it calls the population once per frame,
starting from frame 1, and composes each transparent overlay frame over
the background.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import cv2
import numpy as np

from ..colors import hex_to_bgr
from ..config import SceneConfig
from .curve import CanvasBounds
from .population import PathPopulation, TickStats
from .surface import CanvasSurface

logger = logging.getLogger(__name__)


class AssetLoadingError(RuntimeError):
    """Raised when a background image cannot be loaded."""


def load_background(config: SceneConfig) -> np.ndarray:
    """
    Build the (height, width, 3) BGR background for the scene.

    A configured image is resized to the canvas resolution when needed;
    otherwise the background color fills the frame.
    """
    width, height = config.canvas.resolution
    image_path: Optional[Path] = config.canvas.background_image
    if image_path is None:
        background = np.empty((height, width, 3), dtype=np.uint8)
        background[:] = hex_to_bgr(config.canvas.background)
        return background

    image = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if image is None:
        raise AssetLoadingError(f"Failed to load background image: {image_path}")
    if image.shape[:2] != (height, width):
        logger.warning(
            "Background image %s is %dx%d; resizing to %dx%d.",
            image_path.name,
            image.shape[1],
            image.shape[0],
            width,
            height,
        )
        image = cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
    return image


class Renderer:
    """
    Drive the text-path population frame by frame.

    Parameters
    ----------
    config:
        Scene configuration.
    rng:
        Random generator shared by every path. Defaults to one seeded from
        ``config.seed``.
    background:
        Optional preloaded BGR background; built from ``config`` when omitted.
    """

    def __init__(
        self,
        config: SceneConfig,
        rng: Optional[np.random.Generator] = None,
        background: Optional[np.ndarray] = None,
    ):
        self._config = config
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._background = background if background is not None else load_background(config)

        width, height = config.canvas.resolution
        if self._background.shape[:2] != (height, width):
            raise ValueError(
                "Background resolution mismatch: "
                f"background {self._background.shape[1::-1]}, expected {(width, height)}"
            )

        self.bounds = CanvasBounds.from_resolution(config.canvas.resolution)
        self.surface = CanvasSurface(width, height, text_height=config.overlay.glyph_size)
        self.population = PathPopulation(self.bounds, config.overlay, self._rng)

    @property
    def total_frames(self) -> int:
        return self._config.canvas.total_frames

    def step(self, frame_counter: int) -> Tuple[np.ndarray, TickStats]:
        """Advance one tick and return the composited frame."""
        self.surface.clear()
        stats = self.population.tick(frame_counter, self.surface)
        return self.surface.composite_over(self._background), stats

    def iter_frames(self) -> Iterator[Tuple[np.ndarray, TickStats]]:
        for frame_counter in range(1, self.total_frames + 1):
            yield self.step(frame_counter)

    def render(self) -> Tuple[np.ndarray, List[TickStats]]:
        """
        Render the full sequence.

        Returns
        -------
        frames:
            Array of shape (frames, height, width, 3) in uint8 BGR.
        stats:
            One :class:`TickStats` per frame.
        """
        width, height = self._config.canvas.resolution
        frames = np.empty((self.total_frames, height, width, 3), dtype=np.uint8)
        stats: List[TickStats] = []
        for idx, (frame, tick_stats) in enumerate(self.iter_frames()):
            frames[idx] = frame
            stats.append(tick_stats)
            if (idx + 1) % 100 == 0:
                logger.debug("Rendered %d/%d frames (%d live paths)", idx + 1, self.total_frames, tick_stats.live)
        return frames, stats

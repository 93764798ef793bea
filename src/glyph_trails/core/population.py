"""Population management for live text paths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List

import numpy as np

from ..config import OverlayConfig
from .curve import CanvasBounds
from .surface import DrawSurface
from .text_path import TextPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickStats:
    """Bookkeeping for a single tick."""

    frame: int
    spawned: int
    reaped: int
    live: int

    def to_dict(self) -> dict:
        return {"frame": self.frame, "spawned": self.spawned, "reaped": self.reaped, "live": self.live}


class PathPopulation:
    """
    The set of live :class:`TextPath` instances.

    Every ``spawn_interval`` frames a new path is added while fewer than
    ``max_paths`` are alive. Each tick advances and draws all paths, then
    drops the ones that have faded out.
    """

    def __init__(self, bounds: CanvasBounds, settings: OverlayConfig, rng: np.random.Generator):
        self.bounds = bounds
        self.settings = settings
        self.rng = rng
        self.paths: List[TextPath] = []

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[TextPath]:
        return iter(self.paths)

    def should_spawn(self, frame_counter: int) -> bool:
        return frame_counter % self.settings.spawn_interval == 0 and len(self.paths) < self.settings.max_paths

    def tick(self, frame_counter: int, surface: DrawSurface) -> TickStats:
        spawned = 0
        if self.should_spawn(frame_counter):
            self.paths.append(TextPath.spawn(self.bounds, self.settings, self.rng))
            spawned = 1

        for path in self.paths:
            path.update()
            path.render(surface)

        before = len(self.paths)
        self.paths = [path for path in self.paths if not path.is_expired()]
        reaped = before - len(self.paths)
        if spawned or reaped:
            logger.debug("Frame %d: spawned=%d reaped=%d live=%d", frame_counter, spawned, reaped, len(self.paths))

        return TickStats(frame=frame_counter, spawned=spawned, reaped=reaped, live=len(self.paths))

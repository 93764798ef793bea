from contextlib import contextmanager

import numpy as np
import pytest

from glyph_trails.config import OverlayConfig
from glyph_trails.core.curve import CanvasBounds


class RecordingSurface:
    """DrawSurface that records every call instead of drawing."""

    def __init__(self):
        self.calls = []
        self.depth = 0
        self.max_depth = 0

    @contextmanager
    def transform(self):
        self.calls.append(("push",))
        self.depth += 1
        self.max_depth = max(self.max_depth, self.depth)
        try:
            yield self
        finally:
            self.depth -= 1
            self.calls.append(("pop",))

    def translate(self, x, y):
        self.calls.append(("translate", x, y))

    def rotate(self, degrees):
        self.calls.append(("rotate", degrees))

    def scale(self, factor):
        self.calls.append(("scale", factor))

    def fill(self, color, alpha):
        self.calls.append(("fill", color, alpha))

    def stroke(self, color, alpha):
        self.calls.append(("stroke", color, alpha))

    def stroke_weight(self, weight):
        self.calls.append(("stroke_weight", weight))

    def text(self, label):
        self.calls.append(("text", label))

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def settings():
    return OverlayConfig()


@pytest.fixture
def bounds():
    return CanvasBounds(640.0, 480.0)


@pytest.fixture
def surface():
    return RecordingSurface()

"""
Drawing surfaces for the overlay.

Paths only talk to a :class:`DrawSurface`: a matrix-stack canvas with
scoped transforms, fill/stroke state and centred text. :class:`CanvasSurface`
implements it on a transparent BGRA NumPy buffer using OpenCV, so frames
can be composited over a background and exported.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, ContextManager, Dict, Iterator, List, Protocol, Tuple, Union

import cv2
import numpy as np

from ..colors import hex_to_bgr

logger = logging.getLogger(__name__)

Color = Union[str, Tuple[int, int, int]]


class DrawSurface(Protocol):
    """Drawing primitives used by text paths."""

    def transform(self) -> ContextManager[Any]:
        """Scope in which transform and style changes are reverted on exit."""
        ...

    def translate(self, x: float, y: float) -> None:
        ...

    def rotate(self, degrees: float) -> None:
        ...

    def scale(self, factor: float) -> None:
        ...

    def fill(self, color: Color, alpha: float) -> None:
        ...

    def stroke(self, color: Color, alpha: float) -> None:
        ...

    def stroke_weight(self, weight: float) -> None:
        ...

    def text(self, label: str) -> None:
        """Draw ``label`` centred on the current origin."""
        ...


@dataclass(frozen=True)
class _Style:
    fill_bgr: Tuple[int, int, int] = (255, 255, 255)
    fill_alpha: float = 255.0
    stroke_bgr: Tuple[int, int, int] = (0, 0, 0)
    stroke_alpha: float = 0.0
    stroke_weight: float = 1.0


def _to_bgr(color: Color) -> Tuple[int, int, int]:
    if isinstance(color, str):
        return hex_to_bgr(color)
    r, g, b = color
    return int(b), int(g), int(r)


def _clamp_alpha(alpha: float) -> float:
    return float(min(max(alpha, 0.0), 255.0))


class CanvasSurface:
    """
    Transparent BGRA canvas driven by an affine matrix stack.

    Parameters
    ----------
    width, height:
        Canvas size in pixels.
    text_height:
        Height of rendered text in pixels before any ``scale`` call.
    font_face:
        OpenCV Hershey font used for labels.
    """

    def __init__(
        self,
        width: int,
        height: int,
        text_height: float = 18.0,
        font_face: int = cv2.FONT_HERSHEY_DUPLEX,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self._font_face = font_face
        self._text_height = float(text_height)
        self._matrix = np.eye(3, dtype=np.float64)
        self._style = _Style()
        self._stack: List[Tuple[np.ndarray, _Style]] = []
        self._patch_cache: Dict[Tuple[str, int], Tuple[np.ndarray, np.ndarray]] = {}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def depth(self) -> int:
        return len(self._stack)

    def clear(self) -> None:
        self.buffer[:] = 0

    @contextmanager
    def transform(self) -> Iterator["CanvasSurface"]:
        self._stack.append((self._matrix.copy(), self._style))
        try:
            yield self
        finally:
            self._matrix, self._style = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        step = np.array([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])
        self._matrix = self._matrix @ step

    def rotate(self, degrees: float) -> None:
        theta = np.radians(degrees)
        c, s = np.cos(theta), np.sin(theta)
        step = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        self._matrix = self._matrix @ step

    def scale(self, factor: float) -> None:
        step = np.diag([factor, factor, 1.0])
        self._matrix = self._matrix @ step

    def fill(self, color: Color, alpha: float) -> None:
        self._style = replace(self._style, fill_bgr=_to_bgr(color), fill_alpha=_clamp_alpha(alpha))

    def stroke(self, color: Color, alpha: float) -> None:
        self._style = replace(self._style, stroke_bgr=_to_bgr(color), stroke_alpha=_clamp_alpha(alpha))

    def stroke_weight(self, weight: float) -> None:
        self._style = replace(self._style, stroke_weight=max(0.0, float(weight)))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def text(self, label: str) -> None:
        style = self._style
        if style.fill_alpha <= 0 and style.stroke_alpha <= 0:
            return

        stroke_px = max(1, int(round(style.stroke_weight * 2)))
        fill_mask, stroke_mask = self._label_masks(label, stroke_px)
        patch_h, patch_w = fill_mask.shape

        # Patch pixel -> canvas pixel, with the patch centre at the origin.
        centre = np.array([[1.0, 0.0, -patch_w / 2.0], [0.0, 1.0, -patch_h / 2.0], [0.0, 0.0, 1.0]])
        full = self._matrix @ centre

        corners = np.array([[0, 0, 1], [patch_w, 0, 1], [0, patch_h, 1], [patch_w, patch_h, 1]], dtype=np.float64)
        mapped = (full @ corners.T)[:2].T
        x0 = max(0, int(np.floor(mapped[:, 0].min())))
        y0 = max(0, int(np.floor(mapped[:, 1].min())))
        x1 = min(self.width, int(np.ceil(mapped[:, 0].max())) + 1)
        y1 = min(self.height, int(np.ceil(mapped[:, 1].max())) + 1)
        if x0 >= x1 or y0 >= y1:
            return

        offset = np.array([[1.0, 0.0, -x0], [0.0, 1.0, -y0], [0.0, 0.0, 1.0]])
        affine = (offset @ full)[:2]
        size = (x1 - x0, y1 - y0)

        if style.stroke_alpha > 0:
            coverage = cv2.warpAffine(
                stroke_mask, affine, size, flags=cv2.INTER_LINEAR, borderMode=cv2.BORDER_CONSTANT, borderValue=0
            )
            self._composite(coverage, style.stroke_bgr, style.stroke_alpha, x0, y0)
        if style.fill_alpha > 0:
            coverage = cv2.warpAffine(
                fill_mask, affine, size, flags=cv2.INTER_LINEAR, borderMode=cv2.BORDER_CONSTANT, borderValue=0
            )
            self._composite(coverage, style.fill_bgr, style.fill_alpha, x0, y0)

    def _label_masks(self, label: str, stroke_px: int) -> Tuple[np.ndarray, np.ndarray]:
        key = (label, stroke_px)
        cached = self._patch_cache.get(key)
        if cached is not None:
            return cached

        thickness = max(1, int(round(self._text_height / 12.0)))
        font_scale = cv2.getFontScaleFromHeight(self._font_face, int(round(self._text_height)), thickness)
        (text_w, text_h), baseline = cv2.getTextSize(label, self._font_face, font_scale, thickness)

        pad = stroke_px + 2
        patch_w = text_w + 2 * pad
        patch_h = text_h + baseline + 2 * pad
        # Vertical centring ignores the baseline so letters sit on the origin.
        org = (pad, pad + text_h + baseline // 2)

        fill_mask = np.zeros((patch_h, patch_w), dtype=np.uint8)
        cv2.putText(fill_mask, label, org, self._font_face, font_scale, 255, thickness, cv2.LINE_AA)
        stroke_mask = np.zeros_like(fill_mask)
        cv2.putText(stroke_mask, label, org, self._font_face, font_scale, 255, thickness + stroke_px, cv2.LINE_AA)

        self._patch_cache[key] = (fill_mask, stroke_mask)
        logger.debug("Rasterised label %r into %dx%d patch", label, patch_w, patch_h)
        return fill_mask, stroke_mask

    def _composite(self, coverage: np.ndarray, bgr: Tuple[int, int, int], alpha: float, x0: int, y0: int) -> None:
        """Blend a coloured coverage mask over the buffer (straight alpha)."""
        h, w = coverage.shape
        region = self.buffer[y0:y0 + h, x0:x0 + w].astype(np.float32)

        src_a = coverage.astype(np.float32) / 255.0 * (alpha / 255.0)
        dst_a = region[..., 3] / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)

        src_c = np.asarray(bgr, dtype=np.float32)[None, None, :]
        weighted = src_c * src_a[..., None] + region[..., :3] * (dst_a * (1.0 - src_a))[..., None]
        safe_a = np.where(out_a > 0, out_a, 1.0)[..., None]
        out_c = weighted / safe_a

        region[..., :3] = out_c
        region[..., 3] = out_a * 255.0
        self.buffer[y0:y0 + h, x0:x0 + w] = np.clip(np.rint(region), 0, 255).astype(np.uint8)

    def composite_over(self, background: np.ndarray) -> np.ndarray:
        """Return ``background`` (H, W, 3 BGR) with the canvas blended on top."""
        if background.shape[:2] != self.buffer.shape[:2]:
            raise ValueError(
                "Background resolution mismatch: "
                f"background {background.shape[1::-1]}, expected {(self.width, self.height)}"
            )
        alpha = self.buffer[..., 3:4].astype(np.float32) / 255.0
        blended = self.buffer[..., :3].astype(np.float32) * alpha + background.astype(np.float32) * (1.0 - alpha)
        return np.clip(np.rint(blended), 0, 255).astype(np.uint8)

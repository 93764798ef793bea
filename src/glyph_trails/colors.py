"""Color utility functions."""

from __future__ import annotations

import re
from typing import Tuple

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> Tuple[int, int, int]:
    """Return the (r, g, b) tuple for a ``#rgb`` or ``#rrggbb`` string."""
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def hex_to_bgr(value: str) -> Tuple[int, int, int]:
    """OpenCV channel order for a hex color."""
    r, g, b = parse_hex_color(value)
    return b, g, r

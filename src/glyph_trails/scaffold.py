"""Scene scaffolding utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import yaml

from .config import OverlayConfig


def align_to_frames(value_s: float, fps: float) -> float:
    frames = round(value_s * fps)
    return frames / fps if frames > 0 else 1.0 / fps


def write_stub(
    target_path: Path,
    scenario_name: str,
    resolution: Tuple[int, int] = (640, 480),
    fps: float = 10.0,
    duration_s: float = 30.0,
    label: str = "NYU",
    seed: int = 0,
) -> Path:
    """Write a YAML scene with every overlay option spelled out."""
    target_path = Path(target_path).resolve()
    target_path.parent.mkdir(parents=True, exist_ok=True)

    overlay = OverlayConfig(label=label).model_dump(mode="json")

    stub = {
        "canvas": {
            "resolution": [int(resolution[0]), int(resolution[1])],
            "fps": float(fps),
            "duration_s": float(align_to_frames(duration_s, fps)),
            "background": "#fffceb",
        },
        "overlay": overlay,
        "seed": int(seed),
        "metadata": {
            "scenario": scenario_name,
        },
    }

    target_path.write_text(yaml.safe_dump(stub, sort_keys=False), encoding="utf-8")
    return target_path

"""Output exporters for rendered overlays.

Provides helpers for writing rendered frames to video files, per-frame
population statistics, JSON manifests, and optional PNG frame stacks.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np

from .config import SceneConfig
from .core.population import TickStats
from .settings import output_root as default_output_root

DEFAULT_VIDEO_CODEC = "XVID"


def determine_scenario_name(config: SceneConfig, fallback: str = "scene") -> str:
    """
    Determine a filesystem-friendly scene name.

    Preference order:
    1. `config.metadata["scenario"]`
    2. `config.metadata["name"]`
    3. Provided fallback string
    """
    for key in ("scenario", "name"):
        value = config.metadata.get(key)
        if isinstance(value, str) and value.strip():
            return _sanitize_name(value)
    return _sanitize_name(fallback)


def _sanitize_name(name: str) -> str:
    safe = "".join(ch if ch.isalnum() or ch in ("-", "_") else "_" for ch in name.strip().lower())
    return safe or "scene"


def prepare_output_directory(output_root: Path, timestamp: Optional[str] = None) -> Path:
    """
    Create the directory where all artefacts for a render will be stored.
    """
    ts = timestamp or datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    output_dir = output_root / "overlays" / ts
    counter = 1
    while output_dir.exists():
        output_dir = output_root / "overlays" / f"{ts}_{counter}"
        counter += 1

    output_dir.mkdir(parents=True, exist_ok=False)
    return output_dir


def export_video(frames: np.ndarray, fps: float, output_path: Path, codec: str = DEFAULT_VIDEO_CODEC) -> None:
    """
    Write BGR frames to a video file.
    """
    if frames.ndim != 4 or frames.shape[-1] != 3:
        raise ValueError("Expected frames array with shape (frames, height, width, 3)")

    _, height, width, _ = frames.shape
    fourcc = cv2.VideoWriter_fourcc(*codec)
    writer = cv2.VideoWriter(str(output_path), fourcc, fps, (width, height), isColor=True)
    if not writer.isOpened():
        raise IOError(f"Failed to open video writer at {output_path}")

    try:
        for frame in frames:
            writer.write(frame)
    finally:
        writer.release()


def export_population_csv(stats: Sequence[TickStats], output_path: Path) -> None:
    """
    Write one row per frame with spawn/reap counts and the live population.
    """
    fieldnames = ["frame", "spawned", "reaped", "live"]
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for record in stats:
            writer.writerow(record.to_dict())


def export_metadata_json(config: SceneConfig, stats: Sequence[TickStats], output_path: Path) -> None:
    """
    Write a JSON manifest with the scene configuration and run totals.
    """
    payload = {
        "canvas": config.canvas.model_dump(mode="json"),
        "overlay": config.overlay.model_dump(mode="json"),
        "seed": config.seed,
        "totals": {
            "frames": len(stats),
            "spawned": sum(record.spawned for record in stats),
            "reaped": sum(record.reaped for record in stats),
            "peak_live": max((record.live for record in stats), default=0),
        },
        "metadata": config.metadata,
    }

    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def export_png_frames(frames: np.ndarray, frames_dir: Path, prefix: str = "frame_", digits: int = 4) -> None:
    """
    Save individual frames as PNG images.
    """
    frames_dir.mkdir(parents=True, exist_ok=True)
    template = f"{prefix}{{:0{digits}d}}.png"
    for idx, frame in enumerate(frames):
        cv2.imwrite(str(frames_dir / template.format(idx)), frame)


def export_render_outputs(
    frames: np.ndarray,
    stats: Sequence[TickStats],
    config: SceneConfig,
    output_root: Optional[Path] = None,
    include_frames: bool = False,
    codec: str = DEFAULT_VIDEO_CODEC,
    timestamp: Optional[str] = None,
) -> Path:
    """
    Export all default artefacts for a render.

    Returns the path to the directory containing the artefacts.
    """
    if output_root is None:
        output_root = default_output_root()
    else:
        output_root = Path(output_root)
    output_root.mkdir(parents=True, exist_ok=True)

    scenario_name = determine_scenario_name(config)
    output_dir = prepare_output_directory(output_root, timestamp=timestamp)

    export_video(frames, float(config.canvas.fps), output_dir / f"{scenario_name}.avi", codec=codec)
    export_population_csv(stats, output_dir / f"{scenario_name}_population.csv")
    export_metadata_json(config, stats, output_dir / "render_metadata.json")

    if include_frames:
        export_png_frames(frames, output_dir / "frames")

    return output_dir

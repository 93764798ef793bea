"""
Command-line interface for the text-path overlay renderer.

Usage:
    glyph-trails render path/to/scene.yaml [--output outputs] [--seed N] [--include-frames]
    glyph-trails validate path/to/scene.yaml
    glyph-trails preview path/to/scene.yaml --output preview.png [--paths 8]
    glyph-trails scaffold path/to/scene.yaml [--scenario name] [--fps 10] [--duration 30]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .config import SceneConfig, load_scene_config
from .core.curve import CanvasBounds
from .core.renderer import Renderer
from .core.text_path import TextPath
from .exporters import DEFAULT_VIDEO_CODEC, export_render_outputs
from .scaffold import write_stub

Logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def add_shared_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "config",
        type=Path,
        help="Path to the YAML file describing the scene.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glyph-trails",
        description="Render animated text paths from YAML scenes.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render",
        help="Render a scene and export outputs (.avi, .csv, .json, optional PNG frames).",
    )
    add_shared_config_argument(render_parser)
    render_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Root directory for exported artefacts (defaults to GLYPH_TRAILS_OUTPUTS or outputs/).",
    )
    render_parser.add_argument("--seed", type=int, default=None, help="Override the scene seed.")
    render_parser.add_argument(
        "--codec",
        type=str,
        default=DEFAULT_VIDEO_CODEC,
        help=f"FourCC codec for AVI export (default: {DEFAULT_VIDEO_CODEC}).",
    )
    render_parser.add_argument(
        "--include-frames",
        action="store_true",
        help="Also export individual PNG frames alongside the video.",
    )
    render_parser.add_argument(
        "--timestamp",
        type=str,
        default=None,
        help="Override timestamp component of the output directory (mainly for testing).",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a scene and print a summary without rendering.",
    )
    add_shared_config_argument(validate_parser)

    preview_parser = subparsers.add_parser(
        "preview",
        help="Plot a batch of generated paths and their glyph positions to a PNG.",
    )
    add_shared_config_argument(preview_parser)
    preview_parser.add_argument("--output", type=Path, required=True, help="Path of the preview PNG.")
    preview_parser.add_argument("--paths", type=int, default=8, help="Number of paths to plot (default 8).")
    preview_parser.add_argument("--seed", type=int, default=None, help="Override the scene seed.")

    scaffold_parser = subparsers.add_parser(
        "scaffold",
        help="Create a stub YAML scene.",
    )
    scaffold_parser.add_argument("path", type=Path, help="Path where the YAML stub will be written.")
    scaffold_parser.add_argument("--scenario", type=str, default="new_scene", help="Scene name metadata.")
    scaffold_parser.add_argument("--label", type=str, default="NYU", help="Label drawn along the paths.")
    scaffold_parser.add_argument("--fps", type=float, default=10.0, help="Frames per second (default 10).")
    scaffold_parser.add_argument("--duration", type=float, default=30.0, help="Duration in seconds (default 30).")
    scaffold_parser.add_argument("--seed", type=int, default=0, help="Seed stored in the scene (default 0).")

    return parser


def summarize_configuration(config_path: Path, config: SceneConfig) -> str:
    canvas = config.canvas
    overlay = config.overlay
    background = str(canvas.background_image) if canvas.background_image is not None else canvas.background
    lines = [
        f"Configuration: {config_path}",
        f"  Canvas: {canvas.resolution[0]}x{canvas.resolution[1]} px | "
        f"{canvas.duration_s:.3f} s @ {canvas.fps:.2f} fps ({canvas.total_frames} frames)",
        f"  Background: {background}",
        f"  Label: {overlay.label!r} | color {overlay.color} | size {overlay.glyph_size} px | "
        f"spacing {overlay.spacing:.1f} px",
        f"  Population: max {overlay.max_paths} paths, spawn every {overlay.spawn_interval} frames",
        f"  Lifespan: {overlay.lifespan_range[0]}-{overlay.lifespan_range[1]} frames | "
        f"fade in {overlay.fade_in_frames} / out {overlay.fade_out_frames}",
        f"  Seed: {config.seed}",
    ]
    return "\n".join(lines)


def _with_seed(config: SceneConfig, seed: Optional[int]) -> SceneConfig:
    if seed is None:
        return config
    return config.model_copy(update={"seed": seed})


def render_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = _with_seed(load_scene_config(config_path), args.seed)
        renderer = Renderer(config)
        frames, stats = renderer.render()
        output_dir = export_render_outputs(
            frames,
            stats,
            config,
            output_root=args.output,
            include_frames=args.include_frames,
            codec=args.codec,
            timestamp=args.timestamp,
        )
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Render failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    Logger.info("Render complete. Artefacts written to: %s", output_dir)
    return 0


def validate_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = load_scene_config(config_path)
        print(summarize_configuration(config_path, config))
        # Builds the background so a broken image path fails here too.
        Renderer(config)
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Validation failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    Logger.info("Validation succeeded.")
    return 0


def preview_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = _with_seed(load_scene_config(config_path), args.seed)
        _write_preview_image(args.output, config, max(1, args.paths))
    except Exception as exc:  # noqa: BLE001
        Logger.error("Preview failed: %s", exc)
        return 1

    Logger.info("Preview image saved to %s", args.output)
    return 0


def scaffold_command(args: argparse.Namespace) -> int:
    try:
        write_stub(
            target_path=args.path,
            scenario_name=args.scenario,
            fps=args.fps,
            duration_s=args.duration,
            label=args.label,
            seed=args.seed,
        )
    except Exception as exc:  # noqa: BLE001
        Logger.error("Scaffold failed: %s", exc)
        return 1

    Logger.info("Scene stub written to %s", args.path)
    return 0


def _write_preview_image(output_path: Path, config: SceneConfig, num_paths: int) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    rng = np.random.default_rng(config.seed)
    bounds = CanvasBounds.from_resolution(config.canvas.resolution)
    width, height = config.canvas.resolution

    fig, ax = plt.subplots(figsize=(8, 8 * height / width))
    ax.set_facecolor(config.canvas.background)
    for _ in range(num_paths):
        path = TextPath.spawn(bounds, config.overlay, rng)
        path.update()
        ax.plot(path.points[:, 0], path.points[:, 1], color=config.overlay.color, alpha=0.4, linewidth=1)
        if path.glyphs:
            glyph_xy = np.array([glyph.position for glyph in path.glyphs])
            ax.scatter(glyph_xy[:, 0], glyph_xy[:, 1], s=8, color=config.overlay.color)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect("equal")
    ax.set_title("Path Preview")
    ax.set_xlabel("X (px)")
    ax.set_ylabel("Y (px)")
    fig.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "render":
        return render_command(args)
    if args.command == "validate":
        return validate_command(args)
    if args.command == "preview":
        return preview_command(args)
    if args.command == "scaffold":
        return scaffold_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Render the showcase scene.

This script renders the showcase scene (three walls, a disc, a glass
rectangle, a mirror sphere and an ellipse lit by two point lights) either as
a still image or as an animated GIF in which the disc slides along +x.

Usage:
    python -m examples.render_showcase [options]

Options:
    --width WIDTH       Image width in pixels (default: 256)
    --height HEIGHT     Image height in pixels (default: 256)
    --threads THREADS   Number of bands rendered in parallel (default: 8)
    --frames FRAMES     Number of animation frames; 1 renders a still (default: 32)
    --seed SEED         Seed for the random material colors (default: 0)
    --output OUTPUT     Output file path (default: showcase.gif)
    --channels N        Bytes per pixel, 3 (RGB) or 4 (RGBA) (default: 3)
    --quiet             Suppress progress output

Example:
    python -m examples.render_showcase --width 320 --height 240 --frames 1 --output still.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=256,
        help="Image width in pixels (default: 256)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=256,
        help="Image height in pixels (default: 256)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=8,
        help="Number of bands rendered in parallel (default: 8)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=32,
        help="Number of animation frames; 1 renders a still image (default: 32)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the random material colors (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="showcase.gif",
        help="Output file path (default: showcase.gif)",
    )
    parser.add_argument(
        "--channels",
        type=int,
        choices=(3, 4),
        default=3,
        help="Bytes per pixel, 3 (RGB) or 4 (RGBA) (default: 3)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_showcase(
    width: int = 256,
    height: int = 256,
    threads: int = 8,
    frames: int = 32,
    seed: int = 0,
    output_path: str = "showcase.gif",
    channels: int = 3,
    quiet: bool = False,
) -> Path:
    """Render the showcase scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        threads: Number of bands rendered in parallel.
        frames: Number of animation frames (1 for a still image).
        seed: Seed for the random material colors.
        output_path: Output file path; a GIF for animations.
        channels: Bytes per pixel (3 or 4).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.config import RenderSettings
    from whitted.core.scheduler import FrameScheduler
    from whitted.preview.export import save_animation, save_frame
    from whitted.scene.showcase import advance_animation, create_showcase_scene

    if frames < 1:
        raise ValueError(f"frames must be at least 1, got {frames}")

    if not quiet:
        print(f"Creating showcase scene ({width}x{height}, seed {seed})...")

    scene, camera = create_showcase_scene(frame_height=height, seed=seed)
    scheduler = FrameScheduler(
        RenderSettings(width=width, height=height, thread_count=threads, channels=channels)
    )

    if not quiet:
        print(f"Rendering {frames} frame(s) in {threads} band(s)...")

    start_time = time.time()
    buffers = []
    for frame_index in range(frames):
        buffers.append(scheduler.render(scene, camera))
        advance_animation(scene, frames)
        if not quiet:
            elapsed = time.time() - start_time
            fps = (frame_index + 1) / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {frame_index + 1}/{frames} frames - {fps:.1f} fps",
                end="",
                flush=True,
            )

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    if frames == 1:
        save_frame(buffers[0], width, height, output_file, channels)
    else:
        save_animation(buffers, width, height, output_file, channels=channels)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Bands run on Taichi's CPU worker threads, one band per worker
    ti.init(arch=ti.cpu, cpu_max_num_threads=max(1, args.threads))

    try:
        render_showcase(
            width=args.width,
            height=args.height,
            threads=args.threads,
            frames=args.frames,
            seed=args.seed,
            output_path=args.output,
            channels=args.channels,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

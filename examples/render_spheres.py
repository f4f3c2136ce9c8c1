#!/usr/bin/env python3
"""Render the default sphere scene.

Builds the eight-sphere scene, points the look-at camera at it and renders
with progressive accumulation, printing progress between batches.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH           Image width in pixels (default: 512)
    --height HEIGHT         Image height in pixels (default: 512)
    --samples SAMPLES       Number of samples per pixel (default: 4)
    --max-bounces BOUNCES   Bounce budget per path (default: 6)
    --sky                   Light escaped rays with the sky gradient
    --seed SEED             Seed of the random streams (default: 0)
    --output OUTPUT         Output file path (default: spheres.png)
    --batch-size SIZE       Samples per progress update (default: 1)
    --cpu                   Force the CPU backend
    --verbose               Enable debug logging
    --quiet                 Suppress progress output

Example:
    python examples/render_spheres.py --width 256 --height 256 --samples 64
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=4,
        help="Number of samples per pixel (default: 4)",
    )
    parser.add_argument(
        "--max-bounces",
        type=int,
        default=6,
        help="Bounce budget per path (default: 6)",
    )
    parser.add_argument(
        "--sky",
        action="store_true",
        help="Light escaped rays with the sky gradient",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the random streams (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1,
        help="Samples per progress update (default: 1)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 512,
    height: int = 512,
    num_samples: int = 4,
    max_bounces: int = 6,
    use_sky_color: bool = False,
    seed: int = 0,
    output_path: str = "spheres.png",
    batch_size: int = 1,
    quiet: bool = False,
) -> Path:
    """Render the default scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        max_bounces: Bounce budget per path.
        use_sky_color: Light escaped rays with the sky gradient.
        seed: Seed of the per-pixel random streams.
        output_path: Output file path (PNG).
        batch_size: Number of samples to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from softpt.camera.look_at import setup_camera
    from softpt.core.renderer import ProgressiveRenderer, RenderConfig
    from softpt.scene.default_scene import create_default_scene

    if num_samples < 1:
        raise ValueError(f"--samples must be at least 1, got {num_samples}")

    if not quiet:
        print(f"Creating sphere scene ({width}x{height})...")

    scene, camera = create_default_scene()
    logger.debug(f"Scene: {scene}")
    setup_camera(camera)

    config = RenderConfig(max_bounces=max_bounces, use_sky_color=use_sky_color, seed=seed)
    renderer = ProgressiveRenderer(width, height, config)

    if not quiet:
        print(f"Rendering {num_samples} samples per pixel...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=num_samples,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    logger.info(f"Wrote {output_file} ({renderer}) in {total_time:.2f}s")
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_bounces=args.max_bounces,
            use_sky_color=args.sky,
            seed=args.seed,
            output_path=args.output,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

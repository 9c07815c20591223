"""Render a scene from the command line.

Usage:
    python -m rmtracer [options]

Options:
    --scene FILE        JSON scene file (default: built-in scene)
    --width WIDTH       Image width in pixels (overrides the scene)
    --height HEIGHT     Image height in pixels (overrides the scene)
    --samples SAMPLES   Samples per pixel (overrides the scene)
    --seed SEED         Jitter seed for a reproducible render
    --output OUTPUT     Output file, .ppm or an image format Pillow knows
                        (default: buffer.ppm)
    --clamp             Clamp PPM channels to [0, 255]
    --exact-scanlines   Render exactly HEIGHT rows instead of HEIGHT + 1
    --batch-size SIZE   Samples per progress update (default: 4)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m rmtracer --width 400 --height 400 --samples 32 --seed 1
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rmtracer",
        description="Render a scene of spheres to a PPM image.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in scene)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--seed", type=int, default=None, help="Jitter seed")
    parser.add_argument(
        "--output",
        type=str,
        default="buffer.ppm",
        help="Output file path (default: buffer.ppm)",
    )
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clamp PPM channels to [0, 255]",
    )
    parser.add_argument(
        "--exact-scanlines",
        action="store_true",
        help="Render exactly HEIGHT rows instead of HEIGHT + 1",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=4,
        help="Samples per progress update (default: 4)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(args: argparse.Namespace) -> Path:
    """Build the scene described by the arguments, render it and save it.

    Taichi must already be initialized.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.

    Raises:
        ConfigurationError: If the scene or any override is invalid.
    """
    # Lazy imports to allow Taichi initialization first
    from rmtracer.core.renderer import Renderer
    from rmtracer.scene.config import SceneConfig, load_scene_config
    from rmtracer.scene.default_scene import create_scene_from_config, default_scene_config

    quiet = args.quiet

    config: SceneConfig = (
        load_scene_config(args.scene) if args.scene is not None else default_scene_config()
    )
    if args.width is not None:
        config.width = args.width
    if args.height is not None:
        config.height = args.height
    if args.samples is not None:
        config.samples_per_pixel = args.samples
    if args.seed is not None:
        config.seed = args.seed

    if not quiet:
        source = args.scene if args.scene is not None else "built-in scene"
        print(f"Creating scene from {source} ({config.width}x{config.height})...")

    scene, camera = create_scene_from_config(config)
    renderer = Renderer(
        camera,
        seed=config.seed,
        inclusive_scanlines=not args.exact_scanlines,
    )

    if not quiet:
        print(f"Rendering {len(scene)} objects at {camera.sample_count} samples per pixel...")

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

    image = renderer.render(batch_size=args.batch_size, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(args.output)
    renderer.save(output_file, clamp=args.clamp)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if args.preview:
        from rmtracer.preview.display import show_preview

        show_preview(image, title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        render_scene(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

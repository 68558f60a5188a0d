#!/usr/bin/env python3
"""Render a scene to a PNG file.

This script renders either the built-in demo scene (two spheres above a
floor plane) or a scene loaded from a JSON file, and saves the result.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene PATH            JSON scene file (default: built-in demo scene)
    --output OUTPUT         Output file path (default: scene.png)
    --width WIDTH           Override the image width in pixels
    --height HEIGHT         Override the image height in pixels
    --fov FOV               Override the field of view in degrees
    --clamp-light-power     Clamp negative light power to zero
    --sphere-roots POLICY   Root reported inside spheres: nearest or first-positive
    --cpu                   Force the CPU backend
    --quiet                 Suppress progress output

Example:
    python -m examples.render_scene --width 400 --height 300 --output demo.png
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
        description="Render a ray-cast scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="scene.png",
        help="Output file path (default: scene.png)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Override the image width in pixels",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Override the image height in pixels",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=None,
        help="Override the field of view in degrees",
    )
    parser.add_argument(
        "--clamp-light-power",
        action="store_true",
        help="Clamp negative light power to zero",
    )
    parser.add_argument(
        "--sphere-roots",
        choices=["nearest", "first-positive"],
        default="nearest",
        help="Root reported for rays starting inside a sphere (default: nearest)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_scene(
    scene_path: str | None = None,
    output_path: str = "scene.png",
    width: int | None = None,
    height: int | None = None,
    fov: float | None = None,
    clamp_light_power: bool = False,
    sphere_roots: str = "nearest",
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to a file.

    Args:
        scene_path: JSON scene file, or None for the demo scene.
        output_path: Output file path (PNG).
        width: Optional image width override.
        height: Optional image height override.
        fov: Optional field of view override.
        clamp_light_power: Clamp negative light power to zero.
        sphere_roots: "nearest" or "first-positive".
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.core.renderer import Renderer
    from raycaster.geometry.sphere import SphereRootPolicy
    from raycaster.preview.export import save_png
    from raycaster.scene.default_scene import create_default_scene
    from raycaster.scene.manager import RenderOptions, load_scene

    if scene_path is None:
        scene = create_default_scene()
    else:
        scene = load_scene(scene_path)

    if width is not None:
        scene.width = width
    if height is not None:
        scene.height = height
    if fov is not None:
        scene.fov = fov

    options = RenderOptions(
        clamp_light_power=clamp_light_power,
        sphere_root_policy=(
            SphereRootPolicy.FIRST_POSITIVE
            if sphere_roots == "first-positive"
            else SphereRootPolicy.NEAREST
        ),
    )

    if not quiet:
        source = scene_path or "demo scene"
        print(
            f"Rendering {source} ({scene.width}x{scene.height}, "
            f"{len(scene.elements)} elements)..."
        )

    start_time = time.time()

    renderer = Renderer(options)
    renderer.render(scene)

    output_file = Path(output_path)
    save_png(renderer, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")
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
        render_scene(
            scene_path=args.scene,
            output_path=args.output,
            width=args.width,
            height=args.height,
            fov=args.fov,
            clamp_light_power=args.clamp_light_power,
            sphere_roots=args.sphere_roots,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

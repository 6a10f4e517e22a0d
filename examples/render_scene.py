#!/usr/bin/env python3
"""Render the default sphere scene.

This script renders the four spheres over the checkerboard floor with one
primary ray per pixel, tone maps the result and writes it to disk.

Usage:
    python examples/render_scene.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov FOV           Vertical field of view in radians (default: 1.05)
    --output OUTPUT     Output file path (default: out.ppm)
    --batch-rows ROWS   Rows per progress update (default: 64)
    --arch {cpu,gpu}    Taichi backend (default: GPU with CPU fallback)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python examples/render_scene.py --width 512 --height 384 --output scene.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti

ARCHS = {"cpu": ti.cpu, "gpu": ti.gpu}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=1.05,
        help="Vertical field of view in radians (default: 1.05)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path (default: out.ppm)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=64,
        help="Rows per progress update (default: 64)",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHS),
        default=None,
        help="Taichi backend (default: GPU with CPU fallback)",
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


def render_scene(
    width: int = 1024,
    height: int = 768,
    fov: float = 1.05,
    output_path: str = "out.ppm",
    batch_rows: int = 64,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the default scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.
        output_path: Output file path; the extension selects the format.
        batch_rows: Number of rows to render between progress updates.
        preview: If True, show the image after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from tinyray.core.integrator import Shader
    from tinyray.core.renderer import FramebufferRenderer
    from tinyray.preview.export import save_render
    from tinyray.scene.default_scene import create_default_scene

    if not quiet:
        print(f"Creating scene ({width}x{height}, fov {fov})...")

    scene, camera = create_default_scene(width=width, height=height, fov=fov)
    renderer = FramebufferRenderer(Shader(scene), camera)

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(batch_rows=batch_rows, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_render(renderer, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from tinyray.preview.display import show_preview

        show_preview(renderer)

    return output_file


def init_taichi(arch: str | None, quiet: bool = False) -> None:
    """Initialize Taichi with the requested backend.

    With no explicit arch, the GPU backend is tried first and the CPU
    backend is used if it is unavailable.
    """
    if arch is not None:
        ti.init(arch=ARCHS[arch])
        if not quiet:
            print(f"Using {arch.upper()} backend")
        return

    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        init_taichi(args.arch, quiet=args.quiet)
        render_scene(
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            batch_rows=args.batch_rows,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

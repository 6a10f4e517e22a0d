"""Image export utilities for rendered images.

Images are tone mapped, scaled to 0-255, truncated to 8 bits and written
with Pillow. The file format follows the extension; the default output,
out.ppm, is a binary PPM (P6 header followed by raw RGB bytes).

Example:
    >>> from tinyray.preview.export import save_render
    >>>
    >>> renderer.render()
    >>> save_render(renderer, "out.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from tinyray.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from tinyray.core.renderer import FramebufferRenderer

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "out.ppm"


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "max",
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("max" or "clip").

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8. Channel
        values are truncated, not rounded.
    """
    processed = process_image_for_display(image, tone_map=tone_map)
    return (processed * 255).astype(np.uint8)


def save_image(
    image: npt.NDArray[np.float32],
    filepath: str | Path = DEFAULT_OUTPUT,
    *,
    tone_map: ToneMapMethod = "max",
) -> None:
    """Save a NumPy array as an 8-bit image file.

    Args:
        image: Linear image array of shape (H, W, 3), row 0 at the top.
        filepath: Output path; the extension selects the format.
        tone_map: Tone mapping method ("max" or "clip").

    Raises:
        ValueError: If image is not an (H, W, 3) array.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    image_uint8 = image_to_uint8(image, tone_map=tone_map)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
    logger.debug("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def save_render(
    renderer: FramebufferRenderer,
    filepath: str | Path = DEFAULT_OUTPUT,
    *,
    tone_map: ToneMapMethod = "max",
) -> None:
    """Save the rendered image of a renderer.

    Args:
        renderer: A renderer whose render() has completed.
        filepath: Output path; the extension selects the format.
        tone_map: Tone mapping method ("max" or "clip").

    Raises:
        RenderError: If the renderer has not rendered yet.
    """
    save_image(renderer.get_image_numpy(), filepath, tone_map=tone_map)

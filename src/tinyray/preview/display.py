"""Matplotlib-based preview display for rendered images.

The shader returns unbounded colors: a pixel can exceed 1 in any channel
(the red rubber and mirror materials saturate on purpose). Before display,
each pixel is scaled down by its largest channel whenever that channel is
above 1, which keeps the hue and brings the pixel back into [0, 1].

Example:
    >>> from tinyray.preview.display import show_preview
    >>>
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from tinyray.core.renderer import FramebufferRenderer


# Type alias for tone mapping options
ToneMapMethod = Literal["max", "clip"]


def tone_map_max(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Divide each pixel by max(1, max(r, g, b)).

    Pixels whose channels are all at most 1 are unchanged.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1] range (for non-negative input).
    """
    peak = np.max(image, axis=-1, keepdims=True)
    scale = np.maximum(peak, 1.0)
    return (image / scale).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "max",
) -> npt.NDArray[np.float32]:
    """Bring a rendered image into the displayable [0, 1] range.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: "max" scales saturated pixels by their largest channel,
            "clip" clamps every channel independently.

    Returns:
        Processed image ready for display, in [0, 1] range.

    Raises:
        ValueError: If tone_map is not a known method.
    """
    result = image.copy()

    if tone_map == "max":
        result = tone_map_max(result)
    elif tone_map != "clip":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = np.clip(result, 0.0, 1.0)

    return result.astype(np.float32)


def show_preview(
    renderer: FramebufferRenderer,
    *,
    tone_map: ToneMapMethod = "max",
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    Args:
        renderer: A renderer whose render() has completed.
        tone_map: Tone mapping method ("max" or "clip").
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        renderer.get_image_numpy(),
        tone_map=tone_map,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.width}x{renderer.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)

"""Preview module for output and visualization.

Components:
    display: Tone mapping and Matplotlib-based preview display
    export: 8-bit conversion and image file output via Pillow

Example:
    >>> from tinyray.preview import show_preview, save_render
    >>>
    >>> renderer.render()
    >>> save_render(renderer, "out.ppm")
    >>> show_preview(renderer)
"""

from tinyray.preview.display import (
    ToneMapMethod,
    process_image_for_display,
    show_preview,
    tone_map_max,
)
from tinyray.preview.export import (
    DEFAULT_OUTPUT,
    image_to_uint8,
    save_image,
    save_render,
)

__all__ = [
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_max",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_image",
    "save_render",
    "image_to_uint8",
    "DEFAULT_OUTPUT",
]

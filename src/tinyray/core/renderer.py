"""Framebuffer renderer: one primary ray per pixel.

This module provides a wrapper around the Shader that owns the framebuffer
and sweeps the camera over it:
- One Taichi parallel loop over the pixel grid, one ray per pixel center
- Rendering in row batches so the host can report progress
- Read-back as a (height, width, 3) float32 NumPy array, row 0 at the top

The stored colors are the raw shader output (unbounded, not tone mapped);
see tinyray.preview for the conversion to 8-bit images.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.core.integrator import Shader
    >>> from tinyray.core.renderer import FramebufferRenderer
    >>> from tinyray.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene(width=320, height=240)
    >>> renderer = FramebufferRenderer(Shader(scene), camera)
    >>> renderer.render(batch_rows=60)
    >>> image = renderer.get_image_numpy()
"""

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt
import taichi as ti

from tinyray.camera.pinhole import PinholeCamera, get_ray
from tinyray.core.integrator import Shader
from tinyray.core.ray import vec3

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class RenderError(RuntimeError):
    """Raised when the framebuffer is read before rendering or is invalid."""


@ti.data_oriented
class FramebufferRenderer:
    """Renders a Scene through a PinholeCamera into a framebuffer.

    Attributes:
        shader: The shader used for every pixel.
        camera: The camera configuration.
    """

    def __init__(self, shader: Shader, camera: PinholeCamera) -> None:
        """Allocate the framebuffer for the camera's image size.

        Args:
            shader: The shader to trace primary rays with.
            camera: The camera; its width and height fix the framebuffer size.
        """
        self.shader = shader
        self.camera = camera
        self._framebuffer = ti.Vector.field(
            3, dtype=ti.f32, shape=(camera.height, camera.width)
        )
        self._rendered = False

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    @property
    def is_rendered(self) -> bool:
        """Whether every row of the framebuffer has been rendered."""
        return self._rendered

    @ti.kernel
    def _render_rows(
        self,
        row_start: ti.i32,
        row_end: ti.i32,
        width: ti.i32,
        height: ti.i32,
        focal_distance: ti.f32,
        origin: vec3,
    ):
        for j, i in ti.ndrange((row_start, row_end), width):
            ray = get_ray(i, j, width, height, focal_distance, origin)
            color, _, _ = self.shader.trace(ray.origin, ray.direction, 0)
            self._framebuffer[j, i] = color

    def render_batches(self, batch_rows: int | None = None) -> Generator[tuple[int, int], None, None]:
        """Render the image, yielding progress after each batch of rows.

        Args:
            batch_rows: Number of rows per kernel launch. None renders the
                whole image in one launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If batch_rows is not positive.
        """
        total = self.height
        if batch_rows is None:
            batch_rows = total
        if batch_rows <= 0:
            raise ValueError(f"batch_rows = {batch_rows} must be positive")

        self._rendered = False
        origin = vec3(*self.camera.origin)
        focal_distance = self.camera.focal_distance

        row = 0
        while row < total:
            end = min(row + batch_rows, total)
            self._render_rows(row, end, self.width, total, focal_distance, origin)
            logger.debug("Rendered rows %d-%d of %d", row, end - 1, total)
            row = end
            yield (row, total)

        self._rendered = True

    def render(
        self,
        batch_rows: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render every pixel of the image.

        Args:
            batch_rows: Number of rows per kernel launch. None renders the
                whole image in one launch.
            callback: Optional callback called after each batch with
                (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(batch_rows=64, callback=progress)
        """
        for done, total in self.render_batches(batch_rows):
            if callback is not None:
                callback(done, total)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32. Row 0
            is the top of the image. Values are not clamped.

        Raises:
            RenderError: If render() has not completed, or the framebuffer
                holds NaN or infinite values.
        """
        if not self._rendered:
            raise RenderError("Framebuffer read before render() completed")

        image = self._framebuffer.to_numpy().astype(np.float32)
        if not np.all(np.isfinite(image)):
            bad = int(np.count_nonzero(~np.isfinite(image).all(axis=-1)))
            raise RenderError(f"Framebuffer has {bad} pixels with non-finite values")
        return image

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FramebufferRenderer(width={self.width}, height={self.height}, "
            f"rendered={self._rendered})"
        )

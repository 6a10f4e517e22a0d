"""Pinhole camera model for perspective projection ray generation.

The camera sits at a fixed origin and looks down the -z axis with +y up.
Pixel (i, j) counts columns from the left and rows from the top. Its
primary ray passes through the pixel center:

    x =  (i + 0.5) - width / 2
    y = -(j + 0.5) + height / 2
    z = -height / (2 tan(fov / 2))

and the direction is normalize((x, y, z)). The z term is the focal distance
in pixel units, so fov is the vertical field of view.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.camera.pinhole import PinholeCamera, get_ray
    >>>
    >>> camera = PinholeCamera(width=640, height=480)
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(320, 240, 640, 480, camera.focal_distance,
    ...                   ti.math.vec3(0.0, 0.0, 0.0))
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from tinyray.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians, in (0, pi).
        origin: Camera position in world space (x, y, z).

    Raises:
        ValueError: If the image size is not positive, fov is outside
            (0, pi), or origin is not a finite 3-vector.
    """

    width: int = 1024
    height: int = 768
    fov: float = 1.05
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view = {self.fov} must lie in (0, pi)")
        if len(self.origin) != 3:
            raise ValueError(f"origin needs 3 components, got {len(self.origin)}")
        origin = tuple(float(c) for c in self.origin)
        if not all(math.isfinite(c) for c in origin):
            raise ValueError(f"origin has non-finite components: {origin}")
        object.__setattr__(self, "origin", origin)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    @property
    def focal_distance(self) -> float:
        """Distance from the origin to the image plane, in pixels."""
        return self.height / (2.0 * math.tan(self.fov / 2.0))


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    focal_distance: ti.f32,
    origin: vec3,
) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    This function is designed to be called from within Taichi kernels.

    Args:
        pixel_i: Column index (0 = left).
        pixel_j: Row index (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        focal_distance: Image plane distance, PinholeCamera.focal_distance.
        origin: Camera position.

    Returns:
        A Ray with a unit direction.
    """
    x = (ti.cast(pixel_i, ti.f32) + 0.5) - ti.cast(width, ti.f32) / 2.0
    y = -(ti.cast(pixel_j, ti.f32) + 0.5) + ti.cast(height, ti.f32) / 2.0
    direction = normalize(vec3(x, y, -focal_distance))
    return make_ray(origin, direction)


# =============================================================================
# Utility Functions
# =============================================================================


def camera_ray_direction(camera: PinholeCamera, i: int, j: int) -> tuple[float, float, float]:
    """Compute the primary ray direction for a pixel on the host.

    Mirrors get_ray() with NumPy; useful for debugging and for casting a
    single pixel's ray through Shader.cast_ray().

    Args:
        camera: The camera configuration.
        i: Column index (0 = left).
        j: Row index (0 = top).

    Returns:
        The unit direction as a tuple.

    Raises:
        ValueError: If (i, j) lies outside the image.
    """
    if not (0 <= i < camera.width and 0 <= j < camera.height):
        raise ValueError(
            f"Pixel ({i}, {j}) outside {camera.width}x{camera.height} image"
        )
    direction = np.array(
        [
            (i + 0.5) - camera.width / 2.0,
            -(j + 0.5) + camera.height / 2.0,
            -camera.focal_distance,
        ],
        dtype=np.float64,
    )
    direction = direction / np.linalg.norm(direction)
    return (float(direction[0]), float(direction[1]), float(direction[2]))

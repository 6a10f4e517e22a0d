"""Camera module for view and ray generation.

Components:
    pinhole: Fixed-orientation pinhole camera looking down -z

Camera responsibilities:
    - Hold the image size, vertical field of view and position
    - Turn a pixel index into a primary ray through the pixel center

Ray generation is a Taichi function so primary rays are created inside the
parallel pixel loop; camera_ray_direction() repeats the same math on the
host.
"""

from .pinhole import PinholeCamera, camera_ray_direction, get_ray

__all__ = [
    "PinholeCamera",
    "get_ray",
    "camera_ray_direction",
]

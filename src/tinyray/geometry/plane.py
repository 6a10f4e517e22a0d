"""Implicit checkerboard ground plane.

The ground is the plane y = PLANE_HEIGHT, but only the rectangle
|x| < PLANE_HALF_WIDTH, PLANE_Z_FAR < z < PLANE_Z_NEAR counts as geometry.
It is not stored in the sphere table; the scene resolver tests it first.

Tiles are 2 x 2 units. The tile color is picked by the parity of
floor(0.5 x + 1000) + floor(0.5 z); the +1000 keeps the x term positive
across the whole board.

Example:
    >>> # Inside a Taichi kernel:
    >>> # rec = hit_checkerboard(origin, direction, 1e10)
    >>> # if rec.hit == 1:
    >>> #     color = checker_color(rec.point)
"""

import taichi as ti
import taichi.math as tm

from tinyray.core.ray import RAY_EPSILON

# Type alias for 3D vectors
vec3 = tm.vec3

PLANE_HEIGHT = -4.0
PLANE_HALF_WIDTH = 10.0
PLANE_Z_NEAR = -10.0
PLANE_Z_FAR = -30.0

# Below this |direction.y| the ray is treated as parallel to the plane
PARALLEL_EPSILON = 1e-3

CHECKER_ODD_COLOR = (0.3, 0.3, 0.3)
CHECKER_EVEN_COLOR = (0.3, 0.2, 0.1)

PLANE_NORMAL = vec3(0.0, 1.0, 0.0)
_ODD = vec3(*CHECKER_ODD_COLOR)
_EVEN = vec3(*CHECKER_EVEN_COLOR)


@ti.dataclass
class PlaneHitRecord:
    """Result of a ray-plane test.

    Attributes:
        hit: 1 if the ray hits the bounded board, else 0.
        t: Distance along the ray. Only valid if hit == 1.
        point: Intersection point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3


@ti.func
def hit_checkerboard(ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> PlaneHitRecord:
    """Intersect a ray with the bounded ground plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        t_max: Only hits strictly nearer than this are accepted.

    Returns:
        A PlaneHitRecord; hit is 0 for near-parallel rays, hits behind
        RAY_EPSILON, hits beyond t_max and points outside the board.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        d = (PLANE_HEIGHT - ray_origin.y) / ray_direction.y
        p = ray_origin + ray_direction * d
        inside = (
            ti.abs(p.x) < PLANE_HALF_WIDTH and p.z < PLANE_Z_NEAR and p.z > PLANE_Z_FAR
        )
        if d > RAY_EPSILON and d < t_max and inside:
            did_hit = 1
            hit_t = d
            hit_point = p

    return PlaneHitRecord(hit=did_hit, t=hit_t, point=hit_point)


@ti.func
def checker_color(point: vec3) -> vec3:
    """Diffuse color of the board tile containing point."""
    ix = ti.cast(ti.floor(0.5 * point.x + 1000.0), ti.i32)
    iz = ti.cast(ti.floor(0.5 * point.z), ti.i32)
    color = _EVEN
    if ((ix + iz) & 1) == 1:
        color = _ODD
    return color

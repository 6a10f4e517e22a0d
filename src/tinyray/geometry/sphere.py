"""Sphere primitive with geometric ray-sphere intersection.

This module provides a Sphere dataclass and the classic geometric
intersection test: project the sphere center onto the ray, compare the
squared distance between the center and its projection against the squared
radius, and step back along the ray by the half-chord length.

For a ray with unit direction d and origin o, and a sphere (c, r):

    L   = c - o
    tca = L . d             (distance to the projection of c)
    d2  = L . L - tca^2     (squared distance from c to the ray)
    thc = sqrt(r^2 - d2)    (half chord)

The nearer root tca - thc is used when it lies beyond RAY_EPSILON; otherwise
the farther root tca + thc (the ray starts inside the sphere).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from tinyray.core.ray import RAY_EPSILON

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a ray-sphere test.

    Attributes:
        hit: 1 if the ray intersects the sphere beyond RAY_EPSILON, else 0.
        t: Distance along the ray to the intersection. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord with the nearest root greater than RAY_EPSILON.
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 > RAY_EPSILON:
            did_hit = 1
            hit_t = t0
        elif t1 > RAY_EPSILON:
            did_hit = 1
            hit_t = t1

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)

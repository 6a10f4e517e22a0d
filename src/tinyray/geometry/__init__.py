"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: Implicit bounded checkerboard ground plane

All intersection routines are implemented as Taichi functions (@ti.func)
and reject hits closer than RAY_EPSILON so that secondary rays do not
re-hit the surface they leave from.

Ray-object intersection follows the pattern:
    rec = hit_shape(ray_origin, ray_direction, shape_data)
"""

from .plane import (
    CHECKER_EVEN_COLOR,
    CHECKER_ODD_COLOR,
    PLANE_HEIGHT,
    PLANE_NORMAL,
    PlaneHitRecord,
    checker_color,
    hit_checkerboard,
)
from .sphere import HitRecord, Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "PlaneHitRecord",
    "hit_checkerboard",
    "checker_color",
    "PLANE_HEIGHT",
    "PLANE_NORMAL",
    "CHECKER_ODD_COLOR",
    "CHECKER_EVEN_COLOR",
]

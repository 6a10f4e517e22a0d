"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector algebra and host-side vector checks
    integrator: Recursive Whitted-style shader (reflection, refraction,
        shadow-tested diffuse and specular lighting)
    renderer: Framebuffer sweep over all pixels with batched progress

All per-ray work runs in Taichi kernels; each pixel is traced independently
so the sweep parallelizes across the whole image.
"""

from .ray import (
    RAY_EPSILON,
    TOTAL_INTERNAL_REFLECTION,
    Ray,
    VectorIndexError,
    component,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    require_nonzero,
    to_vec3,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from tinyray.core.integrator or tinyray.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "reflect",
    "refract",
    "component",
    "to_vec3",
    "require_nonzero",
    "VectorIndexError",
    "RAY_EPSILON",
    "TOTAL_INTERNAL_REFLECTION",
]

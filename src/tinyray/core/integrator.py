"""Whitted-style recursive ray caster.

This module implements the shading of a single ray: find the nearest
surface, add shadow-tested diffuse and specular light from every point
light, and recursively trace one mirror-reflected and one refracted ray.
Rays that miss everything, or that are past the recursion limit, return the
sky color.

For a hit with material m the color is

    m.diffuse_color * diffuse * m.albedo[0]
    + white * specular * m.albedo[1]
    + reflect_color * m.albedo[2]
    + refract_color * m.albedo[3]

Both secondary rays are traced on every hit, even when their albedo weight
is zero, so the amount of work per pixel does not depend on the material.

Taichi functions cannot recurse. trace() therefore unrolls the recursion
with a small per-ray work stack of (origin, direction, depth, weight)
entries: every entry adds weight times its local color, and pushes its two
children with weight * albedo[2] and weight * albedo[3]. The sum is the same
as the recursive formula. The stack never holds more than MAX_DEPTH + 2
entries for a ray starting at depth 0.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.core.integrator import Shader
    >>> from tinyray.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> shader = Shader(scene)
    >>> color = shader.cast_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))  # sky
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinyray.core.ray import normalize, reflect, refract, require_nonzero, to_vec3
from tinyray.materials.phong import Material, diffuse_term, local_color, specular_term
from tinyray.scene.intersection import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Rays deeper than this return the sky color
MAX_DEPTH = 4

# Color of rays that escape the scene
SKY_COLOR = (0.2, 0.7, 0.8)
_SKY = vec3(*SKY_COLOR)

# Per-ray work stack capacity
STACK_SIZE = 8


@dataclass(frozen=True)
class TraceStats:
    """Recursion statistics for one traced ray.

    Attributes:
        max_depth: Deepest recursion level reached (at most MAX_DEPTH + 1).
        ray_count: Number of rays the recursion cast, shadow rays excluded.
    """

    max_depth: int
    ray_count: int


@ti.data_oriented
class Shader:
    """Recursive ray caster over an immutable Scene.

    Attributes:
        scene: The scene rays are traced against.
    """

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

        # Host query results
        self._ray_color = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._stat_max_depth = ti.field(dtype=ti.i32, shape=())
        self._stat_ray_count = ti.field(dtype=ti.i32, shape=())

    # =========================================================================
    # Shading
    # =========================================================================

    @ti.func
    def direct_lighting(
        self,
        point: vec3,
        normal: vec3,
        view_direction: vec3,
        material: Material,
    ) -> vec3:
        """Diffuse and specular light arriving directly from the point lights.

        A light is skipped when the shadow ray toward it hits a surface
        nearer than the light itself.

        Args:
            point: The shaded surface point.
            normal: Unit normal at the point.
            view_direction: Direction of the ray that hit the point.
            material: Material at the point.

        Returns:
            The local (non-recursive) part of the color.
        """
        diffuse = 0.0
        specular = 0.0

        for k in range(self.scene.light_count):
            to_light = self.scene.light_position(k) - point
            light_distance = tm.length(to_light)
            light_direction = normalize(to_light)

            shadow = self.scene.intersect(point, light_direction)
            occluded = 0
            if shadow.hit == 1 and tm.length(shadow.point - point) < light_distance:
                occluded = 1

            if occluded == 0:
                diffuse += diffuse_term(light_direction, normal)
                specular += specular_term(
                    light_direction, normal, view_direction, material.specular_exponent
                )

        return local_color(material, diffuse, specular)

    @ti.func
    def trace(self, ray_origin: vec3, ray_direction: vec3, depth: ti.i32):
        """Compute the color seen along a ray.

        Args:
            ray_origin: The starting point of the ray.
            ray_direction: The unit direction of the ray.
            depth: Recursion level of this ray (0 for primary rays).

        Returns:
            A tuple (color, max_depth, ray_count): the unbounded RGB color,
            the deepest level visited and the number of rays cast.
        """
        origins = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
        directions = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
        depths = ti.Vector.zero(ti.i32, STACK_SIZE)
        weights = ti.Vector.zero(ti.f32, STACK_SIZE)

        for c in ti.static(range(3)):
            origins[0, c] = ray_origin[c]
            directions[0, c] = ray_direction[c]
        depths[0] = depth
        weights[0] = 1.0
        top = 1

        color = vec3(0.0, 0.0, 0.0)
        max_depth = depth
        ray_count = 0

        while top > 0:
            top -= 1
            origin = vec3(origins[top, 0], origins[top, 1], origins[top, 2])
            direction = vec3(directions[top, 0], directions[top, 1], directions[top, 2])
            level = depths[top]
            weight = weights[top]

            ray_count += 1
            max_depth = ti.max(max_depth, level)

            contribution = _SKY
            if level <= MAX_DEPTH:
                rec = self.scene.intersect(origin, direction)
                if rec.hit == 1:
                    albedo = rec.material.albedo
                    reflect_direction = normalize(reflect(direction, rec.normal))
                    refract_direction = normalize(
                        refract(direction, rec.normal, rec.material.refractive_index, 1.0)
                    )
                    contribution = self.direct_lighting(
                        rec.point, rec.normal, direction, rec.material
                    )

                    # Children: reflection, then refraction
                    for c in ti.static(range(3)):
                        origins[top, c] = rec.point[c]
                        directions[top, c] = reflect_direction[c]
                    depths[top] = level + 1
                    weights[top] = weight * albedo[2]

                    for c in ti.static(range(3)):
                        origins[top + 1, c] = rec.point[c]
                        directions[top + 1, c] = refract_direction[c]
                    depths[top + 1] = level + 1
                    weights[top + 1] = weight * albedo[3]
                    top += 2

            color += weight * contribution

        return color, max_depth, ray_count

    # =========================================================================
    # Host Queries
    # =========================================================================

    @ti.kernel
    def _cast_ray_kernel(self, ray_origin: vec3, ray_direction: vec3, depth: ti.i32):
        # Wrapping loop keeps the per-ray loops serial
        for _ in range(1):
            color, max_depth, ray_count = self.trace(ray_origin, ray_direction, depth)
            self._ray_color[None] = color
            self._stat_max_depth[None] = max_depth
            self._stat_ray_count[None] = ray_count

    def _run(self, origin: Sequence[float], direction: Sequence[float], depth: int) -> None:
        if depth < 0:
            raise ValueError(f"Recursion depth = {depth} must be non-negative")
        require_nonzero(direction)
        self._cast_ray_kernel(to_vec3(origin), to_vec3(direction), depth)

    def cast_ray(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        depth: int = 0,
    ) -> tuple[float, float, float]:
        """Compute the color seen along a single ray.

        This is a Python-callable entry point for testing and debugging. For
        whole images, use FramebufferRenderer which traces all pixels in
        parallel.

        Args:
            origin: Ray origin (x, y, z).
            direction: Unit ray direction (x, y, z).
            depth: Recursion level to start at. Rays with depth > MAX_DEPTH
                return the sky color.

        Returns:
            Tuple of (R, G, B), not clamped.

        Raises:
            ValueError: If the direction has zero length or the wrong arity,
                or depth is negative.
        """
        self._run(origin, direction, depth)
        color = self._ray_color[None]
        return (float(color[0]), float(color[1]), float(color[2]))

    def trace_stats(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        depth: int = 0,
    ) -> TraceStats:
        """Trace a ray and report how far the recursion went."""
        self._run(origin, direction, depth)
        stats = TraceStats(
            max_depth=int(self._stat_max_depth[None]),
            ray_count=int(self._stat_ray_count[None]),
        )
        logger.debug("Traced ray: %s", stats)
        return stats

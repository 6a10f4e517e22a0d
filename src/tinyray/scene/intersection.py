"""Scene-level nearest-hit resolution.

This module provides the device-resident Scene: an immutable SceneConfig
uploaded once into Taichi fields (Structure of Arrays, one slot per sphere
and per light). The scene is passed by reference to the shader and never
modified after construction.

Scene.intersect() tests the bounded checkerboard plane first and then every
sphere in table order, keeping the strictly nearest hit. Anything at or
beyond NO_HIT_DISTANCE is reported as a miss.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.scene.default_scene import default_scene_config
    >>> from tinyray.scene.intersection import Scene
    >>> scene = Scene(default_scene_config())
    >>> hit = scene.intersect_ray((-3.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.distance  # front of the ivory sphere
    14.0
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinyray.core.ray import require_nonzero, to_vec3
from tinyray.geometry.plane import PLANE_NORMAL, checker_color, hit_checkerboard
from tinyray.geometry.sphere import Sphere, hit_sphere, sphere_normal
from tinyray.materials.phong import (
    Material,
    PhongMaterial,
    default_material,
    with_diffuse_color,
)
from tinyray.scene.manager import SceneConfig

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Initial "nearest so far" distance
FAR_DISTANCE = 1e10

# Hits at or beyond this distance count as misses
NO_HIT_DISTANCE = 1000.0


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: 1 if the ray hit the plane or a sphere, 0 on a miss.
        t: Distance along the ray to the nearest hit.
        point: The nearest hit point. Only valid if hit == 1.
        normal: Outward unit normal at the hit point. Only valid if hit == 1.
        material: Material of the surface hit. On a miss this is whatever
            the resolver held last and must not be used.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


@dataclass(frozen=True)
class SceneHit:
    """Host-side copy of a hit, returned by Scene.intersect_ray().

    Attributes:
        distance: Distance along the ray.
        point: Hit point.
        normal: Outward unit normal.
        material: Material of the surface, read back from the device.
    """

    distance: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    material: PhongMaterial


def _to_tuple(v) -> tuple[float, ...]:
    return tuple(float(c) for c in v)


@ti.data_oriented
class Scene:
    """Immutable scene stored in Taichi fields.

    Attributes:
        config: The SceneConfig the fields were built from.
        sphere_count: Number of spheres (compile-time constant for kernels).
        light_count: Number of lights (compile-time constant for kernels).
    """

    def __init__(self, config: SceneConfig) -> None:
        """Upload a scene description to the device.

        Args:
            config: The validated scene description.
        """
        self.config = config
        self.sphere_count = config.sphere_count
        self.light_count = config.light_count

        # Fields need at least one slot even when the table is empty
        n_spheres = max(self.sphere_count, 1)
        n_lights = max(self.light_count, 1)

        # Sphere storage: Structure of Arrays layout
        self.sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=n_spheres)
        self.sphere_radii = ti.field(dtype=ti.f32, shape=n_spheres)
        self.sphere_refractive_indices = ti.field(dtype=ti.f32, shape=n_spheres)
        self.sphere_albedos = ti.Vector.field(4, dtype=ti.f32, shape=n_spheres)
        self.sphere_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=n_spheres)
        self.sphere_specular_exponents = ti.field(dtype=ti.f32, shape=n_spheres)

        self.light_positions = ti.Vector.field(3, dtype=ti.f32, shape=n_lights)

        # Single-ray query results for intersect_ray()
        self._query_hit = ti.field(dtype=ti.i32, shape=())
        self._query_t = ti.field(dtype=ti.f32, shape=())
        self._query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_refractive_index = ti.field(dtype=ti.f32, shape=())
        self._query_albedo = ti.Vector.field(4, dtype=ti.f32, shape=())
        self._query_diffuse_color = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_specular_exponent = ti.field(dtype=ti.f32, shape=())

        self._upload()

    def _upload(self) -> None:
        for i, sphere in enumerate(self.config.spheres):
            material = sphere.material
            self.sphere_centers[i] = list(sphere.center)
            self.sphere_radii[i] = sphere.radius
            self.sphere_refractive_indices[i] = material.refractive_index
            self.sphere_albedos[i] = list(material.albedo)
            self.sphere_diffuse_colors[i] = list(material.diffuse_color)
            self.sphere_specular_exponents[i] = material.specular_exponent

        for k, light in enumerate(self.config.lights):
            self.light_positions[k] = list(light)

        logger.debug(
            "Uploaded scene with %d spheres and %d lights",
            self.sphere_count,
            self.light_count,
        )

    # =========================================================================
    # Device Access
    # =========================================================================

    @ti.func
    def sphere(self, i: ti.i32) -> Sphere:
        """Geometry of sphere i."""
        return Sphere(center=self.sphere_centers[i], radius=self.sphere_radii[i])

    @ti.func
    def sphere_material(self, i: ti.i32) -> Material:
        """Material of sphere i."""
        return Material(
            refractive_index=self.sphere_refractive_indices[i],
            albedo=self.sphere_albedos[i],
            diffuse_color=self.sphere_diffuse_colors[i],
            specular_exponent=self.sphere_specular_exponents[i],
        )

    @ti.func
    def light_position(self, k: ti.i32) -> vec3:
        """Position of light k."""
        return self.light_positions[k]

    @ti.func
    def intersect(self, ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
        """Find the nearest surface along a ray.

        The plane is tested first, then the spheres in table order. A
        candidate replaces the current best only when strictly nearer, so
        equal distances keep the first-tested surface.

        Args:
            ray_origin: The starting point of the ray.
            ray_direction: The unit direction of the ray.

        Returns:
            A SceneHitRecord; hit is 0 when nothing lies nearer than
            NO_HIT_DISTANCE.
        """
        nearest = FAR_DISTANCE
        point = vec3(0.0, 0.0, 0.0)
        normal = vec3(0.0, 0.0, 0.0)
        material = default_material()

        plane = hit_checkerboard(ray_origin, ray_direction, nearest)
        if plane.hit == 1:
            nearest = plane.t
            point = plane.point
            normal = PLANE_NORMAL
            # The board keeps the default material, only the tile color changes
            material = with_diffuse_color(default_material(), checker_color(plane.point))

        for i in range(self.sphere_count):
            sphere = self.sphere(i)
            rec = hit_sphere(ray_origin, ray_direction, sphere)
            if rec.hit == 1 and rec.t < nearest:
                nearest = rec.t
                point = ray_origin + ray_direction * nearest
                normal = sphere_normal(sphere, point)
                material = self.sphere_material(i)

        did_hit = 1
        if nearest >= NO_HIT_DISTANCE:
            did_hit = 0

        return SceneHitRecord(
            hit=did_hit,
            t=nearest,
            point=point,
            normal=normal,
            material=material,
        )

    # =========================================================================
    # Host Queries
    # =========================================================================

    @ti.kernel
    def _query_kernel(self, ray_origin: vec3, ray_direction: vec3):
        # Wrapping loop keeps the sphere loop serial
        for _ in range(1):
            rec = self.intersect(ray_origin, ray_direction)
            self._query_hit[None] = rec.hit
            self._query_t[None] = rec.t
            self._query_point[None] = rec.point
            self._query_normal[None] = rec.normal
            self._query_refractive_index[None] = rec.material.refractive_index
            self._query_albedo[None] = rec.material.albedo
            self._query_diffuse_color[None] = rec.material.diffuse_color
            self._query_specular_exponent[None] = rec.material.specular_exponent

    def intersect_ray(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
    ) -> SceneHit | None:
        """Resolve a single ray from Python.

        Args:
            origin: Ray origin (x, y, z).
            direction: Ray direction (x, y, z), expected to be unit length.

        Returns:
            A SceneHit for the nearest surface, or None on a miss.

        Raises:
            ValueError: If the direction has zero length or the wrong arity.
        """
        require_nonzero(direction)
        self._query_kernel(to_vec3(origin), to_vec3(direction))

        if self._query_hit[None] == 0:
            return None

        material = PhongMaterial(
            refractive_index=float(self._query_refractive_index[None]),
            albedo=_to_tuple(self._query_albedo[None]),
            diffuse_color=_to_tuple(self._query_diffuse_color[None]),
            specular_exponent=float(self._query_specular_exponent[None]),
        )
        return SceneHit(
            distance=float(self._query_t[None]),
            point=_to_tuple(self._query_point[None]),
            normal=_to_tuple(self._query_normal[None]),
            material=material,
        )

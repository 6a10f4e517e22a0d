"""Immutable host-side scene description.

A scene is described by plain frozen dataclasses before anything touches
Taichi: a tuple of spheres, each carrying its own copy of a PhongMaterial,
and a tuple of point light positions. The description is validated once on
construction and then handed to tinyray.scene.intersection.Scene, which
uploads it to device fields.

Example:
    >>> from tinyray.materials.phong import IVORY
    >>> from tinyray.scene.manager import SceneConfig, SphereInfo
    >>> config = SceneConfig(
    ...     spheres=(SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, material=IVORY),),
    ...     lights=((10.0, 10.0, 10.0),),
    ... )
    >>> config.sphere_count
    1
"""

import math
from dataclasses import dataclass

from tinyray.materials.phong import PhongMaterial

# Upper bounds keep the per-ray loops short; the fixed scene uses 4 and 3
MAX_SPHERES = 256
MAX_LIGHTS = 64


def _as_point(values, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} needs 3 components, got {len(values)}")
    point = (float(values[0]), float(values[1]), float(values[2]))
    if not all(math.isfinite(c) for c in point):
        raise ValueError(f"{name} has non-finite components: {point}")
    return point


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene description.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (must be positive).
        material: The material copied into the sphere.

    Raises:
        ValueError: If the center is not a finite 3-vector or the radius is
            not positive.
    """

    center: tuple[float, float, float]
    radius: float
    material: PhongMaterial

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_point(self.center, "center"))
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius = {self.radius} must be positive")
        object.__setattr__(self, "radius", float(self.radius))


@dataclass(frozen=True)
class SceneConfig:
    """Complete, immutable description of a scene.

    Attributes:
        spheres: Spheres in intersection-test order.
        lights: Point light positions in shading order.

    Raises:
        ValueError: If a light is not a finite 3-vector, an entry of spheres
            is not a SphereInfo, or a primitive limit is exceeded.
    """

    spheres: tuple[SphereInfo, ...] = ()
    lights: tuple[tuple[float, float, float], ...] = ()

    def __post_init__(self) -> None:
        spheres = tuple(self.spheres)
        for sphere in spheres:
            if not isinstance(sphere, SphereInfo):
                raise ValueError(f"Expected SphereInfo, got {type(sphere).__name__}")
        if len(spheres) > MAX_SPHERES:
            raise ValueError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        lights = tuple(_as_point(light, "light") for light in self.lights)
        if len(lights) > MAX_LIGHTS:
            raise ValueError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

        object.__setattr__(self, "spheres", spheres)
        object.__setattr__(self, "lights", lights)

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the scene."""
        return len(self.spheres)

    @property
    def light_count(self) -> int:
        """Number of point lights in the scene."""
        return len(self.lights)

"""Phong-style material with four albedo channels.

A material weights four contributions to the outgoing color:

    albedo[0]: diffuse reflectance (Lambert term, times diffuse_color)
    albedo[1]: specular highlight (Phong term, white)
    albedo[2]: mirror reflection (recursively traced)
    albedo[3]: refraction (recursively traced)

The channels are not normalized and may sum to more than 1; presets such as
RED_RUBBER and MIRROR rely on that to saturate.

Materials exist in two forms:
    - PhongMaterial: immutable host-side value used to describe a scene.
    - Material: Taichi dataclass used inside kernels.

Example:
    >>> from tinyray.materials.phong import GLASS
    >>> GLASS.refractive_index
    1.5
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Material properties as seen by the shader.

    Attributes:
        refractive_index: Index of refraction (1.0 for opaque materials).
        albedo: Weights of the diffuse, specular, reflection and refraction
            terms.
        diffuse_color: RGB color of the diffuse term.
        specular_exponent: Phong exponent of the specular highlight.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@dataclass(frozen=True)
class PhongMaterial:
    """Host-side material description.

    Instances are values: every primitive that uses a preset gets the same
    numbers copied into the scene fields.

    Attributes:
        refractive_index: Index of refraction.
        albedo: The four channel weights (diffuse, specular, reflect, refract).
        diffuse_color: RGB diffuse color.
        specular_exponent: Phong exponent.

    Raises:
        ValueError: If albedo does not have 4 channels, diffuse_color does not
            have 3, or refractive_index is not positive.
    """

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (2.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0

    def __post_init__(self) -> None:
        if len(self.albedo) != 4:
            raise ValueError(f"albedo needs 4 channels, got {len(self.albedo)}")
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"diffuse_color needs 3 channels, got {len(self.diffuse_color)}"
            )
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Index of refraction = {self.refractive_index} must be positive"
            )
        object.__setattr__(self, "albedo", tuple(float(a) for a in self.albedo))
        object.__setattr__(
            self, "diffuse_color", tuple(float(c) for c in self.diffuse_color)
        )

    def with_diffuse_color(self, color: tuple[float, float, float]) -> "PhongMaterial":
        """Return a copy of this material with a different diffuse color."""
        return PhongMaterial(
            refractive_index=self.refractive_index,
            albedo=self.albedo,
            diffuse_color=color,
            specular_exponent=self.specular_exponent,
        )


# =============================================================================
# Presets
# =============================================================================

IVORY = PhongMaterial(
    refractive_index=1.0,
    albedo=(0.9, 0.5, 0.1, 0.0),
    diffuse_color=(0.4, 0.4, 0.3),
    specular_exponent=50.0,
)

GLASS = PhongMaterial(
    refractive_index=1.5,
    albedo=(0.0, 0.9, 0.1, 0.8),
    diffuse_color=(0.6, 0.7, 0.8),
    specular_exponent=125.0,
)

# albedo[0] > 1 on purpose: the diffuse term saturates
RED_RUBBER = PhongMaterial(
    refractive_index=1.0,
    albedo=(1.4, 0.3, 0.0, 0.0),
    diffuse_color=(0.3, 0.1, 0.1),
    specular_exponent=10.0,
)

MIRROR = PhongMaterial(
    refractive_index=1.0,
    albedo=(0.0, 16.0, 0.8, 0.0),
    diffuse_color=(1.0, 1.0, 1.0),
    specular_exponent=1425.0,
)

# Sentinel material. albedo[0] = 2 marks "no surface material assigned yet";
# the resolver starts from it and the ground plane reuses it with only the
# diffuse color replaced.
DEFAULT_MATERIAL = PhongMaterial()

PRESETS = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
}

_DEFAULT_IOR = DEFAULT_MATERIAL.refractive_index
_DEFAULT_ALBEDO = vec4(*DEFAULT_MATERIAL.albedo)
_DEFAULT_DIFFUSE = vec3(*DEFAULT_MATERIAL.diffuse_color)
_DEFAULT_EXPONENT = DEFAULT_MATERIAL.specular_exponent
_WHITE = vec3(1.0, 1.0, 1.0)


# =============================================================================
# Device Functions
# =============================================================================


@ti.func
def default_material() -> Material:
    """Build the sentinel default material inside a kernel."""
    return Material(
        refractive_index=_DEFAULT_IOR,
        albedo=_DEFAULT_ALBEDO,
        diffuse_color=_DEFAULT_DIFFUSE,
        specular_exponent=_DEFAULT_EXPONENT,
    )


@ti.func
def with_diffuse_color(material: Material, color: vec3) -> Material:
    """Return a copy of material with its diffuse color replaced."""
    return Material(
        refractive_index=material.refractive_index,
        albedo=material.albedo,
        diffuse_color=color,
        specular_exponent=material.specular_exponent,
    )


@ti.func
def diffuse_term(light_direction: vec3, normal: vec3) -> ti.f32:
    """Lambert term max(0, l . n) for one light."""
    return ti.max(0.0, tm.dot(light_direction, normal))


@ti.func
def specular_term(
    light_direction: vec3,
    normal: vec3,
    view_direction: vec3,
    exponent: ti.f32,
) -> ti.f32:
    """Phong term max(0, -reflect(-l, n) . d) ^ exponent for one light.

    Args:
        light_direction: Unit vector from the surface point to the light.
        normal: Surface normal at the point.
        view_direction: Direction of the ray that hit the point.
        exponent: The material's specular exponent.
    """
    neg_light = -light_direction
    reflected = neg_light - normal * 2.0 * tm.dot(neg_light, normal)
    return ti.max(0.0, tm.dot(-reflected, view_direction)) ** exponent


@ti.func
def local_color(material: Material, diffuse_intensity: ti.f32, specular_intensity: ti.f32) -> vec3:
    """Direct-lighting part of the final color.

    diffuse_color * diffuse * albedo[0] + white * specular * albedo[1].
    The reflection and refraction parts are added by the shader, weighted by
    albedo[2] and albedo[3].
    """
    return (
        material.diffuse_color * diffuse_intensity * material.albedo[0]
        + _WHITE * specular_intensity * material.albedo[1]
    )

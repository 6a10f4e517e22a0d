"""Materials module.

This module implements the single material model of the tracer:

Components:
    phong: Four-channel Phong material (diffuse, specular, reflection,
        refraction weights), the named presets and the default sentinel

Each material provides:
    - A host-side immutable value (PhongMaterial) for scene description
    - A Taichi dataclass (Material) used by the shader
    - Lambert and Phong lighting terms as Taichi functions
"""

from .phong import (
    DEFAULT_MATERIAL,
    GLASS,
    IVORY,
    MIRROR,
    PRESETS,
    RED_RUBBER,
    Material,
    PhongMaterial,
    default_material,
    diffuse_term,
    local_color,
    specular_term,
    with_diffuse_color,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "DEFAULT_MATERIAL",
    "PRESETS",
    "default_material",
    "with_diffuse_color",
    "diffuse_term",
    "specular_term",
    "local_color",
]

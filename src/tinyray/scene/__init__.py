"""Scene module for scene description and ray-scene queries.

Components:
    manager: Immutable host-side description (SphereInfo, SceneConfig)
    intersection: Device-resident Scene with the nearest-hit resolver
    default_scene: The fixed four-sphere, three-light demo scene

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for sphere geometry and materials
    - Sphere and light counts fixed at construction
    - The checkerboard ground plane is implicit, not stored

Note: default_scene is NOT imported here because it depends on the camera
package. Import it directly from tinyray.scene.default_scene.
"""

from .intersection import (
    FAR_DISTANCE,
    NO_HIT_DISTANCE,
    Scene,
    SceneHit,
    SceneHitRecord,
)
from .manager import MAX_LIGHTS, MAX_SPHERES, SceneConfig, SphereInfo

__all__ = [
    # Intersection module
    "Scene",
    "SceneHit",
    "SceneHitRecord",
    "FAR_DISTANCE",
    "NO_HIT_DISTANCE",
    # Manager module
    "SceneConfig",
    "SphereInfo",
    "MAX_SPHERES",
    "MAX_LIGHTS",
]

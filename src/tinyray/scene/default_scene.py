"""The fixed demo scene.

Four spheres, one per material preset, floating above the checkerboard
ground plane and lit by three point lights:

- Ivory sphere on the left
- Glass sphere in front, slightly lower
- Red rubber sphere behind, in the middle
- Large mirror sphere up and to the right

The camera sits at the origin looking down -z with a vertical field of
view of 1.05 radians.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyray.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> scene.sphere_count, scene.light_count
    (4, 3)
"""

from tinyray.camera.pinhole import PinholeCamera
from tinyray.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
from tinyray.scene.intersection import Scene
from tinyray.scene.manager import SceneConfig, SphereInfo

# =============================================================================
# Scene Table
# =============================================================================

DEFAULT_SPHERES = (
    SphereInfo(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),
    SphereInfo(center=(-1.0, -1.5, -12.0), radius=2.0, material=GLASS),
    SphereInfo(center=(1.5, -0.5, -18.0), radius=3.0, material=RED_RUBBER),
    SphereInfo(center=(7.0, 5.0, -18.0), radius=4.0, material=MIRROR),
)

DEFAULT_LIGHTS = (
    (-20.0, 20.0, 20.0),
    (30.0, 50.0, -25.0),
    (30.0, 20.0, 30.0),
)


# =============================================================================
# Factories
# =============================================================================


def default_scene_config() -> SceneConfig:
    """Return the host-side description of the demo scene."""
    return SceneConfig(spheres=DEFAULT_SPHERES, lights=DEFAULT_LIGHTS)


def create_default_scene(
    width: int = 1024,
    height: int = 768,
    fov: float = 1.05,
) -> tuple[Scene, PinholeCamera]:
    """Create the demo scene and a camera looking at it.

    Taichi must already be initialized, since the scene is uploaded to
    device fields immediately.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.

    Returns:
        A tuple of (scene, camera).
    """
    scene = Scene(default_scene_config())
    camera = PinholeCamera(width=width, height=height, fov=fov)
    return scene, camera

"""Taichi-based Whitted-style ray tracer.

This package renders a small fixed scene with recursive ray casting:
- Spheres with a four-channel Phong material (ivory, glass, red rubber, mirror)
- An implicit checkerboard ground plane
- Point lights with hard shadows
- Mirror reflection and Snell's-law refraction, cut off at depth 4

Subpackages:
    core: Ray and vector utilities, the recursive shader and the framebuffer renderer
    geometry: Sphere and checkerboard plane intersection
    materials: Phong material model and presets
    scene: Scene description, device-resident scene and the default scene
    camera: Pinhole camera with primary ray generation
    preview: Tone mapping, image export and preview utilities
"""

__version__ = "0.1.0"

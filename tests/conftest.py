"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(scope="session")
def default_scene():
    """The default scene, uploaded once and shared by read-only tests."""
    from tinyray.scene.default_scene import default_scene_config
    from tinyray.scene.intersection import Scene

    return Scene(default_scene_config())


@pytest.fixture(scope="session")
def default_shader(default_scene):
    """Shader over the shared default scene."""
    from tinyray.core.integrator import Shader

    return Shader(default_scene)

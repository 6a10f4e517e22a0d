"""Integration tests for end-to-end rendering pipeline.

This module tests the complete rendering pipeline from scene creation through
final image output. It verifies that all components work together correctly
and that the output meets basic quality criteria.

Tests are designed to be fast (low resolution) while still exercising the
full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def _load_render_script():
    """Import examples/render_scene.py as a module."""
    spec = importlib.util.spec_from_file_location(
        "render_scene", EXAMPLES_DIR / "render_scene.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def default_render():
    """Render the default scene once at 64x48."""
    from tinyray.core.integrator import Shader
    from tinyray.core.renderer import FramebufferRenderer
    from tinyray.scene.default_scene import create_default_scene

    scene, camera = create_default_scene(width=64, height=48)
    renderer = FramebufferRenderer(Shader(scene), camera)
    renderer.render(batch_rows=16)
    return renderer


class TestDefaultSceneIntegration:
    """Integration tests for default scene rendering."""

    def test_output_is_finite(self, default_render) -> None:
        """Test the rendered image contains no NaN or Inf."""
        image = default_render.get_image_numpy()
        assert np.all(np.isfinite(image))

    def test_output_non_negative(self, default_render) -> None:
        """Test every channel is non-negative."""
        image = default_render.get_image_numpy()
        assert np.all(image >= 0.0)

    def test_corner_is_sky(self, default_render) -> None:
        """Test the top-left corner looks past every object."""
        image = default_render.get_image_numpy()
        assert np.allclose(image[0, 0], [0.2, 0.7, 0.8], atol=1e-5)

    def test_objects_are_visible(self, default_render) -> None:
        """Test a good share of the pixels show something other than sky."""
        image = default_render.get_image_numpy()
        sky = np.array([0.2, 0.7, 0.8], dtype=np.float32)
        not_sky = np.any(np.abs(image - sky) > 1e-3, axis=-1)
        assert not_sky.mean() > 0.1

    def test_save_ppm(self, default_render, tmp_path: Path) -> None:
        """Test the render can be saved and read back."""
        from tinyray.preview.export import save_render

        output = tmp_path / "out.ppm"
        save_render(default_render, output)

        img = PILImage.open(output)
        assert img.size == (64, 48)
        assert img.mode == "RGB"


class TestRenderScript:
    """Tests for the command-line script."""

    def test_parse_args_defaults(self) -> None:
        """Test the default options."""
        module = _load_render_script()
        args = module.parse_args([])

        assert args.width == 1024
        assert args.height == 768
        assert args.fov == 1.05
        assert args.output == "out.ppm"
        assert args.arch is None
        assert not args.preview
        assert not args.quiet

    def test_parse_args_rejects_unknown_arch(self) -> None:
        """Test --arch only accepts cpu or gpu."""
        module = _load_render_script()
        with pytest.raises(SystemExit):
            module.parse_args(["--arch", "tpu"])

    def test_render_scene_writes_file(self, tmp_path: Path) -> None:
        """Test render_scene produces an image of the requested size."""
        module = _load_render_script()
        output = tmp_path / "scene.png"

        result = module.render_scene(
            width=24, height=16, output_path=str(output), batch_rows=4, quiet=True
        )

        assert result == output
        img = PILImage.open(output)
        assert img.size == (24, 16)

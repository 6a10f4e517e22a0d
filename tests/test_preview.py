"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Max-channel tone mapping
- 8-bit conversion
- Image export through Pillow (PPM and PNG)

Note: Tests avoid displaying actual windows by not calling show_preview
in automated tests. The processing functions are tested directly.
"""

import os
import tempfile

import numpy as np
import pytest
from PIL import Image as PILImage


class TestToneMapMax:
    """Test max-channel tone mapping."""

    def test_in_range_pixels_unchanged(self):
        """Test pixels with all channels <= 1 are left alone."""
        from tinyray.preview.display import tone_map_max

        image = np.array([[[0.5, 0.25, 1.0]]], dtype=np.float32)
        result = tone_map_max(image)
        assert np.allclose(result, image)

    def test_saturated_pixel_scaled_by_max(self):
        """Test a pixel above 1 is divided by its largest channel."""
        from tinyray.preview.display import tone_map_max

        image = np.array([[[2.0, 1.0, 0.5]]], dtype=np.float32)
        result = tone_map_max(image)
        assert np.allclose(result[0, 0], [1.0, 0.5, 0.25])

    def test_pixels_are_independent(self):
        """Test one bright pixel does not darken its neighbors."""
        from tinyray.preview.display import tone_map_max

        image = np.array([[[4.0, 0.0, 0.0], [0.5, 0.5, 0.5]]], dtype=np.float32)
        result = tone_map_max(image)
        assert np.allclose(result[0, 1], [0.5, 0.5, 0.5])

    def test_output_dtype(self):
        """Test the result is float32."""
        from tinyray.preview.display import tone_map_max

        result = tone_map_max(np.ones((2, 2, 3), dtype=np.float32) * 3.0)
        assert result.dtype == np.float32


class TestProcessImageForDisplay:
    """Test the full display pipeline."""

    def test_clip_mode(self):
        """Test clip mode clamps channels independently."""
        from tinyray.preview.display import process_image_for_display

        image = np.array([[[2.0, 0.5, -1.0]]], dtype=np.float32)
        result = process_image_for_display(image, tone_map="clip")
        assert np.allclose(result[0, 0], [1.0, 0.5, 0.0])

    def test_output_always_valid(self):
        """Test that output is always in [0, 1]."""
        from tinyray.preview.display import process_image_for_display

        rng = np.random.default_rng(0)
        image = rng.uniform(-1.0, 20.0, size=(8, 8, 3)).astype(np.float32)
        result = process_image_for_display(image)
        assert np.all(result >= 0.0)
        assert np.all(result <= 1.0)

    def test_does_not_modify_input(self):
        """Test the input array is left untouched."""
        from tinyray.preview.display import process_image_for_display

        image = np.full((2, 2, 3), 3.0, dtype=np.float32)
        process_image_for_display(image)
        assert np.all(image == 3.0)

    def test_invalid_tone_map_raises(self):
        """Test that an unknown method raises ValueError."""
        from tinyray.preview.display import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping method"):
            process_image_for_display(np.zeros((2, 2, 3), dtype=np.float32), tone_map="reinhard")


class TestImageToUint8:
    """Test 8-bit conversion."""

    def test_sky_color(self):
        """Test the sky color converts to (51, 178, 204) by truncation."""
        from tinyray.preview.export import image_to_uint8

        image = np.array([[[0.2, 0.7, 0.8]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [51, 178, 204]

    def test_black_and_white(self):
        """Test 0 maps to 0 and 1 maps to 255."""
        from tinyray.preview.export import image_to_uint8

        image = np.array([[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result[0, 0].tolist() == [0, 0, 0]
        assert result[0, 1].tolist() == [255, 255, 255]

    def test_saturated_pixel_keeps_hue(self):
        """Test an over-bright pixel is scaled rather than clipped to white."""
        from tinyray.preview.export import image_to_uint8

        image = np.array([[[4.0, 2.0, 0.0]]], dtype=np.float32)
        assert image_to_uint8(image)[0, 0].tolist() == [255, 127, 0]


class TestSaveImage:
    """Test image export."""

    def test_save_ppm(self):
        """Test the default PPM output is a binary P6 file Pillow can read."""
        from tinyray.preview.export import save_image

        image = np.zeros((6, 10, 3), dtype=np.float32)
        image[..., 2] = 0.8

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "out.ppm")
            save_image(image, filepath)

            with open(filepath, "rb") as f:
                assert f.read(2) == b"P6"

            img = PILImage.open(filepath)
            assert img.size == (10, 6)
            assert img.mode == "RGB"
            assert img.getpixel((3, 2)) == (0, 0, 204)

    def test_save_png_keeps_orientation(self):
        """Test row 0 of the array is the top row of the file."""
        from tinyray.preview.export import save_image

        image = np.zeros((4, 4, 3), dtype=np.float32)
        image[0, :, 0] = 1.0

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "out.png")
            save_image(image, filepath)

            img = PILImage.open(filepath)
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((0, 3)) == (0, 0, 0)

    def test_wrong_shape_raises(self):
        """Test a grayscale array is rejected."""
        from tinyray.preview.export import save_image

        with pytest.raises(ValueError, match=r"\(H, W, 3\)"):
            save_image(np.zeros((4, 4), dtype=np.float32), "unused.ppm")

    def test_save_render(self):
        """Test saving straight from a renderer."""
        from tinyray.camera.pinhole import PinholeCamera
        from tinyray.core.integrator import Shader
        from tinyray.core.renderer import FramebufferRenderer
        from tinyray.preview.export import save_render
        from tinyray.scene.intersection import Scene
        from tinyray.scene.manager import SceneConfig

        renderer = FramebufferRenderer(
            Shader(Scene(SceneConfig())), PinholeCamera(width=8, height=6)
        )
        renderer.render()

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "render.ppm")
            save_render(renderer, filepath)

            img = PILImage.open(filepath)
            assert img.size == (8, 6)
            # Top-left pixel looks up into the sky
            assert img.getpixel((0, 0)) == (51, 178, 204)


class TestModuleExports:
    """Test module exports."""

    def test_preview_exports(self):
        """Test the preview package re-exports its public functions."""
        from tinyray import preview

        for name in ("show_preview", "tone_map_max", "image_to_uint8", "save_image", "save_render"):
            assert hasattr(preview, name)
        assert preview.DEFAULT_OUTPUT == "out.ppm"

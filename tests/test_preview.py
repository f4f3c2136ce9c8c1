"""Unit tests for tone mapping and PNG export.

Tests cover:
- Saturation to [0, 1]
- Non-finite values mapped to black
- 8-bit conversion with truncation
- PNG writing and argument validation
"""

import numpy as np
import pytest


class TestSaturate:
    """Tests for saturate."""

    def test_clamps_to_unit_range(self):
        from softpt.preview.display import saturate

        image = np.array([[[-1.0, 0.25, 3.0]]], dtype=np.float32)
        result = saturate(image)

        assert result.dtype == np.float32
        assert result.tolist() == [[[0.0, 0.25, 1.0]]]

    def test_non_finite_becomes_zero(self):
        from softpt.preview.display import saturate

        image = np.array([[[np.nan, np.inf, -np.inf]]], dtype=np.float32)
        assert saturate(image).tolist() == [[[0.0, 0.0, 0.0]]]

    def test_input_is_not_modified(self):
        from softpt.preview.display import saturate

        image = np.array([[[np.nan, 2.0, -1.0]]], dtype=np.float32)
        saturate(image)
        assert np.isnan(image[0, 0, 0])
        assert image[0, 0, 1] == 2.0


class TestRadianceToUint8:
    """Tests for radiance_to_uint8."""

    def test_truncates(self):
        from softpt.preview.display import radiance_to_uint8

        image = np.array([[[0.5, 1.0, 0.999], [0.0, 0.1, 10.0]]], dtype=np.float32)
        result = radiance_to_uint8(image)

        assert result.dtype == np.uint8
        assert result.shape == (1, 2, 3)
        assert result.tolist() == [[[127, 255, 254], [0, 25, 255]]]

    def test_nan_pixel_is_black(self):
        from softpt.preview.display import radiance_to_uint8

        image = np.full((2, 2, 3), np.nan, dtype=np.float32)
        assert not np.any(radiance_to_uint8(image))


class TestExport:
    """Tests for PNG export."""

    def test_save_png(self, tmp_path):
        from PIL import Image

        from softpt.preview.export import save_png

        rng = np.random.default_rng(0)
        image = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
        path = tmp_path / "out.png"
        save_png(image, str(path))

        with Image.open(path) as saved:
            assert saved.mode == "RGB"
            assert saved.size == (7, 5)
            assert np.array_equal(np.asarray(saved), image)

    def test_save_png_rejects_float_images(self, tmp_path):
        from softpt.preview.export import save_png

        with pytest.raises(ValueError, match="uint8"):
            save_png(np.zeros((4, 4, 3), dtype=np.float32), str(tmp_path / "bad.png"))

    def test_save_png_rejects_wrong_shape(self, tmp_path):
        from softpt.preview.export import save_png

        with pytest.raises(ValueError):
            save_png(np.zeros((4, 4), dtype=np.uint8), str(tmp_path / "bad.png"))

    def test_save_png_from_radiance(self, tmp_path):
        from PIL import Image

        from softpt.preview.export import save_png_from_radiance

        radiance = np.array([[[0.5, 2.0, np.nan]]], dtype=np.float32)
        path = tmp_path / "radiance.png"
        save_png_from_radiance(radiance, str(path))

        with Image.open(path) as saved:
            assert np.asarray(saved).tolist() == [[[127, 255, 0]]]

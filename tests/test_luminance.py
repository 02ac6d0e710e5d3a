import numpy as np
import pytest
from image_adjuster.processing.luminance import (
    LuminanceMode, luminance, luminance_buckets, luminance_map,
)


class TestScalarLuminance:

    def test_black_and_white(self):
        assert luminance(0, 0, 0) == 0
        assert luminance(255, 255, 255) == 255

    def test_primaries_byte(self):
        """Rec. 709 weights, rounded to the nearest byte."""
        assert luminance(255, 0, 0) == 54    # 54.213
        assert luminance(0, 255, 0) == 182   # 182.376
        assert luminance(0, 0, 255) == 18    # 18.411

    def test_real_mode_keeps_fraction(self):
        value = luminance(255, 0, 0, mode=LuminanceMode.REAL)
        assert isinstance(value, float)
        assert value == pytest.approx(54.213)

    def test_byte_mode_returns_int(self):
        assert isinstance(luminance(10, 20, 30), int)

    def test_mode_from_string(self):
        assert luminance(0, 255, 0, mode="real") == pytest.approx(182.376)
        assert LuminanceMode.from_value("BYTE") is LuminanceMode.BYTE

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            LuminanceMode.from_value("lab")

    def test_gray_levels_map_to_themselves(self):
        for level in (0, 1, 64, 127, 128, 200, 254, 255):
            assert luminance(level, level, level) == level

    def test_exact_half_rounds_to_even(self):
        """0.7152 * 41 + 0.0722 * 44 is exactly 32.5."""
        assert luminance(0, 41, 44, mode=LuminanceMode.REAL) == 32.5
        assert luminance(0, 41, 44) == 32


class TestLuminanceMap:

    def test_matches_scalar(self, random_image_uint8):
        result = luminance_map(random_image_uint8)
        assert result.dtype == np.uint8
        assert result.shape == random_image_uint8.shape[:2]
        for y, x in [(0, 0), (10, 20), (47, 63)]:
            r, g, b = (int(c) for c in random_image_uint8[y, x])
            assert result[y, x] == luminance(r, g, b)

    def test_exact_half_rounds_to_even(self):
        image = np.array([[[0, 41, 44], [0, 42, 44]]], dtype=np.uint8)
        assert luminance_map(image, LuminanceMode.REAL)[0, 0] == 32.5
        assert list(luminance_map(image)[0]) == [32, 33]
        assert list(luminance_buckets(image, LuminanceMode.REAL)[0]) == [32, 33]

    def test_real_map_is_float(self, sample_image_uint8):
        result = luminance_map(sample_image_uint8, LuminanceMode.REAL)
        assert result.dtype == np.float64
        assert result[0, 0] == pytest.approx(54.213)
        assert result[99, 99] == pytest.approx(236.589)

    def test_alpha_is_ignored(self, random_rgba_uint8):
        opaque = random_rgba_uint8.copy()
        opaque[..., 3] = 255
        assert np.array_equal(luminance_map(random_rgba_uint8), luminance_map(opaque))

    def test_both_modes_give_same_buckets(self, random_image_uint8):
        """Rounding per pixel or at bucketing time lands in the same bucket."""
        byte_buckets = luminance_buckets(random_image_uint8, LuminanceMode.BYTE)
        real_buckets = luminance_buckets(random_image_uint8, LuminanceMode.REAL)
        assert real_buckets.dtype == np.uint8
        assert np.array_equal(byte_buckets, real_buckets)

"""Tests for image I/O functionality."""

import os
import numpy as np
import pytest
from PIL import Image


class TestIdentifyImage:
    """Tests for the pre-flight image check."""

    def test_valid_png(self, image_dir):
        from image_adjuster.io.image_loader import identify_image
        fmt, size = identify_image(os.path.join(image_dir, "A.png"))
        assert fmt == "PNG"
        assert size == (256, 4)

    def test_missing_file(self, tmp_path):
        """A missing path should be reported as an invalid image file."""
        from image_adjuster.io.image_loader import identify_image
        from image_adjuster.utils.errors import FileIOError
        path = os.path.join(tmp_path, "missing.png")
        with pytest.raises(FileIOError) as excinfo:
            identify_image(path)
        assert "Invalid image file" in str(excinfo.value)
        assert excinfo.value.file_path == path

    def test_not_an_image(self, tmp_path):
        from image_adjuster.io.image_loader import identify_image
        from image_adjuster.utils.errors import FileIOError
        path = os.path.join(tmp_path, "notes.png")
        with open(path, "w") as f:
            f.write("definitely not pixels")
        with pytest.raises(FileIOError):
            identify_image(path)


class TestImageLoader:
    """Tests for image loading functionality."""

    def test_load_nonexistent_file(self):
        """Loading nonexistent file should return None."""
        from image_adjuster.io.image_loader import load_image
        assert load_image("/nonexistent/path/to/image.jpg") is None

    def test_load_invalid_path(self):
        """Loading with invalid path should return None."""
        from image_adjuster.io.image_loader import load_image
        assert load_image("") is None
        assert load_image(None) is None

    def test_load_corrupt_file(self, tmp_path):
        from image_adjuster.io.image_loader import load_image
        path = os.path.join(tmp_path, "broken.jpg")
        with open(path, "wb") as f:
            f.write(b"\x00\x01\x02garbage")
        assert load_image(path) is None

    def test_load_rgb(self, image_dir):
        from image_adjuster.io.image_loader import load_image
        img = load_image(os.path.join(image_dir, "b.png"))
        assert img.shape == (8, 128, 3)
        assert img.dtype == np.uint8
        assert img[0, 0, 0] == 64
        assert img[0, -1, 0] == 191
        assert img.flags.writeable

    def test_load_grayscale_is_expanded(self, tmp_path):
        from image_adjuster.io.image_loader import load_image
        path = os.path.join(tmp_path, "gray.png")
        Image.fromarray(np.full((5, 7), 90, dtype=np.uint8)).save(path)
        img = load_image(path)
        assert img.shape == (5, 7, 3)
        assert (img == 90).all()

    def test_supported_extensions(self):
        from image_adjuster.io.image_loader import SUPPORTED_EXTENSIONS
        assert '.jpg' in SUPPORTED_EXTENSIONS
        assert '.png' in SUPPORTED_EXTENSIONS


class TestImageSaver:
    """Tests for image saving functionality."""

    def test_png_round_trip(self, tmp_path, random_image_uint8):
        from image_adjuster.io.image_loader import load_image
        from image_adjuster.io.image_saver import save_image
        path = os.path.join(tmp_path, "out.png")
        assert save_image(random_image_uint8, path)
        assert np.array_equal(load_image(path), random_image_uint8)

    def test_png_keeps_alpha(self, tmp_path, random_rgba_uint8):
        from image_adjuster.io.image_loader import load_image
        from image_adjuster.io.image_saver import save_image
        path = os.path.join(tmp_path, "alpha.png")
        assert save_image(random_rgba_uint8, path)
        loaded = load_image(path)
        assert loaded.shape == random_rgba_uint8.shape
        assert np.array_equal(loaded, random_rgba_uint8)

    def test_jpeg_drops_alpha(self, tmp_path, random_rgba_uint8):
        from image_adjuster.io.image_loader import load_image
        from image_adjuster.io.image_saver import save_image
        path = os.path.join(tmp_path, "flat.jpg")
        assert save_image(random_rgba_uint8, path, quality=80)
        assert load_image(path).shape == (40, 32, 3)

    def test_creates_output_directory(self, tmp_path, sample_image_uint8):
        from image_adjuster.io.image_saver import save_image
        path = os.path.join(tmp_path, "nested", "dir", "out.png")
        assert save_image(sample_image_uint8, path)
        assert os.path.isfile(path)

    def test_save_none_image(self, tmp_path):
        """Saving None should return False."""
        from image_adjuster.io.image_saver import save_image
        assert save_image(None, os.path.join(tmp_path, "x.png")) is False

    def test_save_two_channel_image(self, tmp_path):
        from image_adjuster.io.image_saver import save_image
        img = np.zeros((4, 4, 2), dtype=np.uint8)
        assert save_image(img, os.path.join(tmp_path, "x.png")) is False

    def test_save_unknown_extension(self, tmp_path, sample_image_uint8):
        from image_adjuster.io.image_saver import save_image
        assert save_image(sample_image_uint8, os.path.join(tmp_path, "x.xyz")) is False

    def test_save_invalid_path(self, sample_image_uint8):
        from image_adjuster.io.image_saver import save_image
        assert save_image(sample_image_uint8, "") is False

import os

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def sample_image_uint8():
    """Returns a simple 100x100 uint8 RGB image."""
    img = np.zeros((100, 100, 3), dtype=np.uint8)
    img[:50, :50] = [255, 0, 0]    # Red quadrant
    img[:50, 50:] = [0, 255, 0]    # Green quadrant
    img[50:, :50] = [0, 0, 255]    # Blue quadrant
    img[50:, 50:] = [255, 255, 0]  # Yellow quadrant
    return img


@pytest.fixture
def random_image_uint8():
    """Returns a reproducible 64x48 RGB noise image."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(48, 64, 3), dtype=np.uint8)


@pytest.fixture
def random_rgba_uint8():
    """Returns a reproducible 32x40 RGBA noise image."""
    rng = np.random.default_rng(4321)
    return rng.integers(0, 256, size=(40, 32, 4), dtype=np.uint8)


def make_histogram(first_part, last_part):
    """256 buckets with ``first_part`` at the start and ``last_part`` at the end."""
    histogram = np.zeros(256, dtype=np.int64)
    histogram[:len(first_part)] = first_part
    if last_part:
        histogram[256 - len(last_part):] = last_part
    return histogram


@pytest.fixture
def two_sided_histogram():
    """[0, 1, 2] at buckets 0..2 and [2, 1, 0] at buckets 253..255."""
    return make_histogram([0, 1, 2], [2, 1, 0])


def gray_gradient(low, high, rows):
    """Gray image with one column per level in low..high, repeated over ``rows`` rows."""
    levels = np.arange(low, high + 1, dtype=np.uint8)
    return np.repeat(np.tile(levels, (rows, 1))[..., None], 3, axis=2)


@pytest.fixture
def image_dir(tmp_path):
    """Two PNGs on disk.

    ``A.png``: every level 0..255, 4 pixels each (1024 pixels).
    ``b.png``: levels 64..191 only, 8 pixels each (1024 pixels).
    """
    Image.fromarray(gray_gradient(0, 255, 4)).save(os.path.join(tmp_path, "A.png"))
    Image.fromarray(gray_gradient(64, 191, 8)).save(os.path.join(tmp_path, "b.png"))
    return tmp_path


@pytest.fixture
def histogram_factory():
    return make_histogram

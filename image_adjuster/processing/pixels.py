# Pixel buffer helpers shared by the histogram and lookup table passes
import numpy as np

from ..utils.errors import ProcessingError


def ensure_pixel_buffer(image, step=None):
    """Checks that ``image`` is an (H, W, 3) or (H, W, 4) uint8 array.

    Raises:
        ProcessingError: if the array has another dtype or layout.
    """
    if not isinstance(image, np.ndarray):
        raise ProcessingError(
            f"Pixel buffer must be a numpy array, got {type(image).__name__}", step=step
        )
    if image.dtype != np.uint8:
        raise ProcessingError(
            f"Pixel buffer must be uint8, got {image.dtype}", step=step
        )
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ProcessingError(
            f"Pixel buffer must have shape (H, W, 3) or (H, W, 4), got {image.shape}", step=step
        )
    return image


def row_ranges(height, workers):
    """Splits ``range(height)`` into at most ``workers`` disjoint (start, stop) slices."""
    workers = max(1, min(int(workers), height))
    bounds = np.linspace(0, height, workers + 1).astype(int)
    return [(int(start), int(stop)) for start, stop in zip(bounds[:-1], bounds[1:]) if stop > start]

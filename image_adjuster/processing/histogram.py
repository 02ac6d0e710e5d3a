# Luminance histogram accumulation
import concurrent.futures

import numpy as np

from .luminance import LuminanceMode, luminance_buckets
from .pixels import ensure_pixel_buffer, row_ranges
from ..utils.logger import get_logger

logger = get_logger(__name__)

HISTOGRAM_SIZE = 256


def _partial_histogram(rows, mode):
    """Counts for one block of rows. Each worker owns its own array."""
    if rows.size == 0:
        return np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
    buckets = luminance_buckets(rows, mode)
    return np.bincount(buckets.ravel(), minlength=HISTOGRAM_SIZE).astype(np.int64)


def compute_luminance_histogram(image, mode=LuminanceMode.BYTE, workers=1):
    """Builds the 256-bucket luminance histogram of an image.

    Args:
        image: (H, W, 3) or (H, W, 4) uint8 array. Alpha is ignored.
        mode: LuminanceMode (or "byte"/"real").
        workers: Number of row blocks counted concurrently. Each block gets its
            own partial histogram and the partials are summed afterwards, so no
            counter is ever shared between threads.

    Returns:
        Read-only int64 array of 256 counts whose sum is H * W.
        An image with no pixels gives an all-zero histogram.
    """
    ensure_pixel_buffer(image, step="histogram")
    mode = LuminanceMode.from_value(mode)
    height = image.shape[0]

    blocks = row_ranges(height, workers) if image.size else []
    if len(blocks) <= 1:
        histogram = _partial_histogram(image, mode)
    else:
        logger.debug("Counting %d row blocks with %d workers", len(blocks), len(blocks))
        histogram = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(blocks)) as executor:
            futures = [
                executor.submit(_partial_histogram, image[start:stop], mode)
                for start, stop in blocks
            ]
            for future in concurrent.futures.as_completed(futures):
                histogram += future.result()

    histogram.flags.writeable = False
    return histogram

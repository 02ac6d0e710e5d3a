# Contrast-stretching lookup tables
import concurrent.futures

import cv2
import numpy as np

from .histogram import HISTOGRAM_SIZE
from .pixels import ensure_pixel_buffer, row_ranges
from ..utils.errors import ErrorCategory, ProcessingError, log_and_continue
from ..utils.logger import get_logger

logger = get_logger(__name__)


def identity_lookup_table():
    table = np.arange(HISTOGRAM_SIZE, dtype=np.uint8)
    table.flags.writeable = False
    return table


def create_lookup_table(min_value, max_value):
    """Builds the per-channel table that stretches [min_value, max_value] to [0, 255].

    Both bounds are inclusive: values below min_value map to 0, values above
    max_value map to 255, and min_value / max_value themselves map to exactly
    0 / 255. Values in between are scaled linearly and rounded half-to-even.
    (0, 255) gives the identity table.

    An empty range (min_value >= max_value) cannot be stretched; the identity
    table is returned so images pass through unmodified.

    Returns:
        Read-only uint8 array of 256 entries, monotonically non-decreasing.
    """
    min_value = int(min_value)
    max_value = int(max_value)

    if min_value >= max_value:
        log_and_continue(
            f"Cannot stretch empty range ({min_value}, {max_value}); using identity table",
            category=ErrorCategory.PROCESSING,
        )
        return identity_lookup_table()

    values = np.arange(HISTOGRAM_SIZE, dtype=np.float64)
    scale = 255.0 / (max_value - min_value)
    # (v - min) * 255 / (max - min) is exactly 255 at v == max
    stretched = np.rint((values - min_value) * scale)
    stretched[values < min_value] = 0
    stretched[values > max_value] = 255
    table = np.clip(stretched, 0, 255).astype(np.uint8)
    table.flags.writeable = False
    return table


def _check_table(table):
    table = np.asarray(table)
    if table.shape != (HISTOGRAM_SIZE,) or table.dtype != np.uint8:
        raise ProcessingError(
            f"Lookup table must be {HISTOGRAM_SIZE} uint8 entries, got {table.dtype} {table.shape}",
            step="lookup_table",
        )
    return table


def _apply_rows(rows, table):
    """Remaps R, G and B of one block of rows in place."""
    if rows.size == 0:
        return
    if rows.shape[2] == 3 and rows.flags.c_contiguous:
        np.copyto(rows, cv2.LUT(rows, table))
    else:
        # RGBA, or a strided view: leave alpha alone
        rows[..., :3] = table[rows[..., :3]]


def apply_lookup_table(image, table, workers=1):
    """Rewrites every pixel's R, G and B through ``table``, in place.

    Alpha, if present, is untouched. Rows are independent, so with
    ``workers > 1`` disjoint row blocks are remapped concurrently.

    Returns:
        The same ``image`` array.
    """
    ensure_pixel_buffer(image, step="lookup_table")
    table = _check_table(table)
    if image.size == 0:
        return image

    blocks = row_ranges(image.shape[0], workers)
    if len(blocks) <= 1:
        _apply_rows(image, table)
        return image

    logger.debug("Remapping %d row blocks", len(blocks))
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(blocks)) as executor:
        futures = [executor.submit(_apply_rows, image[start:stop], table) for start, stop in blocks]
        for future in futures:
            future.result()
    return image

# Contrast-stretching limits from a luminance histogram
"""
Derives the tonal range to preserve when a given share of the darkest and
lightest pixels may be clipped.

Both bounds are inclusive: ``ContrastLimits(10, 240)`` keeps luminance 10
through 240 and stretches it to 0..255.

A cutoff percentage of ``None`` disables clipping on that side. Negative
percentages mean the same thing, so ``-1`` can still be passed from the
command line or a settings file.

Pixel counts are derived from percentages with round-half-to-even
(``round(2.5) == 2``), which moves the resulting bound by one bucket in some
boundary cases.
"""
from typing import NamedTuple, Optional

import numpy as np

from .histogram import HISTOGRAM_SIZE
from ..utils.errors import ErrorCategory, ProcessingError, log_and_continue
from ..utils.logger import get_logger

logger = get_logger(__name__)

MIN_LEVEL = 0
MAX_LEVEL = HISTOGRAM_SIZE - 1


class ContrastLimits(NamedTuple):
    min_value: int
    max_value: int

    @property
    def is_full_range(self) -> bool:
        return self.min_value == MIN_LEVEL and self.max_value == MAX_LEVEL


FULL_RANGE = ContrastLimits(MIN_LEVEL, MAX_LEVEL)


def normalize_cutoff(percentage) -> Optional[float]:
    """Maps the negative "disabled" sentinel to None."""
    if percentage is None:
        return None
    percentage = float(percentage)
    if percentage < 0:
        return None
    return percentage


def cutoff_pixel_count(total_pixel_count: int, percentage: float) -> int:
    """Number of pixels ``percentage`` percent of ``total_pixel_count`` stands for."""
    return int(round(total_pixel_count * percentage / 100))


def find_lower_limit(histogram, total_pixel_count: int, percentage) -> int:
    """First bucket, scanning up from 0, where the running count exceeds the cutoff.

    Stays at 0 when clipping is disabled or no bucket gets past the cutoff.
    """
    percentage = normalize_cutoff(percentage)
    if percentage is None:
        return MIN_LEVEL

    cutoff = cutoff_pixel_count(total_pixel_count, percentage)
    running = 0
    for level in range(MIN_LEVEL, MAX_LEVEL + 1):
        running += int(histogram[level])
        if running > cutoff:
            return level
    return MIN_LEVEL


def find_upper_limit(histogram, total_pixel_count: int, percentage) -> int:
    """First bucket, scanning down from 255, where the running count exceeds the cutoff.

    Stays at 255 when clipping is disabled or no bucket gets past the cutoff.
    """
    percentage = normalize_cutoff(percentage)
    if percentage is None:
        return MAX_LEVEL

    cutoff = cutoff_pixel_count(total_pixel_count, percentage)
    running = 0
    for level in range(MAX_LEVEL, MIN_LEVEL - 1, -1):
        running += int(histogram[level])
        if running > cutoff:
            return level
    return MAX_LEVEL


def normalize_or_full_range(min_value: int, max_value: int) -> ContrastLimits:
    """Returns the limits unchanged, or the full 0..255 range if they are empty or inverted.

    Overlapping or very large cutoffs can push the lower bound to or past the
    upper one; such a range cannot be stretched, so nothing is clipped instead.
    """
    if min_value >= max_value:
        logger.debug("Limits (%d, %d) are empty or inverted; using full range", min_value, max_value)
        return FULL_RANGE
    return ContrastLimits(int(min_value), int(max_value))


def _check_histogram(histogram, total_pixel_count):
    histogram = np.asarray(histogram)
    if histogram.shape != (HISTOGRAM_SIZE,):
        raise ProcessingError(f"Histogram must have {HISTOGRAM_SIZE} buckets, got shape {histogram.shape}",
                              step="limits")
    counted = int(histogram.sum())
    if counted != total_pixel_count:
        log_and_continue(
            f"Total pixel count {total_pixel_count} does not match histogram sum {counted}",
            category=ErrorCategory.PROCESSING,
        )
    return histogram


def raw_contrast_limits(histogram, total_pixel_count: int, lower_cutoff=None, upper_cutoff=None) -> ContrastLimits:
    """Both bounds as scanned, without the inversion fallback.

    The result may be empty or inverted; use ``compute_contrast_limits`` for a
    range that is safe to build a lookup table from.
    """
    histogram = _check_histogram(histogram, total_pixel_count)
    return ContrastLimits(
        find_lower_limit(histogram, total_pixel_count, lower_cutoff),
        find_upper_limit(histogram, total_pixel_count, upper_cutoff),
    )


def compute_contrast_limits(histogram, total_pixel_count: int, lower_cutoff=None, upper_cutoff=None) -> ContrastLimits:
    """Inclusive luminance range to preserve after clipping both ends.

    Args:
        histogram: 256 bucket counts.
        total_pixel_count: Number of pixels the histogram was built from.
        lower_cutoff: Percentage of darkest pixels to clip, or None / negative to disable.
        upper_cutoff: Percentage of lightest pixels to clip, or None / negative to disable.

    Returns:
        ContrastLimits with ``min_value < max_value``; (0, 255) whenever the
        scanned bounds would be empty or inverted.
    """
    raw = raw_contrast_limits(histogram, total_pixel_count, lower_cutoff, upper_cutoff)
    return normalize_or_full_range(raw.min_value, raw.max_value)

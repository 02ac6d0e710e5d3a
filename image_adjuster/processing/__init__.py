# Processing package initialization
from .luminance import LuminanceMode, luminance, luminance_map, luminance_buckets
from .histogram import HISTOGRAM_SIZE, compute_luminance_histogram
from .limits import (
    ContrastLimits, FULL_RANGE, compute_contrast_limits, raw_contrast_limits,
    normalize_or_full_range, find_lower_limit, find_upper_limit, cutoff_pixel_count,
)
from .lookup_table import create_lookup_table, apply_lookup_table, identity_lookup_table

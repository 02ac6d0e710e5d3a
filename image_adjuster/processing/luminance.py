# Relative luminance (Rec. 709 weights)
"""
Luminance of 8-bit RGB pixels.

https://en.wikipedia.org/wiki/Relative_luminance

Two numeric flavours are supported and produce the same histogram buckets:

- ``LuminanceMode.BYTE``: each pixel's luminance is rounded to an 8-bit value.
- ``LuminanceMode.REAL``: luminance stays a float in [0, 255] and is only
  rounded when it is turned into a bucket index.

All rounding is round-half-to-even, the behaviour of both ``round`` and
``numpy.rint``.
"""
from enum import Enum

import numpy as np

RED_WEIGHT = 0.2126
GREEN_WEIGHT = 0.7152
BLUE_WEIGHT = 0.0722


class LuminanceMode(Enum):
    BYTE = "byte"
    REAL = "real"

    @classmethod
    def from_value(cls, value):
        """Accepts a LuminanceMode or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown luminance mode '{value}'. Expected one of: "
                + ", ".join(m.value for m in cls)
            ) from None


def luminance(red, green, blue, mode=LuminanceMode.BYTE):
    """Luminance of a single pixel.

    Returns an int in [0, 255] for BYTE mode, a float in [0.0, 255.0] for REAL mode.
    """
    mode = LuminanceMode.from_value(mode)
    value = RED_WEIGHT * red + GREEN_WEIGHT * green + BLUE_WEIGHT * blue
    value = min(max(value, 0.0), 255.0)
    if mode is LuminanceMode.BYTE:
        return int(round(value))
    return value


def luminance_map(image, mode=LuminanceMode.BYTE):
    """Per-pixel luminance of an (H, W, 3|4) uint8 array; alpha is ignored.

    BYTE mode returns uint8, REAL mode returns float64.
    """
    mode = LuminanceMode.from_value(mode)
    rgb = image[..., :3].astype(np.float64)
    values = RED_WEIGHT * rgb[..., 0] + GREEN_WEIGHT * rgb[..., 1] + BLUE_WEIGHT * rgb[..., 2]
    np.clip(values, 0.0, 255.0, out=values)
    if mode is LuminanceMode.BYTE:
        return np.rint(values).astype(np.uint8)
    return values


def luminance_buckets(image, mode=LuminanceMode.BYTE):
    """Histogram bucket index (0..255) of every pixel, as uint8."""
    values = luminance_map(image, mode)
    if values.dtype == np.uint8:
        return values
    return np.rint(values).astype(np.uint8)

# image_adjuster package
"""Batch luminance analysis and contrast stretching for 8-bit raster images."""

__version__ = "1.0.0"

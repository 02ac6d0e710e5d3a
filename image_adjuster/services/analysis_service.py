from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..config import settings
from ..io import image_loader
from ..processing.histogram import compute_luminance_histogram
from ..processing.limits import ContrastLimits, compute_contrast_limits
from ..processing.luminance import LuminanceMode
from ..utils.errors import AppError, ConfigurationError, ProcessingError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# (current, total)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class AnalysisRecord:
    """Histogram and suggested limits of one analyzed image."""

    file_path: str
    histogram: np.ndarray
    pixel_count: int
    limits: Dict[float, ContrastLimits] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return os.path.basename(self.file_path)


def _parse_cutoffs(cutoffs: Iterable) -> List[float]:
    parsed = []
    for value in cutoffs:
        try:
            cutoff = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Cutoff percentage must be a number, got {value!r}",
                setting_name="cutoff_percentages",
                original_error=e,
            ) from e
        if not math.isfinite(cutoff):
            raise ConfigurationError(f"Cutoff percentage must be finite, got {value!r}",
                                     setting_name="cutoff_percentages")
        parsed.append(cutoff)
    if not parsed:
        raise ConfigurationError("At least one cutoff percentage is required",
                                 setting_name="cutoff_percentages")
    return parsed


def sort_paths(file_paths: Iterable[str]) -> List[str]:
    """Case-insensitive ordering, the order images are analyzed and reported in."""
    return sorted(file_paths, key=lambda p: (p.casefold(), p))


class AnalysisService:
    """Loads images and computes their luminance histogram and contrast limits.

    One ContrastLimits is computed per cutoff percentage, clipping that
    percentage at both the dark and the light end.
    """

    def __init__(
        self,
        cutoffs: Optional[Sequence[float]] = None,
        luminance_mode: Optional[str] = None,
        workers: Optional[int] = None,
    ) -> None:
        defaults = settings.ANALYSIS_DEFAULTS
        self.cutoffs = _parse_cutoffs(cutoffs if cutoffs is not None else defaults["cutoff_percentages"])
        try:
            self.luminance_mode = LuminanceMode.from_value(
                luminance_mode if luminance_mode is not None else defaults["luminance_mode"]
            )
        except ValueError as e:
            raise ConfigurationError(str(e), setting_name="luminance_mode", original_error=e) from e
        self.workers = max(1, int(workers if workers is not None else defaults["workers"]))

    def analyze_image(self, file_path: str, image: np.ndarray) -> AnalysisRecord:
        """Builds the record for an already decoded image."""
        histogram = compute_luminance_histogram(image, mode=self.luminance_mode, workers=self.workers)
        pixel_count = image.shape[0] * image.shape[1]
        limits = {
            cutoff: compute_contrast_limits(histogram, pixel_count, cutoff, cutoff)
            for cutoff in self.cutoffs
        }
        logger.debug(
            "%s: %s",
            os.path.basename(file_path),
            ", ".join(f"{c}% -> {l.min_value}..{l.max_value}" for c, l in limits.items()),
        )
        return AnalysisRecord(file_path, histogram, pixel_count, limits)

    def analyze(
        self,
        file_paths: Sequence[str],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[AnalysisRecord]:
        """Analyzes every file, in case-insensitive path order.

        All files are checked to be readable images before any is analyzed.

        Raises:
            FileIOError: a file is missing or not an image.
            ProcessingError: a file could not be decoded or analyzed.
        """
        for file_path in file_paths:
            image_loader.identify_image(file_path)

        ordered = sort_paths(file_paths)
        total = len(ordered)
        records = []
        for index, file_path in enumerate(ordered, start=1):
            if progress_callback:
                progress_callback(index, total)
            try:
                image = image_loader.load_image(file_path)
                if image is None:
                    raise ProcessingError(f"Could not decode {file_path}", step="load")
                records.append(self.analyze_image(file_path, image))
            except AppError as e:
                raise ProcessingError(
                    f"Failed to handle image file: {file_path}",
                    step=getattr(e, "step", None) or "analyze",
                    original_error=e,
                ) from e

        logger.info("Analyzed %d image(s)", len(records))
        return records


def average_limits(records: Sequence[AnalysisRecord], cutoff: float) -> ContrastLimits:
    """Mean min and max over all records for one cutoff, rounded half-to-even."""
    if not records:
        raise ValueError("Cannot average limits of zero records")
    cutoff = float(cutoff)
    mins = [record.limits[cutoff].min_value for record in records]
    maxs = [record.limits[cutoff].max_value for record in records]
    return ContrastLimits(int(round(sum(mins) / len(mins))), int(round(sum(maxs) / len(maxs))))

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..config import settings
from ..io import image_loader, image_saver
from ..processing.limits import ContrastLimits
from ..processing.lookup_table import apply_lookup_table, create_lookup_table
from ..utils.errors import FileIOError
from ..utils.logger import get_logger
from .report import utc_timestamp

logger = get_logger(__name__)

# (current, total)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class AdjustedFile:
    """Where one image ended up after an adjustment pass."""

    original_path: str   # where the original lived and is restored to on revert
    adjusted_path: str   # the stretched copy, beside the original
    moved_path: str      # the original, parked in the output directory


class AdjustmentSession:
    """Applies one tonal range to a batch of images and can finish or undo it.

    ``apply`` writes ``<name><suffix><ext>`` next to every original and moves
    the original into the ``output_dir_name`` subdirectory of its folder.
    ``revert`` deletes the adjusted copies and moves the originals back;
    ``finish`` writes a text log of what was done.
    """

    def __init__(
        self,
        file_paths: Sequence[str],
        output_dir_name: Optional[str] = None,
        adjusted_suffix: Optional[str] = None,
        jpeg_quality: Optional[int] = None,
        png_compression: Optional[int] = None,
        workers: Optional[int] = None,
    ) -> None:
        defaults = settings.ADJUSTMENT_DEFAULTS
        self.file_paths = list(file_paths)
        self.output_dir_name = output_dir_name or defaults["output_dir_name"]
        self.adjusted_suffix = adjusted_suffix or defaults["adjusted_suffix"]
        self.jpeg_quality = jpeg_quality if jpeg_quality is not None else defaults["jpeg_quality"]
        self.png_compression = png_compression if png_compression is not None else defaults["png_compression"]
        self.workers = max(1, int(workers if workers is not None else settings.ANALYSIS_DEFAULTS["workers"]))
        self.limits: Optional[ContrastLimits] = None
        self.adjusted_files: List[AdjustedFile] = []

    def adjusted_path_for(self, file_path: str) -> str:
        stem, ext = os.path.splitext(os.path.basename(file_path))
        return os.path.join(os.path.dirname(file_path), f"{stem}{self.adjusted_suffix}{ext}")

    def moved_path_for(self, file_path: str) -> str:
        return os.path.join(os.path.dirname(file_path), self.output_dir_name, os.path.basename(file_path))

    def _adjust_one(self, file_path: str, table) -> AdjustedFile:
        moved_path = self.moved_path_for(file_path)
        if os.path.exists(moved_path):
            raise FileIOError(f"Cannot move original, {moved_path} already exists", file_path=moved_path)

        image = image_loader.load_image(file_path)
        if image is None:
            raise FileIOError(f"Could not load image {file_path}", file_path=file_path)
        apply_lookup_table(image, table, workers=self.workers)

        adjusted_path = self.adjusted_path_for(file_path)
        if not image_saver.save_image(image, adjusted_path, quality=self.jpeg_quality,
                                      png_compression=self.png_compression):
            raise FileIOError(f"Could not save adjusted image {adjusted_path}", file_path=adjusted_path)
        logger.info("Adjusted image saved to: %s", adjusted_path)

        try:
            os.makedirs(os.path.dirname(moved_path), exist_ok=True)
            shutil.move(file_path, moved_path)
        except OSError as e:
            # the copy is not in adjusted_files yet
            os.remove(adjusted_path)
            raise FileIOError(f"Could not move {file_path} to {moved_path}",
                              file_path=file_path, original_error=e) from e
        logger.info("Original image moved to: %s", moved_path)
        return AdjustedFile(file_path, adjusted_path, moved_path)

    def apply(self, limits: ContrastLimits,
              progress_callback: Optional[ProgressCallback] = None) -> List[AdjustedFile]:
        """Stretches every image to ``limits``.

        Files handled before a failure stay recorded, so ``revert`` can still
        undo a partial pass.

        Raises:
            FileIOError: an image could not be loaded, saved or moved.
        """
        if self.adjusted_files:
            raise RuntimeError("Images are already adjusted; finish or revert first")
        limits = ContrastLimits(int(limits[0]), int(limits[1]))
        table = create_lookup_table(limits.min_value, limits.max_value)
        self.limits = limits

        total = len(self.file_paths)
        for index, file_path in enumerate(self.file_paths, start=1):
            if progress_callback:
                progress_callback(index, total)
            self.adjusted_files.append(self._adjust_one(file_path, table))
        return list(self.adjusted_files)

    def revert(self) -> List[AdjustedFile]:
        """Deletes the adjusted copies and restores the originals."""
        reverted = []
        while self.adjusted_files:
            adjusted = self.adjusted_files[-1]
            try:
                if os.path.exists(adjusted.adjusted_path):
                    os.remove(adjusted.adjusted_path)
                    logger.info("Adjusted image deleted: %s", adjusted.adjusted_path)
                shutil.move(adjusted.moved_path, adjusted.original_path)
            except OSError as e:
                raise FileIOError(f"Could not restore {adjusted.original_path}",
                                  file_path=adjusted.original_path, original_error=e) from e
            logger.info("Original image restored: %s", adjusted.original_path)
            reverted.append(self.adjusted_files.pop())
        self.limits = None
        return reverted

    def finish(self, base_dir: str, now: Optional[datetime] = None) -> str:
        """Writes the adjustment log into ``base_dir/<output_dir_name>`` and returns its path.

        The log holds the applied Min / Max values followed by one
        ``original => adjusted`` line per image.
        """
        if self.limits is None:
            raise RuntimeError("Nothing to finish; apply limits first")
        output_dir = os.path.join(base_dir, self.output_dir_name)
        log_path = os.path.join(output_dir, f"{settings.ADJUSTMENT_DEFAULTS['log_prefix']}{utc_timestamp(now)}.txt")
        lines = [f"Min Value: {self.limits.min_value}", f"Max Value: {self.limits.max_value}", ""]
        lines.extend(f"{a.original_path} => {a.adjusted_path}" for a in self.adjusted_files)
        try:
            os.makedirs(output_dir, exist_ok=True)
            with open(log_path, "w", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            raise FileIOError(f"Could not write adjustment log {log_path}",
                              file_path=log_path, original_error=e) from e
        logger.info("Adjustment info saved to: %s", log_path)
        self.adjusted_files = []
        return log_path

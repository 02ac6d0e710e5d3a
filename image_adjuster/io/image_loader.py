# Image import functionality using Pillow
import os
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..utils.errors import ErrorCategory, FileIOError, handle_errors
from ..utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp', '.webp', '.gif')


def identify_image(file_path):
    """Checks that a file is an image Pillow can decode, without loading the pixels.

    Returns:
        (format, (width, height))

    Raises:
        FileIOError: if the path is missing or not a recognizable image.
    """
    if not isinstance(file_path, str) or not file_path:
        raise FileIOError("Invalid image file path", file_path=file_path)
    if not os.path.isfile(file_path):
        raise FileIOError(f"Invalid image file: {file_path}", file_path=file_path,
                          user_message=f"File not found: {file_path}")
    try:
        with Image.open(file_path) as img:
            fmt, size = img.format, img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise FileIOError(f"Invalid image file: {file_path}", file_path=file_path,
                          original_error=e) from e
    return fmt, size


@handle_errors(fallback_value=None, category=ErrorCategory.FILE_IO, log_level="error")
def load_image(file_path):
    """Loads an image as an 8-bit numpy array, applying EXIF orientation.

    Images with an alpha channel (including palette transparency) come back
    as (H, W, 4) RGBA, everything else as (H, W, 3) RGB.

    Returns:
        numpy.ndarray (uint8), or None if the file is missing or cannot be decoded.
    """
    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided.")
        return None

    if not os.path.isfile(file_path):
        logger.error("File not found at '%s'", file_path)
        return None

    try:
        with Image.open(file_path) as img:
            img_oriented = ImageOps.exif_transpose(img)
            has_alpha = (
                img_oriented.mode in ('RGBA', 'LA', 'PA')
                or (img_oriented.mode == 'P' and 'transparency' in img_oriented.info)
            )
            target_mode = 'RGBA' if has_alpha else 'RGB'
            if img_oriented.mode != target_mode:
                logger.debug("Converting image from mode '%s' to '%s'.", img_oriented.mode, target_mode)
                converted = img_oriented.convert(target_mode)
            else:
                converted = img_oriented
            # np.array copies, so the result is writable and outlives the file handle
            image_np = np.array(converted, dtype=np.uint8)
    except UnidentifiedImageError:
        logger.error("Pillow could not identify image file format or file is corrupted: '%s'", file_path)
        return None

    if image_np.size == 0:
        logger.error("Loaded image is empty: '%s'", file_path)
        return None

    logger.debug("Loaded image '%s' (%dx%d, %d channels)",
                 file_path, image_np.shape[1], image_np.shape[0], image_np.shape[2])
    return image_np

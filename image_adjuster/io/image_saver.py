# Export functionality using Pillow
import os
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..utils.logger import get_logger

logger = get_logger(__name__)

# Formats Pillow writes without an alpha channel; RGBA input is flattened to RGB
_NO_ALPHA_EXTENSIONS = ('.jpg', '.jpeg', '.bmp')


def save_image(image, file_path, quality=95, png_compression=6):
    """Saves an RGB or RGBA uint8 image, choosing the format from the file extension.

    Args:
        image (numpy.ndarray): (H, W, 3) or (H, W, 4) uint8 array.
        file_path (str): Destination path including extension (.jpg, .png, ...).
        quality (int): JPEG / WebP quality, clamped to 1-100.
        png_compression (int): PNG compression level, clamped to 0-9.

    Returns:
        bool: True if saving was successful, False otherwise.
    """
    if image is None or image.size == 0:
        logger.error("Cannot save an empty image.")
        return False

    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided for saving.")
        return False

    if image.dtype != np.uint8:
        logger.warning("Image data type is not uint8. Clipping and converting.")
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.ndim != 3 or image.shape[2] not in (3, 4):
        logger.error("Image must be RGB or RGBA to save, got shape %s.", image.shape)
        return False

    # Create the output directory if it doesn't exist
    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
            logger.info("Created output directory: %s", output_dir)
        except OSError:
            logger.exception("Could not create directory '%s'", output_dir)
            return False

    ext = os.path.splitext(file_path)[1].lower()
    if image.shape[2] == 4 and ext in _NO_ALPHA_EXTENSIONS:
        logger.debug("Dropping alpha channel for %s output", ext)
        image = np.ascontiguousarray(image[..., :3])

    save_kwargs = {}
    if ext in ('.jpg', '.jpeg'):
        save_kwargs['quality'] = max(1, min(100, int(quality)))
        save_kwargs['optimize'] = True
    elif ext == '.png':
        save_kwargs['compress_level'] = max(0, min(9, int(png_compression)))
    elif ext in ('.tif', '.tiff'):
        save_kwargs['compression'] = 'tiff_lzw'
    elif ext == '.webp':
        save_kwargs['quality'] = max(0, min(100, int(quality)))

    try:
        with Image.fromarray(image) as img:
            img.save(file_path, **save_kwargs)
    except (ValueError, KeyError, UnidentifiedImageError):
        logger.error("Pillow could not determine save format for: '%s'", file_path)
        return False
    except OSError:
        logger.exception("OS error saving image '%s'", file_path)
        return False

    logger.debug("Saved image to: '%s'", file_path)
    return True

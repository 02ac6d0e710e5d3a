# IO package initialization
from .image_loader import identify_image, load_image, SUPPORTED_EXTENSIONS
from .image_saver import save_image

__all__ = [
    'identify_image',
    'load_image',
    'save_image',
    'SUPPORTED_EXTENSIONS',
]

"""
Pillow helpers around the compressor's input and output files.
"""
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from jpegshrink.core.errors import InvalidImageError
from jpegshrink.utils.metrics import calculate_image_metrics

logger = logging.getLogger(__name__)


def verify_image(path: str) -> Tuple[str, Tuple[int, int]]:
    """
    Make sure an uploaded file is an image before handing it to the compressor.

    Returns:
        Tuple of (format, (width, height))

    Raises:
        InvalidImageError: If Pillow cannot identify or verify the file
    """
    try:
        with Image.open(path) as img:
            img.verify()
            return img.format, img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise InvalidImageError(f"Uploaded file is not a valid image: {e}") from e


def compare_images(original_path: str, compressed_path: str) -> Tuple[Optional[float], Optional[float]]:
    """PSNR and SSIM of the compressed output against the upload."""
    try:
        with Image.open(original_path) as original, Image.open(compressed_path) as compressed:
            return calculate_image_metrics(original, compressed)
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Could not open images for quality metrics: {e}")
        return None, None

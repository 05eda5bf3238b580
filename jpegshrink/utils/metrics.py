"""
Utilities for measuring compression results and image quality.
"""
import time
import logging
import numpy as np
import psutil
from PIL import Image
from typing import Tuple, Optional, Dict
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

# Set up logging
logger = logging.getLogger(__name__)

# PSNR reported for pixel-identical images
IDENTICAL_PSNR = 100.0


def get_cpu_mem() -> Dict[str, float]:
    """
    Get current CPU and memory usage.

    Returns:
        Dictionary with CPU and memory usage percentages
    """
    return {
        "cpu_usage": psutil.cpu_percent(interval=None),
        "memory_usage": psutil.virtual_memory().percent
    }


def calculate_image_metrics(
    original_img: Image.Image,
    compressed_img: Image.Image
) -> Tuple[Optional[float], Optional[float]]:
    """
    Calculate PSNR and SSIM between an upload and its compressed version.

    The compressed image is resized back to the original dimensions first,
    since the routine may have scaled it down by the resize factor.

    Args:
        original_img: The uploaded image
        compressed_img: The image produced by the compressor

    Returns:
        Tuple of (PSNR, SSIM) rounded to 2 and 4 decimal places, or
        (None, None) if the calculation fails
    """
    try:
        original = np.array(original_img.convert("RGB"))
        compressed_rgb = compressed_img.convert("RGB")
        if compressed_rgb.size != original_img.size:
            logger.info(f"Resizing compressed image {compressed_rgb.size} to {original_img.size} for comparison")
            compressed_rgb = compressed_rgb.resize(original_img.size)
        compressed = np.array(compressed_rgb)

        mse = np.mean(np.square(original.astype(np.float32) - compressed.astype(np.float32)))
        logger.debug(f"MSE between original and compressed: {mse}")

        if mse < 1e-10:
            psnr = IDENTICAL_PSNR
        else:
            psnr = peak_signal_noise_ratio(original, compressed, data_range=255)

        # SSIM needs at least a 7x7 window
        if min(original.shape[0], original.shape[1]) < 7:
            ssim = None
        else:
            ssim = round(float(structural_similarity(original, compressed, data_range=255, channel_axis=2)), 4)

        return round(float(psnr), 2), ssim
    except Exception as e:
        logger.error(f"Error calculating metrics: {e}")
        return None, None


def measure_compression_performance(
    original_size: int,
    compressed_size: int,
    compression_time: float
) -> Dict[str, float]:
    """
    Calculate compression performance metrics.

    Args:
        original_size: Size of the original file in bytes
        compressed_size: Size of the compressed file in bytes
        compression_time: Time taken for compression in seconds

    Returns:
        Dictionary with compression ratio, space savings percentage and processing time
    """
    compression_ratio = original_size / compressed_size if compressed_size > 0 else 0
    space_savings = (1 - (compressed_size / original_size)) * 100 if original_size > 0 else 0

    return {
        "compression_ratio": round(compression_ratio, 2),
        "space_savings_percent": round(space_savings, 2),
        "processing_time": round(compression_time, 4)
    }


class PerformanceTimer:
    """
    Context manager for measuring execution time.

    Example:
        with PerformanceTimer() as timer:
            # Code to measure
        execution_time = timer.execution_time
    """

    def __init__(self):
        self.start_time = None
        self.execution_time = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.execution_time = time.perf_counter() - self.start_time
        return False  # Don't suppress exceptions

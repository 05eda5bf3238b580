"""
Core pieces of the JPEG compression service.

The compression algorithm itself runs in an external process; this package
holds the adapters that invoke it and the checks around its files.
"""
from jpegshrink.core.errors import (
    CompressionError,
    InvalidParametersError,
    InvalidImageError,
    CompressorProcessError,
    CompressorConfigurationError,
    OutputMissingError
)

from jpegshrink.core.compressor import (
    CompressionResult,
    Compressor,
    MatlabCompressor,
    OctaveCompressor,
    CommandCompressor,
    get_compressor
)

from jpegshrink.core.images import verify_image, compare_images

__all__ = [
    # Errors
    'CompressionError',
    'InvalidParametersError',
    'InvalidImageError',
    'CompressorProcessError',
    'CompressorConfigurationError',
    'OutputMissingError',

    # Compressor backends
    'CompressionResult',
    'Compressor',
    'MatlabCompressor',
    'OctaveCompressor',
    'CommandCompressor',
    'get_compressor',

    # Image checks
    'verify_image',
    'compare_images'
]

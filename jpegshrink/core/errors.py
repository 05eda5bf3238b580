"""
Exceptions raised while turning an upload into a compressed JPEG.

Every error carries the HTTP status the API answers with, so the
exception handlers in ``jpegshrink.api`` stay a single lookup.
"""
from typing import Optional


class CompressionError(Exception):
    """Base class for failures while processing a compression request."""
    status_code = 500


class InvalidParametersError(CompressionError):
    """A form field could not be interpreted."""
    status_code = 400


class InvalidImageError(CompressionError):
    """The upload is not an image Pillow can identify."""
    status_code = 400


class CompressorProcessError(CompressionError):
    """The external compressor exited non-zero, could not start or timed out."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = ""
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class OutputMissingError(CompressionError):
    """The compressor reported success but wrote no output file."""

    def __init__(self, message: str, stdout: str = ""):
        super().__init__(message)
        self.stdout = stdout


class CompressorConfigurationError(CompressionError, ValueError):
    """The configured compressor backend cannot be built."""

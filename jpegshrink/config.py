"""
Runtime configuration read from environment variables.

Values are read once at import time. Code that needs them refers to
``config.NAME`` at call time so tests can patch individual settings.
"""
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


# Working directories, relative paths are resolved against the current working directory
UPLOADS_DIR = os.environ.get("UPLOADS_DIR", "uploads")
OUTPUTS_DIR = os.environ.get("OUTPUTS_DIR", "outputs")

# External compressor
COMPRESSOR_BACKEND = os.environ.get("COMPRESSOR_BACKEND", "matlab").lower()
MATLAB_EXECUTABLE = os.environ.get("MATLAB_EXECUTABLE", "matlab")
OCTAVE_EXECUTABLE = os.environ.get("OCTAVE_EXECUTABLE", "octave")
COMPRESSOR_SCRIPT_DIR = os.environ.get("COMPRESSOR_SCRIPT_DIR", "matlabcompression")
COMPRESSOR_FUNCTION = os.environ.get("COMPRESSOR_FUNCTION", "jpegcompress")
COMPRESSOR_COMMAND = os.environ.get("COMPRESSOR_COMMAND", "")
# Seconds; 0 waits for the process indefinitely
COMPRESSOR_TIMEOUT = float(os.environ.get("COMPRESSOR_TIMEOUT", "0"))

# Form defaults, kept as strings since they arrive as form fields
DEFAULT_TARGET_SIZE = "500"
DEFAULT_RESIZE_FACTOR = "1"

COMPUTE_QUALITY_METRICS = _env_flag("COMPUTE_QUALITY_METRICS", "true")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

VERSION = "1.0.0"

"""
JPEG Compression Web Application

This package implements a FastAPI application that accepts an uploaded image,
hands it to an external compression routine (a MATLAB or Octave script, or
any command following the same argument convention) and returns the
resulting JPEG.

Features include:
- Browser upload form with target size and resize factor sliders
- Pluggable compressor backends invoked without a shell
- Per-request temporary files removed on every exit path
- Size and quality (PSNR, SSIM) metrics on each result
"""
# Export the app instance
from jpegshrink.api import app

__all__ = ['app']

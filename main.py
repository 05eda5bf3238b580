"""
JPEG Compression API Entry Point

This file serves as the main entry point for the application,
importing and running the FastAPI application defined in the jpegshrink package.

Run with uvicorn:
    uvicorn main:app --reload
"""
import os
import logging
import sys
from jpegshrink import app
from jpegshrink.core.compressor import get_compressor

# Configure logging based on environment variables
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure root logger
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format=LOG_FORMAT,
    stream=sys.stdout
)

# Set up logger
logger = logging.getLogger(__name__)

# Check that the external compressor can be launched
try:
    compressor = get_compressor()
except ValueError as e:
    logger.critical(f"Invalid compressor configuration: {e}")
    sys.exit(1)

available, detail = compressor.is_available()
if available:
    logger.info(f"{compressor.name} found at {detail}")
else:
    logger.warning(f"{detail}. Compression requests will fail until {compressor.name} is installed.")

# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    # Get configuration from environment variables
    port = int(os.environ.get("PORT", 8000))
    workers = int(os.environ.get("WORKERS", 1))
    debug = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")

    logger.info(f"Starting JPEG Compression API on port {port} with {workers} workers")

    uvicorn.run(
        "jpegshrink:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
        reload=debug
    )

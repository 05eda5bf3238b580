"""
API module for the JPEG compression application.
"""
import os
import time
import shutil
import logging
import platform
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from jpegshrink import config
from jpegshrink.api.compress import router as compress_router
from jpegshrink.api.ui import STATIC_DIR, router as ui_router
from jpegshrink.core.compressor import get_compressor
from jpegshrink.core.errors import CompressionError
from jpegshrink.models.compression import DetailedHealthResponse, HealthResponse
from jpegshrink.utils.file_handling import ensure_directories, get_outputs_dir, get_uploads_dir
from jpegshrink.utils.metrics import get_cpu_mem

# Set up logging
logger = logging.getLogger(__name__)

# Messages for statuses Starlette raises on its own
HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}

# Create FastAPI app
app = FastAPI(
    title="JPEG Compression API",
    description="""
    Web front-end for an external JPEG compression routine.

    Upload an image with a target size (KB) and a resize factor; the image is
    compressed by the configured MATLAB/Octave script and returned as a JPEG.
    """,
    version=config.VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "Content-Disposition",
        "X-Original-Size",
        "X-Compressed-Size",
        "X-Compression-Ratio",
        "X-Space-Savings-Percent",
        "X-Processing-Time",
        "X-PSNR",
        "X-SSIM",
    ],
)

# Include routers
app.include_router(compress_router, prefix="/api")
app.include_router(ui_router)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": message}."""
    message = HTTP_ERROR_MESSAGES.get(exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(CompressionError)
async def compression_exception_handler(request: Request, exc: CompressionError):
    """Render compression failures, prefixing server-side ones."""
    if exc.status_code >= 500:
        logger.error(f"Error processing request: {exc}")
        message = f"Failed to process image: {exc}"
    else:
        logger.info(f"Rejected request: {exc}")
        message = str(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed form parts as a 400 {"error": message}."""
    messages = []
    for error in exc.errors():
        field = error["loc"][-1] if error["loc"] else "body"
        if field == "image":
            return JSONResponse(status_code=400, content={"error": "No image file uploaded"})
        messages.append(f"{field}: {error['msg']}")
    logger.info(f"Rejected request: {messages}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid parameters: " + "; ".join(messages)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": f"Failed to process image: {exc}"}
    )


# Health check endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Check if the API is running."""
    return {"status": "healthy", "version": config.VERSION}


@app.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check():
    """
    Provides detailed health information including system metrics,
    compressor availability and working directory status.
    """
    cpu_mem = get_cpu_mem()
    system_info = {
        "cpu_usage": cpu_mem["cpu_usage"],
        "memory_usage": cpu_mem["memory_usage"],
        "python_version": platform.python_version(),
        "platform": platform.platform()
    }

    # Check compressor
    compressor_status = {"backend": config.COMPRESSOR_BACKEND}
    try:
        compressor = get_compressor()
        available, detail = compressor.is_available()
        compressor_status.update({
            "name": compressor.name,
            "status": "ok" if available else "error",
            "executable": detail if available else compressor.executable,
        })
        if not available:
            compressor_status["message"] = detail
    except ValueError as e:
        compressor_status.update({"status": "error", "message": str(e)})

    # Check working directories
    directories = {}
    try:
        ensure_directories()
    except OSError as e:
        logger.error(f"Could not create working directories: {e}")
    for name, path in (("uploads", get_uploads_dir()), ("outputs", get_outputs_dir())):
        status = {"path": path, "exists": os.path.isdir(path)}
        if status["exists"]:
            status["writable"] = os.access(path, os.W_OK)
            try:
                status["free_space_mb"] = shutil.disk_usage(path).free / (1024 * 1024)
            except OSError as e:
                status["space_error"] = str(e)
        directories[name] = status

    healthy = compressor_status["status"] == "ok" and all(
        d["exists"] and d.get("writable", False) for d in directories.values()
    )
    return {
        "status": "healthy" if healthy else "degraded",
        "version": config.VERSION,
        "system": system_info,
        "compressor": compressor_status,
        "directories": directories,
        "timestamp": time.time()
    }

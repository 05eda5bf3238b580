"""
Upload form served at the site root.
"""
import os

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from jpegshrink import config

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(PACKAGE_DIR, "templates")
STATIC_DIR = os.path.join(PACKAGE_DIR, "static")

# Slider ranges of the upload form
TARGET_SIZE_RANGE = (50, 2000)
RESIZE_FACTOR_RANGE = (0.1, 1.0, 0.1)

templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter(tags=["Upload form"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def upload_form(request: Request):
    """Render the upload form."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "target_size": int(config.DEFAULT_TARGET_SIZE),
            "target_size_min": TARGET_SIZE_RANGE[0],
            "target_size_max": TARGET_SIZE_RANGE[1],
            "resize_factor": float(config.DEFAULT_RESIZE_FACTOR),
            "resize_factor_min": RESIZE_FACTOR_RANGE[0],
            "resize_factor_max": RESIZE_FACTOR_RANGE[1],
            "resize_factor_step": RESIZE_FACTOR_RANGE[2],
            "compress_url": "/api/compress",
            "download_filename": "compressed-image.jpg",
        }
    )

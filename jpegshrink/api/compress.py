"""
Compression endpoint: bridges an uploaded image to the external compressor.
"""
import os
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from jpegshrink import config
from jpegshrink.core.compressor import Compressor, get_compressor
from jpegshrink.core.errors import CompressionError, OutputMissingError
from jpegshrink.core.images import compare_images, verify_image
from jpegshrink.models.compression import CompressionParameters, ErrorResponse
from jpegshrink.utils.file_handling import read_output, request_files, save_upload
from jpegshrink.utils.metrics import PerformanceTimer, measure_compression_performance

# Set up logging
logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "compressed-image.jpg"

router = APIRouter(tags=["Compression"])


def build_result_headers(
    original_size: int,
    compressed_size: int,
    processing_time: float,
    psnr: Optional[float] = None,
    ssim: Optional[float] = None
) -> Dict[str, str]:
    performance = measure_compression_performance(original_size, compressed_size, processing_time)
    headers = {
        "Content-Disposition": f"attachment; filename={DOWNLOAD_FILENAME}",
        "X-Original-Size": str(original_size),
        "X-Compressed-Size": str(compressed_size),
        "X-Compression-Ratio": str(performance["compression_ratio"]),
        "X-Space-Savings-Percent": str(performance["space_savings_percent"]),
        "X-Processing-Time": str(performance["processing_time"]),
    }
    if psnr is not None:
        headers["X-PSNR"] = str(psnr)
    if ssim is not None:
        headers["X-SSIM"] = str(ssim)
    return headers


@router.post(
    "/compress",
    response_class=Response,
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "The compressed JPEG"},
        400: {"model": ErrorResponse, "description": "Missing image or invalid parameters"},
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        500: {"model": ErrorResponse, "description": "Compression failed"},
    }
)
async def compress_image(
    image: Optional[UploadFile] = File(None, description="Image to compress"),
    target_size: Optional[str] = Form(config.DEFAULT_TARGET_SIZE, alias="targetSize"),
    resize_factor: Optional[str] = Form(config.DEFAULT_RESIZE_FACTOR, alias="resizeFactor"),
    compressor: Compressor = Depends(get_compressor)
):
    """
    Compress an uploaded image with the external compression routine.

    - **image**: The image file to compress
    - **targetSize**: Desired output size in kilobytes (default 500)
    - **resizeFactor**: Scale multiplier in (0, 1] (default 1)

    Returns the compressed JPEG as an attachment.
    """
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No image file uploaded")

    params = CompressionParameters.from_form(target_size, resize_factor)

    with request_files(image.filename) as files:
        logger.info(f"Input file path: {files.input_path}")
        logger.info(f"Output file path: {files.output_path}")
        logger.info(f"Target size: {params.target_size_kb} KB, resize factor: {params.resize_factor}")

        try:
            original_size = await run_in_threadpool(save_upload, image.file, files.input_path)
        except OSError as e:
            raise CompressionError(f"Could not save upload: {e}") from e

        await run_in_threadpool(verify_image, files.input_path)

        with PerformanceTimer() as timer:
            result = await compressor.compress(
                files.input_path,
                files.output_path,
                params.target_size_kb,
                params.resize_factor
            )

        if not os.path.exists(files.output_path):
            raise OutputMissingError(
                f"Output file not created. {compressor.name} output: {result.stdout.strip()}",
                stdout=result.stdout
            )

        try:
            content = await run_in_threadpool(read_output, files.output_path)
        except OSError as e:
            raise CompressionError(f"Could not read compressed output: {e}") from e

        psnr, ssim = None, None
        if config.COMPUTE_QUALITY_METRICS:
            psnr, ssim = await run_in_threadpool(compare_images, files.input_path, files.output_path)

    logger.info(
        f"Compressed {image.filename}: {original_size} -> {len(content)} bytes "
        f"in {timer.execution_time:.2f}s"
    )
    return Response(
        content=content,
        media_type="image/jpeg",
        headers=build_result_headers(original_size, len(content), timer.execution_time, psnr, ssim)
    )

"""
Utilities for per-request temporary files.

Each request gets a fresh uuid; the input lands in the uploads directory and
the compressor writes its result to the outputs directory. Both paths are
released when :func:`request_files` exits, whatever the outcome.
"""
import os
import re
import uuid
import shutil
import logging
import contextlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Tuple

from jpegshrink import config
from jpegshrink.core.errors import CompressionError

# Set up logging
logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_compressed.jpg"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass(frozen=True)
class RequestFiles:
    """Temporary paths owned by a single compression request."""
    file_id: str
    input_path: str
    output_path: str


def resolve_directory(path: str) -> str:
    """Resolve a configured directory against the current working directory."""
    return os.path.abspath(os.path.join(os.getcwd(), path))


def get_uploads_dir() -> str:
    return resolve_directory(config.UPLOADS_DIR)


def get_outputs_dir() -> str:
    return resolve_directory(config.OUTPUTS_DIR)


def ensure_directories() -> Tuple[str, str]:
    """
    Create the uploads and outputs directories if they don't exist.

    Returns:
        Tuple of (uploads_dir, outputs_dir)
    """
    uploads_dir = get_uploads_dir()
    outputs_dir = get_outputs_dir()
    os.makedirs(uploads_dir, exist_ok=True)
    os.makedirs(outputs_dir, exist_ok=True)
    return uploads_dir, outputs_dir


def safe_filename(filename: str) -> str:
    """
    Reduce a client supplied filename to something safe to join onto a directory.

    Directory components are dropped and anything outside ``[A-Za-z0-9._-]``
    becomes an underscore.
    """
    name = os.path.basename((filename or "").replace("\\", "/"))
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name or "upload"


def remove_file(path: str) -> bool:
    """
    Delete a file, logging instead of raising on failure.

    Returns:
        True if the file is gone afterwards
    """
    try:
        if os.path.lexists(path):
            os.remove(path)
            logger.debug(f"Cleaned up temporary file: {path}")
        return True
    except OSError as e:
        logger.warning(f"Failed to clean up temporary file {path}: {e}")
        return False


@contextlib.contextmanager
def request_files(original_filename: str) -> Iterator[RequestFiles]:
    """
    Allocate unique input/output paths for one request and remove them on exit.

    Args:
        original_filename: Filename as sent by the client

    Yields:
        RequestFiles for this request

    Raises:
        CompressionError: If the working directories cannot be created
    """
    try:
        uploads_dir, outputs_dir = ensure_directories()
    except OSError as e:
        raise CompressionError(f"Could not create working directories: {e}") from e
    file_id = uuid.uuid4().hex
    files = RequestFiles(
        file_id=file_id,
        input_path=os.path.join(uploads_dir, f"{file_id}_{safe_filename(original_filename)}"),
        output_path=os.path.join(outputs_dir, f"{file_id}{OUTPUT_SUFFIX}")
    )
    try:
        yield files
    finally:
        for path in (files.input_path, files.output_path):
            remove_file(path)


def save_upload(source: BinaryIO, destination: str) -> int:
    """
    Copy an uploaded file object to disk.

    Returns:
        Number of bytes written
    """
    source.seek(0)
    with open(destination, "wb") as f:
        shutil.copyfileobj(source, f)
    return os.path.getsize(destination)


def read_output(path: str) -> bytes:
    """Read a compressed output file fully into memory."""
    with open(path, "rb") as f:
        return f.read()

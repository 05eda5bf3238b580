"""
Utility functions for the JPEG compression service.
"""
from jpegshrink.utils.metrics import (
    get_cpu_mem,
    calculate_image_metrics,
    measure_compression_performance,
    PerformanceTimer
)

from jpegshrink.utils.file_handling import (
    RequestFiles,
    ensure_directories,
    get_uploads_dir,
    get_outputs_dir,
    safe_filename,
    remove_file,
    request_files,
    save_upload
)

__all__ = [
    # Metrics utilities
    'get_cpu_mem',
    'calculate_image_metrics',
    'measure_compression_performance',
    'PerformanceTimer',

    # File handling utilities
    'RequestFiles',
    'ensure_directories',
    'get_uploads_dir',
    'get_outputs_dir',
    'safe_filename',
    'remove_file',
    'request_files',
    'save_upload'
]

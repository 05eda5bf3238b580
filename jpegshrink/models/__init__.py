"""
Data models for the JPEG compression API.
"""
from jpegshrink.models.compression import (
    CompressionParameters,
    ErrorResponse,
    HealthResponse,
    DetailedHealthResponse
)

__all__ = [
    'CompressionParameters',
    'ErrorResponse',
    'HealthResponse',
    'DetailedHealthResponse'
]

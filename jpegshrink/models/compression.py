"""
Models for compression requests and API responses.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationError

from jpegshrink import config
from jpegshrink.core.errors import InvalidParametersError

# Form field name for each model field, used in error messages
FORM_FIELDS = {
    "target_size_kb": "targetSize",
    "resize_factor": "resizeFactor",
}


class CompressionParameters(BaseModel):
    """Validated numeric parameters passed to the external compressor"""
    target_size_kb: int = Field(..., ge=1, description="Desired output size in kilobytes")
    resize_factor: float = Field(..., gt=0, le=1, description="Scale multiplier in (0, 1]")

    @classmethod
    def from_form(
        cls,
        target_size: Optional[str],
        resize_factor: Optional[str]
    ) -> "CompressionParameters":
        """
        Build parameters from raw form strings, falling back to the defaults
        for missing or empty values.

        Raises:
            InvalidParametersError: If a value is not a number or out of range
        """
        raw = {
            "target_size_kb": (target_size or "").strip() or config.DEFAULT_TARGET_SIZE,
            "resize_factor": (resize_factor or "").strip() or config.DEFAULT_RESIZE_FACTOR,
        }
        try:
            return cls(**raw)
        except ValidationError as e:
            messages = []
            for error in e.errors():
                field = FORM_FIELDS.get(str(error["loc"][0]), str(error["loc"][0]))
                messages.append(f"{field}: {error['msg']}")
            raise InvalidParametersError("Invalid parameters: " + "; ".join(messages)) from e


class ErrorResponse(BaseModel):
    """Body of every error response"""
    error: str = Field(..., description="Human readable error message")


class HealthResponse(BaseModel):
    """Response model for the basic health check"""
    status: str
    version: str


class DetailedHealthResponse(HealthResponse):
    """Response model for the detailed health check"""
    system: Dict[str, Any]
    compressor: Dict[str, Any]
    directories: Dict[str, Any]
    timestamp: float

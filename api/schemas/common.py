"""
Common API schemas used across endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: str = Field(..., description="Error code")
    timestamp: str = Field(..., description="ISO 8601 timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Validation Error",
                "detail": "refresh: Input should be a valid boolean",
                "code": "VALIDATION_ERROR",
                "timestamp": "2024-01-15T10:30:00Z",
            }
        }


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str = Field(..., description="'healthy' while the process serves requests")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    version: str = Field(..., description="API version")
    cache: str = Field(..., description="'connected' or 'disabled'")

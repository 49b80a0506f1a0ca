"""
Common schema types used across the API.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel


class ErrorBody(BaseModel):
    """Error details."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorBody
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
    serving_strategies: int = 0

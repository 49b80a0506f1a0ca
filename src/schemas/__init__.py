"""
Pydantic schemas for API request/response validation.
"""

from src.schemas.auth import UserLogin, UserResponse, TokenResponse
from src.schemas.common import ErrorBody, ErrorResponse, HealthResponse
from src.schemas.search import AccessCheckResponse
from src.schemas.tasks import ScheduleUpdate, ScheduledTaskResponse
from src.schemas.filters import UserFilterRequest, UserFilterResponse

__all__ = [
    # Auth
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    # Common
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
    # Search
    "AccessCheckResponse",
    # Tasks
    "ScheduleUpdate",
    "ScheduledTaskResponse",
    # Filters
    "UserFilterRequest",
    "UserFilterResponse",
]

"""
User filter schemas.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.schemas.auth import UserResponse


class UserFilterRequest(BaseModel):
    """Submitted filter form data, keyed by form field name."""

    form_data: Dict[str, Any] = Field(default_factory=dict)
    limit: int = Field(100, ge=1, le=1000)


class UserFilterResponse(BaseModel):
    """Users matching the filter, with a description of the active filter."""

    label: Optional[str] = None
    total: int
    users: List[UserResponse]

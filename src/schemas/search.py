"""
Search schemas.
"""

from pydantic import BaseModel

from src.engines.search.manager import AccessResult


class AccessCheckResponse(BaseModel):
    """Access decision for one indexed document."""

    area_id: str
    item_id: int
    access: str  # granted, denied, deleted

    @classmethod
    def from_result(cls, area_id: str, item_id: int, result: AccessResult) -> "AccessCheckResponse":
        return cls(area_id=area_id, item_id=item_id, access=result.name.lower())

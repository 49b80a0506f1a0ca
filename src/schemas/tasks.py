"""
Scheduled task schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from src.engines.tasks.task_service import validate_cron_field


class ScheduleUpdate(BaseModel):
    """Schedule change request. Omitted fields are left unchanged."""

    minute: Optional[str] = None
    hour: Optional[str] = None
    day: Optional[str] = None
    month: Optional[str] = None
    dayofweek: Optional[str] = None
    disabled: Optional[bool] = None

    @field_validator("minute", "hour", "day", "month", "dayofweek")
    @classmethod
    def validate_cron(cls, v: Optional[str], info) -> Optional[str]:
        if v is None:
            return v
        return validate_cron_field(info.field_name, v)


class ScheduledTaskResponse(BaseModel):
    """Scheduled task as shown to administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    classname: str
    component: str
    blocking: bool
    customised: bool
    lastruntime: Optional[int] = None
    nextruntime: Optional[int] = None
    faildelay: int
    minute: str
    hour: str
    day: str
    month: str
    dayofweek: str
    disabled: bool

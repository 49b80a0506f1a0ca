"""
Scheduled task administration.

Schedule changes are validated, applied to the task record and recorded as a
``core.schedule_task_updated`` event before the caller commits.
"""

import re
import uuid
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError
from src.kernel.events.event_store import EventStore
from src.kernel.events.event_types import ScheduleTaskUpdatedEvent
from src.kernel.models.scheduled_task import ScheduledTask
from src.logging_config import get_logger

logger = get_logger(__name__)

# Inclusive value range per cron field
CRON_FIELD_RANGES: Dict[str, tuple[int, int]] = {
    "minute": (0, 59),
    "hour": (0, 23),
    "day": (1, 31),
    "month": (1, 12),
    "dayofweek": (0, 6),
}

_CRON_TERM_RE = re.compile(r"^(\*|\d+(-\d+)?)(/\d+)?$")


def validate_cron_field(field: str, value: str) -> str:
    """
    Validate one cron field ("*", "5", "1-5", "*/15", "0,30").

    Raises:
        ValueError: malformed term or value out of range
    """
    low, high = CRON_FIELD_RANGES[field]
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")

    for term in value.split(","):
        match = _CRON_TERM_RE.match(term)
        if not match:
            raise ValueError(f"Invalid {field} value: {term!r}")
        numbers = [int(n) for n in re.findall(r"\d+", match.group(1))]
        if any(n < low or n > high for n in numbers):
            raise ValueError(f"{field} value out of range {low}-{high}: {term!r}")
        if len(numbers) == 2 and numbers[0] > numbers[1]:
            raise ValueError(f"Invalid {field} range: {term!r}")
        if match.group(3) and int(match.group(3)[1:]) == 0:
            raise ValueError(f"{field} step must be positive: {term!r}")
    return value


class TaskService:
    """Read and update scheduled task schedules."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def list_tasks(self) -> List[ScheduledTask]:
        result = await self.session.execute(
            select(ScheduledTask).order_by(ScheduledTask.component, ScheduledTask.classname)
        )
        return list(result.scalars().all())

    async def get_task(self, task_id: int) -> ScheduledTask:
        """
        Raises:
            NotFoundError: no such task
        """
        task = await self.session.get(ScheduledTask, task_id)
        if task is None:
            raise NotFoundError(f"Scheduled task {task_id} not found")
        return task

    async def update_schedule(
        self,
        task_id: int,
        changes: Dict[str, object],
        user_id: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ) -> ScheduledTask:
        """
        Apply schedule changes and log the update event.

        ``changes`` may hold cron fields and ``disabled``; unknown keys are
        rejected. The task is marked customised.

        Raises:
            NotFoundError: no such task
            ValueError: unknown field or invalid cron value
        """
        task = await self.get_task(task_id)

        for field, value in changes.items():
            if field in CRON_FIELD_RANGES:
                setattr(task, field, validate_cron_field(field, str(value)))
            elif field == "disabled":
                task.disabled = bool(value)
            else:
                raise ValueError(f"Unknown schedule field: {field}")

        task.customised = True
        await self.session.flush()

        event = ScheduleTaskUpdatedEvent.create_from_schedule_task_record(task, user_id=user_id)
        await event.trigger(self.event_store, ip_address=ip_address)

        logger.info(
            "Scheduled task updated",
            extra={"task": task.classname, "fields": sorted(changes)},
        )
        return task

"""
Event classes.

An event is built with ``create()``, validated on construction, and written to
the audit log with ``trigger()``. Events rebuilt from a log row via
``restore()`` are read-only views of what happened.
"""

import uuid
from typing import Any, ClassVar, Dict, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field, PrivateAttr, model_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import CodingError
from src.kernel.events.event_store import EventStore
from src.kernel.models.event_log import EventLog, EventType, EventCrud, EduLevel
from src.kernel.models.scheduled_task import ScheduledTask

# Fields of a scheduled task record copied into ``other``
SCHEDULE_TASK_FIELDS = (
    "classname",
    "component",
    "blocking",
    "customised",
    "lastruntime",
    "nextruntime",
    "faildelay",
    "hour",
    "minute",
    "day",
    "dayofweek",
    "month",
    "disabled",
)


class BaseEvent(BaseModel):
    """Base event: who did what to which object, plus free-form ``other`` data."""

    event_type: ClassVar[EventType]
    default_crud: ClassVar[EventCrud] = EventCrud.READ
    default_edu_level: ClassVar[EduLevel] = EduLevel.OTHER
    object_table: ClassVar[Optional[str]] = None

    crud: EventCrud = EventCrud.READ
    edu_level: EduLevel = EduLevel.OTHER
    object_id: Optional[int] = None
    context_id: Optional[int] = None
    user_id: Optional[uuid.UUID] = None
    other: Dict[str, Any] = Field(default_factory=dict)

    _restored: bool = PrivateAttr(default=False)

    @classmethod
    def create(cls, **data: Any) -> "BaseEvent":
        """Build a new event with the class defaults applied."""
        data.setdefault("crud", cls.default_crud)
        data.setdefault("edu_level", cls.default_edu_level)
        return cls(**data)

    @classmethod
    def restore(cls, row: EventLog) -> "BaseEvent":
        """Rebuild an event from its log row."""
        if row.event_type != cls.event_type.value:
            raise CodingError(f"Log row {row.id} is not a {cls.event_type.value} event")
        event = cls(
            crud=EventCrud(row.crud),
            edu_level=EduLevel(row.edu_level),
            object_id=int(row.entity_id),
            context_id=row.context_id,
            user_id=row.user_id,
            other=dict(row.payload or {}),
        )
        event._restored = True
        return event

    @property
    def is_restored(self) -> bool:
        return self._restored

    @property
    def name(self) -> str:
        raise NotImplementedError

    @property
    def description(self) -> str:
        return ""

    @property
    def url(self) -> Optional[str]:
        return None

    async def trigger(
        self,
        store: EventStore,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> EventLog:
        """Write the event to the audit log."""
        if self._restored:
            raise CodingError("Restored events cannot be triggered again")
        return await store.log(
            event_type=self.event_type,
            entity_type=self.object_table or "system",
            entity_id=self.object_id if self.object_id is not None else 0,
            user_id=self.user_id,
            crud=self.crud,
            edu_level=self.edu_level,
            context_id=self.context_id,
            payload=self.other,
            ip_address=ip_address,
            user_agent=user_agent,
        )


class ScheduleTaskUpdatedEvent(BaseEvent):
    """A scheduled task's schedule was changed by an administrator."""

    event_type: ClassVar[EventType] = EventType.SCHEDULE_TASK_UPDATED
    default_crud: ClassVar[EventCrud] = EventCrud.UPDATE
    default_edu_level: ClassVar[EduLevel] = EduLevel.OTHER
    object_table: ClassVar[Optional[str]] = "task_scheduled"

    _task_record: Optional[ScheduledTask] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _require_task_fields(self) -> "ScheduleTaskUpdatedEvent":
        if self.object_id is None:
            raise ValueError("The 'objectid' value must be set")
        if "classname" not in self.other:
            raise ValueError("The 'classname' value must be set in other")
        return self

    @classmethod
    def create_from_schedule_task_record(
        cls,
        task: ScheduledTask,
        user_id: Optional[uuid.UUID] = None,
        context_id: Optional[int] = None,
    ) -> "ScheduleTaskUpdatedEvent":
        """Build the event from a task record, keeping the record for observers."""
        event = cls.create(
            object_id=task.id,
            user_id=user_id,
            context_id=context_id,
            other={field: getattr(task, field) for field in SCHEDULE_TASK_FIELDS},
        )
        event._task_record = task
        return event

    @property
    def name(self) -> str:
        return "Scheduled task updated"

    @property
    def url(self) -> str:
        query = urlencode({"action": "edit", "task": self.other["classname"]})
        return f"/admin/tool/task/scheduledtasks.php?{query}"

    async def get_scheduled_task(self, session: AsyncSession) -> ScheduledTask:
        """
        Return the task record this event is about.

        Only meaningful to observers of a live event; restored events raise.
        """
        if self._restored:
            raise CodingError("get_scheduled_task() is intended for event observers only")

        if self._task_record is None:
            result = await session.execute(
                select(ScheduledTask).where(ScheduledTask.id == self.object_id)
            )
            self._task_record = result.scalar_one_or_none()

        if self._task_record is None:
            raise CodingError(f"Scheduled task record {self.object_id} does not exist")

        return self._task_record

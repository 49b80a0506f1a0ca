"""
Event Store service for append-only audit logging.

All state mutations MUST be logged here BEFORE commit.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.kernel.models.event_log import EventLog, EventType, EventCrud, EduLevel
from src.logging_config import get_logger

logger = get_logger(__name__)

EntityId = Union[int, uuid.UUID, str]


class EventStore:
    """
    Service for managing the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.SCHEDULE_TASK_UPDATED,
            entity_type="task_scheduled",
            entity_id=task.id,
            user_id=current_user.id,
            crud=EventCrud.UPDATE,
            payload={"classname": task.classname},
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: EntityId,
        user_id: Optional[uuid.UUID] = None,
        crud: EventCrud = EventCrud.READ,
        edu_level: EduLevel = EduLevel.OTHER,
        context_id: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> EventLog:
        """
        Log an event to the immutable audit log.

        The caller owns the transaction: flush/commit after all operations.
        """
        event = EventLog(
            event_type=event_type.value,
            crud=crud.value,
            edu_level=edu_level.value,
            entity_type=entity_type,
            entity_id=str(entity_id),
            context_id=context_id,
            user_id=user_id,
            payload=self._serialize_payload(payload) if payload else {},
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self.session.add(event)
        logger.debug(
            "Event logged",
            extra={"event_type": event_type.value, "entity": f"{entity_type}:{entity_id}"},
        )
        return event

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: EntityId,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """
        Get the event history for a specific entity.

        Returns:
            List of EventLog records, newest first
        """
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == str(entity_id),
            )
        )

        if event_types:
            query = query.where(EventLog.event_type.in_([t.value for t in event_types]))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert payload values to JSON-serializable types."""
        return {key: self._serialize_value(value) for key, value in payload.items()}

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, dict):
            return self._serialize_payload(value)
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v) for v in value]
        return value

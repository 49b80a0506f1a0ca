"""
Immutable event log for audit trail.

State mutations are logged here before commit; rows are never updated.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.kernel.models.base import Base, generate_uuid


class EventType(str, Enum):
    """All event types for the audit log."""

    # User events
    USER_LOGGED_IN = "core.user_loggedin"

    # Admin events
    SCHEDULE_TASK_UPDATED = "core.schedule_task_updated"


class EventCrud(str, Enum):
    """Kind of change an event describes."""
    CREATE = "c"
    READ = "r"
    UPDATE = "u"
    DELETE = "d"


class EduLevel(int, Enum):
    """Educational relevance of an event, used by reports."""
    OTHER = 0
    TEACHING = 1
    PARTICIPATING = 2


class EventLog(Base):
    """
    Immutable audit event log.

    ``entity_type`` is the table the event's object lives in, ``entity_id``
    its primary key rendered as text (integer or UUID).
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )

    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    crud: Mapped[str] = mapped_column(String(1), nullable=False, default=EventCrud.READ.value)
    edu_level: Mapped[int] = mapped_column(Integer, nullable=False, default=EduLevel.OTHER.value)

    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    context_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    # Actor (None for system events)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
        index=True,
    )

    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_type_time", "event_type", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"

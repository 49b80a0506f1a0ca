"""
Event logging infrastructure.

Provides append-only audit logging with immutable events.
"""

from src.kernel.events.event_store import EventStore
from src.kernel.events.event_types import BaseEvent, ScheduleTaskUpdatedEvent

__all__ = [
    "EventStore",
    "BaseEvent",
    "ScheduleTaskUpdatedEvent",
]

"""
Kernel Layer

Foundational components shared by every engine and plugin:
- Data models (users, courses, contexts, stored files, tasks)
- Immutable Event Log (all mutations logged before commit)
- Identity Core (accounts, password hashing, access tokens)
- Access Core (context resolution and login predicates)
"""

from src.kernel.models import (
    User,
    UserRole,
    Course,
    CourseModule,
    Context,
    ContextLevel,
    StoredFile,
    FileAccessLevel,
    ScheduledTask,
    EventLog,
    EventType,
)

__all__ = [
    "User",
    "UserRole",
    "Course",
    "CourseModule",
    "Context",
    "ContextLevel",
    "StoredFile",
    "FileAccessLevel",
    "ScheduledTask",
    "EventLog",
    "EventType",
]

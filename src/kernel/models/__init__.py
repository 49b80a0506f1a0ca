"""
Kernel Data Models

Core SQLAlchemy models: identity, course catalogue, contexts, roles,
stored files, scheduled tasks and the audit event log.
"""

from src.kernel.models.base import Base, TimestampMixin, generate_uuid
from src.kernel.models.user import User, UserRole
from src.kernel.models.course import Course, CourseCategory, CourseModule, Enrolment
from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.role import Role, RoleAssignment
from src.kernel.models.stored_file import StoredFile, FileAccessLevel, DIRECTORY_FILENAME
from src.kernel.models.scheduled_task import ScheduledTask
from src.kernel.models.event_log import EventLog, EventType, EventCrud, EduLevel

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # User
    "User",
    "UserRole",
    # Courses
    "Course",
    "CourseCategory",
    "CourseModule",
    "Enrolment",
    # Contexts & roles
    "Context",
    "ContextLevel",
    "Role",
    "RoleAssignment",
    # Files
    "StoredFile",
    "FileAccessLevel",
    "DIRECTORY_FILENAME",
    # Tasks
    "ScheduledTask",
    # Event Log
    "EventLog",
    "EventType",
    "EventCrud",
    "EduLevel",
]

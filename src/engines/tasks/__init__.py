"""
Task Engine - scheduled task administration.
"""

from src.engines.tasks.task_service import TaskService, validate_cron_field, CRON_FIELD_RANGES

__all__ = [
    "TaskService",
    "validate_cron_field",
    "CRON_FIELD_RANGES",
]

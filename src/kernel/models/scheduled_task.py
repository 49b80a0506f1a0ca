"""
Scheduled task definitions (cron-style schedule per task class).
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.kernel.models.base import Base


class ScheduledTask(Base):
    """A scheduled task record. Cron fields are kept as strings ("*", "*/5", "3")."""

    __tablename__ = "task_scheduled"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    classname: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    component: Mapped[str] = mapped_column(String(255), nullable=False)
    blocking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Set once an admin has changed the default schedule
    customised: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    lastruntime: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    nextruntime: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    faildelay: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    minute: Mapped[str] = mapped_column(String(25), default="*", nullable=False)
    hour: Mapped[str] = mapped_column(String(25), default="*", nullable=False)
    day: Mapped[str] = mapped_column(String(25), default="*", nullable=False)
    month: Mapped[str] = mapped_column(String(25), default="*", nullable=False)
    dayofweek: Mapped[str] = mapped_column(String(25), default="*", nullable=False)
    disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<ScheduledTask {self.classname}>"

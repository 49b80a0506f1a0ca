"""
Contexts: the scope (site, course, module) a file or role assignment lives in.
"""

from enum import IntEnum
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.kernel.models.base import Base


class ContextLevel(IntEnum):
    """Context levels. Values match the stored column."""
    SYSTEM = 10
    USER = 30
    CATEGORY = 40
    COURSE = 50
    MODULE = 70


class Context(Base):
    """
    Context record.

    ``instance_id`` points at the course id for COURSE contexts and at the
    course-module id for MODULE contexts.
    """

    __tablename__ = "contexts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    context_level: Mapped[int] = mapped_column(Integer, nullable=False)
    instance_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("contexts.id"),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_contexts_level_instance", "context_level", "instance_id", unique=True),
    )

    @property
    def level(self) -> ContextLevel:
        return ContextLevel(self.context_level)

    def __repr__(self) -> str:
        return f"<Context {self.id} level={self.context_level} instance={self.instance_id}>"

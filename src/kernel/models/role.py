"""
Roles and role assignments.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.kernel.models.base import Base

if TYPE_CHECKING:
    from src.kernel.models.user import User


class Role(Base):
    """A role that can be assigned in a context (student, editingteacher, ...)."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    short_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Offered as a choice when enrolling users into a course
    default_enrol: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def display_name(self) -> str:
        return self.name or self.short_name


class RoleAssignment(Base):
    """Assignment of a role to a user in a context."""

    __tablename__ = "role_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )
    context_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contexts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="role_assignments")

    __table_args__ = (
        Index("ix_role_assignments_role_context", "role_id", "context_id"),
    )

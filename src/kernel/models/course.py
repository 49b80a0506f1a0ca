"""
Course catalogue models: categories, courses, course modules and enrolments.

Course ids are integers; they are the identifiers the search index stores
for course documents.
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.kernel.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.kernel.models.user import User


class CourseCategory(Base):
    """
    Course category tree node.

    ``path`` is the materialised list of ancestor ids including this one,
    e.g. "/1/4/9". Descendants of a category share its path as a prefix.
    """

    __tablename__ = "course_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("course_categories.id"),
        nullable=True,
    )
    path: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    courses: Mapped[List["Course"]] = relationship("Course", back_populates="category")

    @property
    def depth(self) -> int:
        return len([p for p in self.path.split("/") if p])

    def __repr__(self) -> str:
        return f"<CourseCategory {self.id} {self.path}>"


class Course(Base, TimestampMixin):
    """A course. The indexed entity of the course search areas."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("course_categories.id"),
        nullable=False,
        index=True,
    )
    short_name: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(254), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    category: Mapped["CourseCategory"] = relationship("CourseCategory", back_populates="courses")
    modules: Mapped[List["CourseModule"]] = relationship("CourseModule", back_populates="course")

    def __repr__(self) -> str:
        return f"<Course {self.id} {self.short_name}>"


class CourseModule(Base):
    """An activity instance placed in a course (folder, page, ...)."""

    __tablename__ = "course_modules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    module_name: Mapped[str] = mapped_column(String(50), nullable=False)
    instance_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    visible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    course: Mapped["Course"] = relationship("Course", back_populates="modules")

    @property
    def component(self) -> str:
        return f"mod_{self.module_name}"

    def __repr__(self) -> str:
        return f"<CourseModule {self.id} {self.component}>"


class Enrolment(Base, TimestampMixin):
    """User enrolment in a course."""

    __tablename__ = "enrolments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="enrolments")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrolments_user_course"),
    )

"""
Stored file metadata.

File bytes live in the content-addressed file store (see
src.engines.files.storage.FileStorage); this table only records where a file sits
in the component/area tree and who may read it.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.kernel.models.base import Base, TimestampMixin

# File name used for directory placeholder records
DIRECTORY_FILENAME = "."


class FileAccessLevel(str, Enum):
    """Which login predicate gates a stored file."""
    NONE = "none"
    LOGIN = "login"
    COURSE = "course"
    MODULE = "module"
    ADMIN = "admin"


class StoredFile(Base, TimestampMixin):
    """A file (or directory placeholder) owned by a component file area."""

    __tablename__ = "stored_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    context_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contexts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    component: Mapped[str] = mapped_column(String(100), nullable=False)
    file_area: Mapped[str] = mapped_column(String(50), nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_path: Mapped[str] = mapped_column(String(255), nullable=False, default="/")
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)

    content_hash: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # The file's own switch, checked before any login predicate
    access_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    access_level: Mapped[FileAccessLevel] = mapped_column(
        String(20),
        default=FileAccessLevel.NONE,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "context_id", "component", "file_area", "item_id", "file_path", "file_name",
            name="uq_stored_files_location",
        ),
    )

    @property
    def is_directory(self) -> bool:
        return self.file_name == DIRECTORY_FILENAME

    def can_access(self) -> bool:
        return bool(self.access_enabled)

    def __repr__(self) -> str:
        return (
            f"<StoredFile {self.id} {self.component}/{self.file_area}/"
            f"{self.item_id}{self.file_path}{self.file_name}>"
        )

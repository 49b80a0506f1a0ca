"""
File storage: stored-file lookup plus the content-addressed byte store.

Bytes for a file with SHA-1 ``h`` live at ``<root>/h[0:2]/h[2:4]/h``.
"""

import hashlib
import mimetypes
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.core.errors import StorageError
from src.kernel.models.stored_file import DIRECTORY_FILENAME, FileAccessLevel, StoredFile
from src.logging_config import get_logger

logger = get_logger(__name__)


def compute_content_hash(content: bytes) -> str:
    """SHA-1 of the file bytes, the key of the byte store."""
    return hashlib.sha1(content).hexdigest()


class FileStorage:
    """
    Stored file records and their bytes.

    Usage:
        storage = FileStorage(db)
        file = await storage.get_file(ctx_id, "mod_folder", "content", 0, "/", "a.pdf")
        path = storage.content_path(file.content_hash)
    """

    def __init__(self, session: AsyncSession, root: Optional[Union[str, Path]] = None):
        self.session = session
        self.root = Path(root if root is not None else get_settings().file_storage_root)

    def content_path(self, content_hash: str) -> Path:
        return self.root / content_hash[0:2] / content_hash[2:4] / content_hash

    async def get_file(
        self,
        context_id: int,
        component: str,
        file_area: str,
        item_id: int,
        file_path: str,
        file_name: str,
    ) -> Optional[StoredFile]:
        """Look a file up by its full location; None when absent."""
        query = select(StoredFile).where(
            and_(
                StoredFile.context_id == context_id,
                StoredFile.component == component,
                StoredFile.file_area == file_area,
                StoredFile.item_id == item_id,
                StoredFile.file_path == file_path,
                StoredFile.file_name == file_name,
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def get_content_path(self, file: StoredFile) -> Path:
        """
        Path of a file's bytes.

        Raises:
            StorageError: the record exists but its bytes are missing
        """
        path = self.content_path(file.content_hash)
        if not path.is_file():
            logger.error(
                "Stored file content missing",
                extra={"file_id": file.id, "content_hash": file.content_hash},
            )
            raise StorageError(f"Content missing for file {file.id}")
        return path

    async def create_file_from_bytes(
        self,
        context_id: int,
        component: str,
        file_area: str,
        item_id: int,
        file_path: str,
        file_name: str,
        content: bytes,
        access_level: FileAccessLevel = FileAccessLevel.NONE,
        mime_type: Optional[str] = None,
    ) -> StoredFile:
        """Write bytes to the store (once per hash) and add the file record."""
        content_hash = compute_content_hash(content)
        path = self.content_path(content_hash)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        file = StoredFile(
            context_id=context_id,
            component=component,
            file_area=file_area,
            item_id=item_id,
            file_path=file_path,
            file_name=file_name,
            content_hash=content_hash,
            mime_type=mime_type or mimetypes.guess_type(file_name)[0],
            file_size=len(content),
            access_level=access_level,
        )
        self.session.add(file)
        await self.session.flush()
        return file

    async def create_directory(
        self,
        context_id: int,
        component: str,
        file_area: str,
        item_id: int,
        file_path: str,
    ) -> StoredFile:
        """Add a directory placeholder record."""
        directory = StoredFile(
            context_id=context_id,
            component=component,
            file_area=file_area,
            item_id=item_id,
            file_path=file_path,
            file_name=DIRECTORY_FILENAME,
        )
        self.session.add(directory)
        await self.session.flush()
        return directory

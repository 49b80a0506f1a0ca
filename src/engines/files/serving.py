"""
File serving strategies.

A strategy locates a component's stored files and transmits them after an
access check. ``DefaultServing`` applies to every component; components
that need different rules register their own strategy (see
src.plugins.serving) which composes a ``DefaultServing``.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

from fastapi import Response

from src.core.errors import NotFoundError
from src.engines.files.send import SendFileOptions, send_stored_file
from src.engines.files.storage import FileStorage
from src.kernel.models.stored_file import FileAccessLevel, StoredFile
from src.kernel.permissions.access_gate import AccessGate
from src.kernel.permissions.context_info import ContextInfo, get_context_info
from src.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ServingStrategy(Protocol):
    """Capabilities every serving strategy must expose."""

    async def serve(
        self,
        file: StoredFile,
        force_download: bool,
        options: Optional[SendFileOptions] = None,
    ) -> Optional[Response]:
        """Check access and return the file response, or None when unhandled."""
        ...

    async def get_stored_file(
        self,
        context_id: int,
        file_area: str,
        args: Optional[Sequence[str]] = None,
    ) -> Optional[StoredFile]:
        ...

    async def check_access(self, file: StoredFile) -> ContextInfo:
        ...


def _item_id(value: str) -> int:
    # Anything but a plain non-negative integer addresses item 0; no
    # leading-digit parsing, so "-1" and "12abc" both give 0
    return int(value) if value.isdecimal() else 0


class DefaultServing:
    """Serving rules shared by all components."""

    def __init__(self, component: str, storage: FileStorage, gate: AccessGate):
        self.component = component
        self.storage = storage
        self.gate = gate

    async def serve(
        self,
        file: StoredFile,
        force_download: bool,
        options: Optional[SendFileOptions] = None,
    ) -> Optional[Response]:
        await self.check_access(file)
        return send_stored_file(self.storage, file, None, force_download, options)

    async def get_stored_file(
        self,
        context_id: int,
        file_area: str,
        args: Optional[Sequence[str]] = None,
    ) -> Optional[StoredFile]:
        """
        Locate a file from URL path arguments.

        ``args`` is ``[item_id, *dirs, filename]``: the first element is the
        item id (0 when there are no args), the last the file name, anything
        in between the directory path.
        """
        args = list(args or [])
        item_id = _item_id(args.pop(0)) if args else 0
        if not args:
            return None
        file_name = args.pop()
        file_path = "/" + "/".join(args) + "/" if args else "/"

        return await self.storage.get_file(
            context_id, self.component, file_area, item_id, file_path, file_name
        )

    async def check_access(self, file: StoredFile) -> ContextInfo:
        """
        Run the access checks in order, stopping at the first failure.

        Returns the file's resolved context on success.

        Raises:
            NotFoundError: file switched off, a directory, or an unknown access level
            AuthRequiredError / ForbiddenError: from the login predicates
        """
        if not file.can_access():
            logger.info("File access switched off", extra={"file_id": file.id})
            raise NotFoundError()

        if file.is_directory:
            raise NotFoundError()

        info = await get_context_info(self.storage.session, file.context_id)

        try:
            level = FileAccessLevel(file.access_level)
        except ValueError:
            level = None

        if level == FileAccessLevel.LOGIN:
            self.gate.require_login()
        elif level == FileAccessLevel.COURSE:
            await self.gate.require_course_login(info.course)
        elif level == FileAccessLevel.MODULE:
            if info.cm is None:
                raise NotFoundError()
            await self.gate.require_course_login(info.course, info.cm)
        elif level == FileAccessLevel.ADMIN:
            self.gate.require_admin()
        else:
            logger.info(
                "No access level for file",
                extra={"file_id": file.id, "access_level": str(file.access_level)},
            )
            raise NotFoundError()

        return info

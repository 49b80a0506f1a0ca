"""
Folder activity file serving.

Only files in a folder's "content" area are handled here, and they are
always sent as downloads. Everything else (e.g. the "intro" area) is left to
the default strategy.
"""

from typing import Optional, Sequence

from fastapi import Response

from src.engines.files.send import SendFileOptions, send_stored_file
from src.engines.files.serving import DefaultServing
from src.engines.files.storage import FileStorage
from src.kernel.models.context import ContextLevel
from src.kernel.models.stored_file import StoredFile
from src.kernel.permissions.access_gate import AccessGate
from src.kernel.permissions.context_info import ContextInfo

FOLDER_CONTENT_AREA = "content"


class FolderServing:
    """Serving strategy for mod_folder."""

    def __init__(self, component: str, storage: FileStorage, gate: AccessGate):
        self.default = DefaultServing(component, storage, gate)

    @property
    def component(self) -> str:
        return self.default.component

    async def serve(
        self,
        file: StoredFile,
        force_download: bool,
        options: Optional[SendFileOptions] = None,
    ) -> Optional[Response]:
        info = await self.check_access(file)

        if info.context is None or info.context.context_level != ContextLevel.MODULE:
            return None

        if file.file_area != FOLDER_CONTENT_AREA:
            return None

        # Folder content is never rendered inline, and never cached
        return send_stored_file(self.default.storage, file, 0, True, options)

    async def get_stored_file(
        self,
        context_id: int,
        file_area: str,
        args: Optional[Sequence[str]] = None,
    ) -> Optional[StoredFile]:
        return await self.default.get_stored_file(context_id, file_area, args)

    async def check_access(self, file: StoredFile) -> ContextInfo:
        return await self.default.check_access(file)

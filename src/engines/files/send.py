"""
Transmission of stored file bytes as an HTTP response.
"""

from typing import Optional

from fastapi.responses import FileResponse
from pydantic import BaseModel

from src.config import get_settings
from src.engines.files.storage import FileStorage
from src.kernel.models.stored_file import StoredFile
from src.logging_config import get_logger

logger = get_logger(__name__)


class SendFileOptions(BaseModel):
    """Per-request transmission options."""

    # Overrides the stored file name in Content-Disposition
    filename: Optional[str] = None
    # Overrides the lifetime passed by the serving strategy
    cache_lifetime: Optional[int] = None
    immutable: bool = False


def cache_control(lifetime: int, immutable: bool = False) -> str:
    if lifetime <= 0:
        return "no-cache, no-store, must-revalidate"
    value = f"private, max-age={lifetime}"
    if immutable:
        value += ", immutable"
    return value


def send_stored_file(
    storage: FileStorage,
    file: StoredFile,
    lifetime: Optional[int],
    force_download: bool,
    options: Optional[SendFileOptions] = None,
) -> FileResponse:
    """
    Build the response streaming a stored file.

    ``lifetime`` None means the configured default; 0 disables caching.
    """
    options = options or SendFileOptions()
    if options.cache_lifetime is not None:
        lifetime = options.cache_lifetime
    elif lifetime is None:
        lifetime = get_settings().file_cache_lifetime

    path = storage.get_content_path(file)
    logger.info(
        "Sending file",
        extra={
            "file_id": file.id,
            "component": file.component,
            "force_download": force_download,
        },
    )
    return FileResponse(
        path,
        media_type=file.mime_type or "application/octet-stream",
        filename=options.filename or file.file_name,
        content_disposition_type="attachment" if force_download else "inline",
        headers={"Cache-Control": cache_control(lifetime, options.immutable)},
    )

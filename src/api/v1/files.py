"""
Plugin file endpoint.

URL layout: /pluginfile/{context_id}/{component}/{file_area}/{item_id}/{dirs...}/{filename}
"""

from typing import Optional

from fastapi import APIRouter, Query

from src.api.deps import Gate, Registry, Storage
from src.engines.files.dispatcher import serve_plugin_file
from src.engines.files.send import SendFileOptions
from src.schemas.common import ErrorResponse

router = APIRouter()

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Login required"},
    403: {"model": ErrorResponse, "description": "Access denied"},
    404: {"model": ErrorResponse, "description": "File not found"},
}


@router.get(
    "/pluginfile/{context_id}/{component}/{file_area}/{path:path}",
    responses=ERROR_RESPONSES,
)
async def pluginfile(
    context_id: int,
    component: str,
    file_area: str,
    path: str,
    registry: Registry,
    storage: Storage,
    gate: Gate,
    forcedownload: bool = Query(False),
    filename: Optional[str] = Query(None, max_length=255),
):
    """
    Serve a stored file.

    404 when the file does not exist or is not available, 401 when a login
    is required, 403 when the user lacks access.
    """
    args = [part for part in path.split("/") if part]
    return await serve_plugin_file(
        registry,
        storage,
        gate,
        context_id=context_id,
        component=component,
        file_area=file_area,
        args=args,
        force_download=forcedownload,
        options=SendFileOptions(filename=filename),
    )

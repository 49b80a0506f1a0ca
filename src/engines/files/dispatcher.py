"""
Plugin file dispatch: from a file URL to a response.
"""

from typing import Optional, Sequence

from fastapi import Response

from src.core.errors import NotFoundError
from src.engines.files.registry import ServingRegistry
from src.engines.files.send import SendFileOptions
from src.engines.files.serving import DefaultServing
from src.engines.files.storage import FileStorage
from src.kernel.permissions.access_gate import AccessGate
from src.logging_config import get_logger

logger = get_logger(__name__)


async def serve_plugin_file(
    registry: ServingRegistry,
    storage: FileStorage,
    gate: AccessGate,
    context_id: int,
    component: str,
    file_area: str,
    args: Sequence[str],
    force_download: bool = False,
    options: Optional[SendFileOptions] = None,
) -> Response:
    """
    Locate and serve one file.

    The component's own strategy is tried first; when it has none, or it
    leaves the file unhandled, the default strategy serves it.

    Raises:
        NotFoundError: no such file
        AuthRequiredError / ForbiddenError: access check failed
        ConfigurationError: the component's strategy is malformed
    """
    default = DefaultServing(component, storage, gate)
    strategy = registry.resolve(component, storage, gate)

    file = await (strategy or default).get_stored_file(context_id, file_area, args)
    if file is None:
        logger.info(
            "File not found",
            extra={"context_id": context_id, "component": component, "file_area": file_area},
        )
        raise NotFoundError()

    if strategy is not None:
        response = await strategy.serve(file, force_download, options)
        if response is not None:
            return response
        logger.debug("Strategy left file unhandled", extra={"component": component})

    return await default.serve(file, force_download, options)

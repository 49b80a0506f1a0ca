"""
File Serving Engine - strategy registry, access checks and transmission.
"""

from src.engines.files.storage import FileStorage, compute_content_hash
from src.engines.files.send import SendFileOptions, send_stored_file
from src.engines.files.serving import DefaultServing, ServingStrategy
from src.engines.files.registry import ServingRegistry, serving_registry
from src.engines.files.dispatcher import serve_plugin_file

__all__ = [
    "FileStorage",
    "compute_content_hash",
    "SendFileOptions",
    "send_stored_file",
    "DefaultServing",
    "ServingStrategy",
    "ServingRegistry",
    "serving_registry",
    "serve_plugin_file",
]

"""
Serving Plugins - per-component file serving strategies.

Each plugin composes src.engines.files.DefaultServing and narrows or
overrides how its component's files are sent.
"""

from src.engines.files.registry import ServingRegistry
from src.plugins.serving.folder import FolderServing

# component name -> strategy class
SERVING_PLUGINS = {
    "mod_folder": FolderServing,
}


def register_serving_plugins(registry: ServingRegistry) -> ServingRegistry:
    """Register every bundled serving strategy not yet in the registry."""
    for component, strategy_cls in SERVING_PLUGINS.items():
        if registry.is_registered(component):
            continue
        registry.register(component, strategy_cls)
    return registry


__all__ = [
    "FolderServing",
    "SERVING_PLUGINS",
    "register_serving_plugins",
]

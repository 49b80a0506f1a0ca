"""
Serving strategy registry.

Maps a component name ("mod_folder") to the strategy class serving its
files. Populated once at startup and only read afterwards.
"""

import inspect
from typing import Callable, Dict, Optional, Type

from src.core.errors import ConfigurationError
from src.engines.files.serving import ServingStrategy
from src.engines.files.storage import FileStorage
from src.kernel.permissions.access_gate import AccessGate
from src.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_CAPABILITIES = ("serve", "get_stored_file", "check_access")


def missing_capabilities(strategy_cls: type) -> list[str]:
    return [
        name for name in REQUIRED_CAPABILITIES
        if not callable(getattr(strategy_cls, name, None))
    ]


def accepts_resolve_args(strategy_cls: type) -> bool:
    """Whether the class can be built as strategy_cls(component, storage, gate)."""
    try:
        inspect.signature(strategy_cls).bind("component", None, None)
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (some builtins); let resolve() find out
        return True
    return True


class ServingRegistry:
    """
    Registry of per-component serving strategies.

    Usage:
        registry = ServingRegistry()
        registry.register("mod_folder", FolderServing)
        strategy = registry.resolve("mod_folder", storage, gate)  # None if unregistered
    """

    def __init__(self) -> None:
        self._strategies: Dict[str, Type] = {}

    def register(self, component: str, strategy_cls: Type) -> None:
        """
        Register the strategy class for a component.

        Raises:
            ConfigurationError: not a class, missing a capability, a
                constructor that cannot take (component, storage, gate), or the
                component already has a strategy
        """
        if not inspect.isclass(strategy_cls):
            logger.error("Serving strategy is not a class", extra={"component": component})
            raise ConfigurationError(f"Serving strategy for {component} must be a class")

        missing = missing_capabilities(strategy_cls)
        if missing:
            logger.error(
                "Malformed serving strategy",
                extra={"component": component, "missing": missing},
            )
            raise ConfigurationError(
                f"{strategy_cls.__name__} cannot serve {component}: missing {', '.join(missing)}"
            )

        if not accepts_resolve_args(strategy_cls):
            logger.error("Serving strategy constructor is malformed", extra={"component": component})
            raise ConfigurationError(
                f"{strategy_cls.__name__} must accept (component, storage, gate)"
            )

        if component in self._strategies:
            raise ConfigurationError(f"Serving strategy already registered for {component}")

        self._strategies[component] = strategy_cls
        logger.debug(
            "Serving strategy registered",
            extra={"component": component, "strategy": strategy_cls.__name__},
        )

    def strategy(self, component: str) -> Callable[[Type], Type]:
        """Class decorator form of register()."""
        def decorator(strategy_cls: Type) -> Type:
            self.register(component, strategy_cls)
            return strategy_cls
        return decorator

    def is_registered(self, component: str) -> bool:
        return component in self._strategies

    def components(self) -> list[str]:
        return sorted(self._strategies)

    def resolve(
        self,
        component: str,
        storage: FileStorage,
        gate: AccessGate,
    ) -> Optional[ServingStrategy]:
        """
        Build the strategy registered for a component.

        Returns None when the component has no strategy of its own; callers
        then use DefaultServing.

        Raises:
            ConfigurationError: the strategy cannot be built, or the built
                object does not satisfy ServingStrategy
        """
        strategy_cls = self._strategies.get(component)
        if strategy_cls is None:
            return None

        try:
            strategy = strategy_cls(component, storage, gate)
        except TypeError as e:
            logger.error(
                "Serving strategy could not be built",
                extra={"component": component, "error": str(e)},
            )
            raise ConfigurationError(f"Cannot build serving strategy for {component}") from e
        if not isinstance(strategy, ServingStrategy):
            logger.error("Serving strategy instance is malformed", extra={"component": component})
            raise ConfigurationError(f"Strategy built for {component} is not a ServingStrategy")
        return strategy


# Application registry; see src.plugins.serving.register_serving_plugins
serving_registry = ServingRegistry()

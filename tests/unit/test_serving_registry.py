"""Unit tests for the serving strategy registry."""

import pytest

from src.core.errors import ConfigurationError
from src.engines.files.registry import ServingRegistry, missing_capabilities
from src.engines.files.serving import DefaultServing
from src.plugins.serving import SERVING_PLUGINS, register_serving_plugins
from src.plugins.serving.folder import FolderServing


class ServeOnly:
    """A strategy lacking get_stored_file and check_access."""

    def __init__(self, component, storage, gate):
        pass

    async def serve(self, file, force_download, options=None):
        return None


class NotAStrategy:
    """Declares the capabilities as data, not methods."""

    serve = None
    get_stored_file = None
    check_access = None

    def __init__(self, component, storage, gate):
        pass


class NoArgsConstructor(DefaultServing):
    """Complete capabilities, but cannot be built with (component, storage, gate)."""

    def __init__(self):
        pass


class FailingConstructor(DefaultServing):
    """Signature binds, construction still fails."""

    def __init__(self, *args):
        super().__init__(*args, options={})


class TestMissingCapabilities:
    def test_complete_strategy(self):
        assert missing_capabilities(FolderServing) == []
        assert missing_capabilities(DefaultServing) == []

    def test_partial_strategy(self):
        assert missing_capabilities(ServeOnly) == ["get_stored_file", "check_access"]


class TestServingRegistry:
    def test_register_and_resolve(self, storage, make_gate):
        registry = ServingRegistry()
        registry.register("mod_folder", FolderServing)

        strategy = registry.resolve("mod_folder", storage, make_gate())
        assert isinstance(strategy, FolderServing)
        assert strategy.component == "mod_folder"

    def test_unregistered_component_resolves_to_none(self, storage, make_gate):
        registry = ServingRegistry()
        assert registry.resolve("mod_page", storage, make_gate()) is None
        assert registry.is_registered("mod_page") is False

    def test_missing_capability_rejected_at_registration(self):
        registry = ServingRegistry()
        with pytest.raises(ConfigurationError) as exc_info:
            registry.register("mod_broken", ServeOnly)

        assert "get_stored_file" in exc_info.value.message
        assert registry.is_registered("mod_broken") is False

    def test_non_callable_capabilities_rejected(self):
        with pytest.raises(ConfigurationError):
            ServingRegistry().register("mod_broken", NotAStrategy)

    def test_constructor_checked_at_registration(self):
        registry = ServingRegistry()
        with pytest.raises(ConfigurationError) as exc_info:
            registry.register("mod_bad", NoArgsConstructor)

        assert "(component, storage, gate)" in exc_info.value.message
        assert registry.is_registered("mod_bad") is False

    def test_construction_failure_is_configuration_error(self, storage, make_gate):
        registry = ServingRegistry()
        registry.register("mod_bad", FailingConstructor)

        with pytest.raises(ConfigurationError) as exc_info:
            registry.resolve("mod_bad", storage, make_gate())
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_instance_rejected(self, storage, make_gate):
        registry = ServingRegistry()
        with pytest.raises(ConfigurationError):
            registry.register("mod_folder", FolderServing("mod_folder", storage, make_gate()))

    def test_duplicate_component_rejected(self):
        registry = ServingRegistry()
        registry.register("mod_folder", FolderServing)
        with pytest.raises(ConfigurationError):
            registry.register("mod_folder", DefaultServing)

    def test_decorator_registration(self):
        registry = ServingRegistry()

        @registry.strategy("mod_resource")
        class ResourceServing(DefaultServing):
            pass

        assert registry.is_registered("mod_resource")
        assert registry.components() == ["mod_resource"]

    def test_configuration_error_is_server_error(self):
        error = ConfigurationError("broken")
        assert error.http_status == 500
        assert "details" not in error.to_response()["error"]


class TestBundledPlugins:
    def test_folder_plugin_bundled(self):
        assert SERVING_PLUGINS == {"mod_folder": FolderServing}

    def test_register_serving_plugins_is_repeatable(self):
        registry = ServingRegistry()
        register_serving_plugins(registry)
        register_serving_plugins(registry)

        assert registry.components() == ["mod_folder"]

"""Engine error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tfstudio.validation.types import DiagramValidationResult, TopologyError


class EngineError(Exception):
    """Base exception for engine errors."""


class PluginRegistryError(EngineError):
    """Raised for invalid plugin registry usage."""


class DuplicateResourceTypeError(PluginRegistryError):
    """Raised when two plugins register the same resource type id."""

    def __init__(self, type_id: str, plugin_id: str) -> None:
        super().__init__(
            f'Resource type "{type_id}" is already registered. '
            f'Collision while registering plugin "{plugin_id}".'
        )
        self.type_id = type_id
        self.plugin_id = plugin_id


class UnknownResourceTypeError(EngineError):
    """Raised when a resource type has no registration."""

    def __init__(self, type_id: str) -> None:
        super().__init__(f'Unknown resource type: "{type_id}"')
        self.type_id = type_id


class PluginLoadError(PluginRegistryError):
    """Raised when a lazily declared plugin fails to load.

    The original exception is chained via ``__cause__``.
    """

    def __init__(self, provider_id: str, message: str) -> None:
        super().__init__(f'Failed to load plugin for provider "{provider_id}": {message}')
        self.provider_id = provider_id


class GenerationError(EngineError):
    """Raised when HCL generation cannot complete."""


class UnresolvedReferenceError(GenerationError):
    """Raised when a generator references an instance with no Terraform address."""

    def __init__(self, instance_id: str) -> None:
        super().__init__(f'Cannot resolve reference to instance "{instance_id}": not found')
        self.instance_id = instance_id


class MissingResourceGroupError(GenerationError):
    """Raised when a resource needs a resource group or location that cannot be resolved."""

    def __init__(self, terraform_name: str, what: str) -> None:
        super().__init__(
            f'Resource "{terraform_name}" requires a {what} but no Resource Group was found. '
            "Place the resource inside a Resource Group container or configure one on the project."
        )
        self.terraform_name = terraform_name


class DependencyCycleError(GenerationError):
    """Raised when HCL block dependencies contain a cycle."""

    def __init__(self, addresses: list[str]) -> None:
        msg = "Circular dependency detected in HCL blocks"
        if addresses:
            msg += f": {', '.join(addresses)}"
        super().__init__(msg)
        self.addresses = addresses


class DiagramValidationError(EngineError):
    """The diagram failed validation and cannot be generated."""

    def __init__(
        self,
        diagram: DiagramValidationResult,
        topology: list[TopologyError],
    ) -> None:
        self.diagram = diagram
        self.topology = topology
        count = len(diagram.errors) + len(topology)
        super().__init__(f"Validation failed with {count} resource(s) having issues")

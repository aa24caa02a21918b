"""Diagram, resource and network validation."""

from tfstudio.validation.diagram import validate_diagram
from tfstudio.validation.network import validate_network_topology
from tfstudio.validation.resource import (
    validate_required_references,
    validate_resource_properties,
)
from tfstudio.validation.types import (
    DiagramError,
    DiagramValidationResult,
    TopologyError,
    TopologyNode,
    ValidationIssue,
    has_blocking_errors,
)

__all__ = [
    "DiagramError",
    "DiagramValidationResult",
    "TopologyError",
    "TopologyNode",
    "ValidationIssue",
    "has_blocking_errors",
    "validate_diagram",
    "validate_network_topology",
    "validate_required_references",
    "validate_resource_properties",
]

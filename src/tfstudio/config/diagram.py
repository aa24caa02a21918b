"""Diagram document to resource instances, bindings and topology nodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tfstudio.config.loader import ConfigError
from tfstudio.engine.types import OutputBinding
from tfstudio.naming.template import apply_naming_template, build_tokens, sanitize_terraform_name
from tfstudio.resources.instance import RESOURCE_GROUP_REFERENCE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tfstudio.config.schema import DiagramNode, Document
    from tfstudio.engine.registry import PluginRegistry
    from tfstudio.resources.instance import ResourceInstance
    from tfstudio.resources.schema import ResourceSchema
    from tfstudio.validation.types import TopologyNode

logger = logging.getLogger(__name__)


class DiagramConversionError(ConfigError):
    """Raised when an edge does not match any connection rule."""


def _resource_group_ancestor(
    node: DiagramNode,
    nodes: dict[str, DiagramNode],
    registry: PluginRegistry,
) -> str | None:
    """Nearest enclosing container that does not itself need a resource group."""
    seen = {node.id}
    parent_id = node.parent_id
    while parent_id and parent_id not in seen:
        seen.add(parent_id)
        parent = nodes.get(parent_id)
        if parent is None:
            return None
        schema = registry.get_resource_schema(parent.type)
        if schema is not None and schema.is_container and not schema.requires_resource_group:
            return parent.id
        parent_id = parent.parent_id
    return None


def _properties(
    node: DiagramNode, schema: ResourceSchema | None, document: Document
) -> dict[str, Any]:
    properties = dict(node.properties)
    if schema is None:
        return properties

    for prop in schema.properties:
        if prop.key not in properties and prop.default is not None:
            properties[prop.key] = prop.default

    convention = document.project.naming_convention
    if "name" not in properties and convention is not None and schema.caf_abbreviation:
        tokens = build_tokens(convention, schema.caf_abbreviation, node.label or node.id)
        properties["name"] = apply_naming_template(
            convention.template, tokens, schema.naming_constraints
        )
    return properties


def edge_references(
    document: Document, registry: PluginRegistry
) -> tuple[dict[str, dict[str, str]], list[OutputBinding]]:
    """References and output bindings implied by the document's edges.

    Raises:
        DiagramConversionError: If an edge matches no connection rule.
    """
    nodes = {n.id: n for n in document.nodes}
    validator = registry.build_edge_validator()
    references: dict[str, dict[str, str]] = {}
    bindings: list[OutputBinding] = []

    for edge in document.edges:
        source, target = nodes.get(edge.source), nodes.get(edge.target)
        if source is None or target is None:
            raise DiagramConversionError(
                f"Edge {edge.source} -> {edge.target} references an unknown node"
            )
        result = validator.validate(
            source.type, edge.source_handle, target.type, edge.target_handle
        )
        if not result.valid or result.rule is None:
            raise DiagramConversionError(result.reason or "Invalid edge")

        write_back = validator.get_reference_from_rule(result.rule, source.id, target.id)
        if write_back is not None:
            owner = target.id if write_back.side == "target" else source.id
            references.setdefault(owner, {})[write_back.property_key] = (
                write_back.referenced_instance_id
            )
        if result.rule.output_binding is not None:
            bindings.append(
                OutputBinding(
                    source_instance_id=source.id,
                    target_instance_id=target.id,
                    source_attribute=result.rule.output_binding.source_attribute,
                )
            )
    return references, bindings


def to_resource_instances(
    document: Document, registry: PluginRegistry
) -> tuple[list[ResourceInstance], list[OutputBinding]]:
    """Convert the document's nodes and edges for the pipeline and validators.

    Edge-derived references override the node's own ``references``; the
    container (``parent_reference`` and the enclosing resource group) only
    fills keys that are still unset. Missing ``name`` properties are rendered
    from the project naming convention, and missing Terraform names are
    derived from the resource name.
    """
    nodes = {n.id: n for n in document.nodes}
    edge_refs, bindings = edge_references(document, registry)

    instances: list[ResourceInstance] = []
    for node in document.nodes:
        schema = registry.get_resource_schema(node.type)
        references = {**node.references, **edge_refs.get(node.id, {})}

        if schema is not None and node.parent_id in nodes:
            if schema.parent_reference is not None:
                references.setdefault(schema.parent_reference.property_key, node.parent_id)
            if schema.requires_resource_group:
                rg_id = _resource_group_ancestor(node, nodes, registry)
                if rg_id is not None:
                    references.setdefault(RESOURCE_GROUP_REFERENCE, rg_id)

        properties = _properties(node, schema, document)
        terraform_name = node.terraform_name or sanitize_terraform_name(
            str(properties.get("name") or node.id)
        )
        instances.append(
            node.to_instance(
                terraform_name=terraform_name, properties=properties, references=references
            )
        )

    logger.debug("Converted %d node(s), %d edge binding(s)", len(instances), len(bindings))
    return instances, [*bindings, *document.bindings]


def to_topology_nodes(
    document: Document, resources: Sequence[ResourceInstance] = ()
) -> list[TopologyNode]:
    """Topology view of the document, using converted properties when given."""
    properties = {r.instance_id: r.properties for r in resources}
    return [node.to_topology_node(properties.get(node.id)) for node in document.nodes]

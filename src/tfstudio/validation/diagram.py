"""Whole-diagram validation run before HCL generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tfstudio.validation.resource import (
    validate_required_references,
    validate_resource_properties,
)
from tfstudio.validation.types import DiagramError, DiagramValidationResult, ValidationIssue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tfstudio.engine.registry import PluginRegistry
    from tfstudio.resources.instance import ResourceInstance

logger = logging.getLogger(__name__)


def validate_diagram(
    resources: Sequence[ResourceInstance], registry: PluginRegistry
) -> DiagramValidationResult:
    """Check every instance against its schema and the other instances.

    Never raises: unknown types, bad property values and dangling
    references are all reported as ``DiagramError`` entries.
    """
    instance_ids = {r.instance_id for r in resources}
    diagram_errors: list[DiagramError] = []

    for resource in resources:
        schema = registry.get_resource_schema(resource.type_id)
        if schema is None:
            issues = [
                ValidationIssue(
                    property_key="_type",
                    message=f"Unknown resource type: {resource.type_id}",
                )
            ]
        else:
            issues = [
                *validate_resource_properties(
                    schema, resource.properties, resource.variable_overrides
                ),
                *validate_required_references(schema, resource.references),
                *_validate_references(resource, instance_ids),
            ]

        if issues:
            diagram_errors.append(
                DiagramError(
                    instance_id=resource.instance_id,
                    type_id=resource.type_id,
                    label=resource.terraform_name,
                    errors=issues,
                )
            )

    logger.debug(
        "Validated %d resource(s), %d with issues", len(resources), len(diagram_errors)
    )
    return DiagramValidationResult(valid=not diagram_errors, errors=diagram_errors)


def _validate_references(
    resource: ResourceInstance, instance_ids: set[str]
) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            property_key=key,
            message=f'Reference "{key}" points to non-existent resource: {target_id}',
        )
        for key, target_id in resource.references.items()
        if target_id not in instance_ids
    ]

"""Per-resource property and reference validation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from tfstudio.networking.cidr import is_valid_cidr
from tfstudio.validation.types import ValidationIssue

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tfstudio.resources.instance import PropertyMode
    from tfstudio.resources.schema import PropertySchema, ResourceSchema


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list | tuple) and not value)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def validate_resource_properties(
    schema: ResourceSchema,
    properties: Mapping[str, Any],
    variable_overrides: Mapping[str, PropertyMode] | None = None,
) -> list[ValidationIssue]:
    """Validate *properties* against the property schemas of *schema*.

    ``reference`` properties are skipped here; they live in the instance's
    references and are checked by ``validate_required_references``. A
    property switched to ``variable`` mode gets its value at apply time, so
    it is exempt from the required check.
    """
    overrides = variable_overrides or {}
    issues: list[ValidationIssue] = []
    for prop in schema.properties:
        if prop.type == "reference":
            continue
        is_variable = overrides.get(prop.key) == "variable"
        issues.extend(_validate_property(prop, properties.get(prop.key), is_variable))
    return issues


def _validate_property(
    prop: PropertySchema, value: Any, is_variable: bool
) -> list[ValidationIssue]:
    key = prop.key
    if _is_empty(value):
        if prop.required and not is_variable:
            return [ValidationIssue(property_key=key, message=f"{prop.label} is required")]
        return []

    issues: list[ValidationIssue] = []

    if prop.type == "cidr" and isinstance(value, str) and not is_valid_cidr(value):
        issues.append(
            ValidationIssue(property_key=key, message=f"{prop.label} is not a valid CIDR: {value}")
        )
    if prop.type == "array" and prop.item_type == "cidr" and isinstance(value, list | tuple):
        issues.extend(
            ValidationIssue(
                property_key=key,
                message=f"{prop.label} item {i + 1} is not a valid CIDR: {item}",
            )
            for i, item in enumerate(value)
            if not (isinstance(item, str) and is_valid_cidr(item))
        )

    rules = prop.validation
    if rules is None:
        return issues

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            issues.append(
                ValidationIssue(
                    property_key=key,
                    message=f"{prop.label} must be at least {rules.min_length} characters",
                )
            )
        if rules.max_length is not None and len(value) > rules.max_length:
            issues.append(
                ValidationIssue(
                    property_key=key,
                    message=f"{prop.label} must be at most {rules.max_length} characters",
                )
            )
        if rules.pattern and re.search(rules.pattern, value) is None:
            issues.append(
                ValidationIssue(
                    property_key=key,
                    message=rules.pattern_message or f"{prop.label} has invalid format",
                )
            )

    if _is_number(value):
        if rules.min is not None and value < rules.min:
            issues.append(
                ValidationIssue(
                    property_key=key, message=f"{prop.label} must be at least {rules.min:g}"
                )
            )
        if rules.max is not None and value > rules.max:
            issues.append(
                ValidationIssue(
                    property_key=key, message=f"{prop.label} must be at most {rules.max:g}"
                )
            )

    return issues


def validate_required_references(
    schema: ResourceSchema, references: Mapping[str, str]
) -> list[ValidationIssue]:
    """Required ``reference`` properties must be connected."""
    issues: list[ValidationIssue] = []
    for key in schema.required_reference_keys():
        if not references.get(key):
            prop = schema.get_property(key)
            label = prop.label if prop is not None else key
            issues.append(ValidationIssue(property_key=key, message=f"{label} is required"))
    return issues

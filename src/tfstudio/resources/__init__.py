"""Resource schemas and instances."""

from tfstudio.resources.instance import RESOURCE_GROUP_REFERENCE, PropertyMode, ResourceInstance
from tfstudio.resources.schema import (
    HandleDefinition,
    NamingConstraints,
    OutputDefinition,
    ParentReference,
    PropertySchema,
    PropertyValidation,
    ResourceSchema,
    ResourceTypeId,
    SelectOption,
)

__all__ = [
    "RESOURCE_GROUP_REFERENCE",
    "HandleDefinition",
    "NamingConstraints",
    "OutputDefinition",
    "ParentReference",
    "PropertyMode",
    "PropertySchema",
    "PropertyValidation",
    "ResourceInstance",
    "ResourceSchema",
    "ResourceTypeId",
    "SelectOption",
]

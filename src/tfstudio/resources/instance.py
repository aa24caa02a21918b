"""Generation-facing projection of a diagram node."""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

PropertyMode: TypeAlias = Literal["literal", "variable"]

# Reference key linking a resource to its enclosing resource group container.
RESOURCE_GROUP_REFERENCE = "_resource_group"

TERRAFORM_NAME_PATTERN = r"^[a-zA-Z_][a-zA-Z0-9_-]*$"


class ResourceInstance(BaseModel):
    """One diagram node, immutable for the duration of a pipeline run.

    ``references`` maps a property key to the ``instance_id`` of another
    instance; these are the graph edges that matter to code generation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    instance_id: str = Field(min_length=1)
    type_id: str = Field(min_length=1)
    terraform_name: str = Field(pattern=TERRAFORM_NAME_PATTERN)
    properties: dict[str, Any] = Field(default_factory=dict)
    references: dict[str, str] = Field(default_factory=dict)
    variable_overrides: dict[str, PropertyMode] = Field(default_factory=dict)

    @property
    def provider(self) -> str:
        """Provider segment of the type id (``azurerm/networking/subnet`` -> ``azurerm``)."""
        return self.type_id.split("/", 1)[0]

    def property_mode(self, key: str) -> PropertyMode:
        return self.variable_overrides.get(key, "literal")

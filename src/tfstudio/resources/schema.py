"""Resource type schemas.

A schema is created once per plugin at import time and never mutated. It
describes properties, handles, container semantics and naming metadata of
one resource type.
"""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

ResourceTypeId: TypeAlias = str
ProviderId: TypeAlias = str

PropertyType: TypeAlias = Literal[
    "string",
    "number",
    "boolean",
    "select",
    "multiselect",
    "cidr",
    "array",
    "key-value",
    "reference",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PropertyValidation(_Frozen):
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None
    min: float | None = None
    max: float | None = None


class SelectOption(_Frozen):
    label: str
    value: str


class PropertySchema(_Frozen):
    """One editable property of a resource type."""

    key: str
    label: str
    type: PropertyType = "string"
    required: bool = False
    default: Any = None
    description: str = ""
    validation: PropertyValidation | None = None
    options: tuple[SelectOption, ...] = ()
    # Item type for ``array`` properties, e.g. ``"cidr"``.
    item_type: PropertyType | None = None
    # Allowed target types for ``reference`` properties (empty = any).
    reference_types: tuple[ResourceTypeId, ...] = ()


class HandleDefinition(_Frozen):
    """A connection port on a diagram node."""

    id: str
    type: Literal["source", "target"]
    position: Literal["top", "right", "bottom", "left"] = "bottom"
    label: str = ""
    accepts_outputs: bool = False


class NamingConstraints(_Frozen):
    lowercase: bool = False
    no_hyphens: bool = False
    max_length: int | None = None


class ParentReference(_Frozen):
    """Reference property filled from the enclosing container node."""

    property_key: str


class OutputDefinition(_Frozen):
    """A computed attribute a resource exposes (e.g. ``id``)."""

    key: str
    label: str
    terraform_attribute: str
    sensitive: bool = False


class ResourceSchema(_Frozen):
    """Immutable description of a resource type."""

    type_id: ResourceTypeId
    provider: ProviderId
    display_name: str
    category: str
    terraform_type: str
    description: str = ""
    properties: tuple[PropertySchema, ...] = ()
    handles: tuple[HandleDefinition, ...] = ()
    outputs: tuple[OutputDefinition, ...] = ()

    is_container: bool = False
    can_be_child_of: tuple[ResourceTypeId, ...] = ()
    parent_reference: ParentReference | None = None
    requires_resource_group: bool = False

    caf_abbreviation: str | None = None
    naming_constraints: NamingConstraints = Field(default_factory=NamingConstraints)

    @property
    def is_virtual(self) -> bool:
        """Virtual types (``_``-prefixed Terraform type) produce no Terraform."""
        return self.terraform_type.startswith("_")

    def get_property(self, key: str) -> PropertySchema | None:
        return next((p for p in self.properties if p.key == key), None)

    def required_reference_keys(self) -> list[str]:
        return [p.key for p in self.properties if p.type == "reference" and p.required]

"""Plugin contract: what a provider plugin hands to the registry."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Protocol, TypeAlias

from pydantic import BaseModel, ConfigDict

from tfstudio.engine.escape import format_hcl_value

if TYPE_CHECKING:
    from tfstudio.engine.context import HclGenerationContext
    from tfstudio.engine.types import HclBlock
    from tfstudio.resources.instance import ResourceInstance
    from tfstudio.resources.schema import ResourceSchema


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CreatesReference(_Frozen):
    """Reference written back when an edge is connected.

    ``side="target"`` writes ``property_key`` on the target node pointing at
    the source; ``side="source"`` the other way round.
    """

    side: Literal["source", "target"]
    property_key: str


class OutputBindingSpec(_Frozen):
    source_attribute: str


class ConnectionRule(_Frozen):
    """A legal edge between two resource-type handles."""

    source_type: str
    source_handle: str
    target_type: str
    target_handle: str
    label: str = ""
    creates_reference: CreatesReference | None = None
    output_binding: OutputBindingSpec | None = None


class PaletteCategory(_Frozen):
    id: str
    label: str
    order: int = 100
    icon: str | None = None


class IconDefinition(_Frozen):
    type: Literal["svg", "url", "component"] = "svg"
    value: str


class HclGenerator:
    """Turns one resource instance into HCL blocks.

    Subclass and override ``generate``. ``resolve_terraform_type`` lets a
    generator pick a variant Terraform type from the instance properties
    (e.g. Linux vs. Windows virtual machines).
    """

    def generate(
        self, resource: ResourceInstance, context: HclGenerationContext
    ) -> list[HclBlock]:
        raise NotImplementedError

    def resolve_terraform_type(self, properties: Mapping[str, Any]) -> str | None:
        _ = properties
        return None


class BindingHclGenerator:
    """Emits blocks wiring one resource's output attribute into another.

    ``source_type = None`` matches any source type.
    """

    source_type: str | None = None
    target_type: str

    def generate(
        self,
        source: ResourceInstance,
        target: ResourceInstance,
        context: HclGenerationContext,
        source_attribute: str,
    ) -> list[HclBlock]:
        raise NotImplementedError


@dataclass(frozen=True)
class ProviderConfig:
    """Terraform provider requirements and block rendering for one provider."""

    id: str
    source: str
    version: str
    default_config: Mapping[str, Any] = field(default_factory=dict)

    def required_provider_hcl(self) -> str:
        return (
            f"    {self.id} = {{\n"
            f'      source  = "{self.source}"\n'
            f'      version = "{self.version}"\n'
            "    }"
        )

    def provider_block_hcl(self, user_config: Mapping[str, Any]) -> str:
        """Render the ``provider`` block from defaults overlaid with *user_config*.

        Attributes come first, nested blocks (mapping values) after. Empty
        attributes are left out; ``var.*`` strings are emitted unquoted.
        """
        config = {**self.default_config, **user_config}
        lines = [f'provider "{self.id}" {{']
        for key, value in config.items():
            if isinstance(value, Mapping) or value is None or value == "":
                continue
            lines.append(f"  {key} = {_attribute_value(value)}")
        for key, value in config.items():
            if isinstance(value, Mapping):
                lines.extend(_nested_block(key, value, indent=2))
        lines.append("}")
        return "\n".join(lines)


def _attribute_value(value: Any, indent: int = 2) -> str:
    if isinstance(value, str) and value.startswith("var."):
        return value
    return format_hcl_value(value, indent)


def _nested_block(name: str, body: Mapping[str, Any], indent: int) -> list[str]:
    pad = " " * indent
    if not body:
        return [f"{pad}{name} {{}}"]
    lines = [f"{pad}{name} {{"]
    for key, value in body.items():
        if isinstance(value, Mapping):
            lines.extend(_nested_block(key, value, indent + 2))
        else:
            lines.append(f"{pad}  {key} = {_attribute_value(value, indent + 2)}")
    lines.append(f"{pad}}}")
    return lines


@dataclass(frozen=True)
class ResourceTypeRegistration:
    schema: ResourceSchema
    hcl_generator: HclGenerator
    icon: IconDefinition | None = None


class PluginRegistryReader(Protocol):
    """Read-only registry view handed to ``on_all_plugins_registered``."""

    def get_resource_schema(self, type_id: str) -> ResourceSchema | None: ...

    def has_resource_type(self, type_id: str) -> bool: ...

    def resource_type_ids(self) -> list[str]: ...

    def provider_ids(self) -> list[str]: ...


@dataclass(frozen=True)
class InfraPlugin:
    id: str
    name: str
    version: str
    provider_id: str
    resource_types: Mapping[str, ResourceTypeRegistration] = field(default_factory=dict)
    connection_rules: tuple[ConnectionRule, ...] = ()
    palette_categories: tuple[PaletteCategory, ...] = ()
    provider_config: ProviderConfig | None = None
    binding_generators: tuple[BindingHclGenerator, ...] = ()
    on_all_plugins_registered: Callable[[PluginRegistryReader], None] | None = None


# A loader returns the plugin, or an awaitable resolving to it.
PluginLoader: TypeAlias = Callable[[], "InfraPlugin | Awaitable[InfraPlugin]"]

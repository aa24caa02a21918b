"""Generation context: the generators' only window onto pipeline state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from tfstudio.engine.errors import MissingResourceGroupError, UnresolvedReferenceError
from tfstudio.engine.escape import format_hcl_value
from tfstudio.engine.types import TerraformVariable
from tfstudio.resources.instance import RESOURCE_GROUP_REFERENCE

if TYPE_CHECKING:
    from tfstudio.engine.collectors import OutputCollector, VariableCollector
    from tfstudio.engine.project import ProjectConfig
    from tfstudio.engine.types import TerraformOutput
    from tfstudio.resources.instance import ResourceInstance

RESOURCE_GROUP_VARIABLE = "resource_group_name"
LOCATION_VARIABLE = "location"


@dataclass(frozen=True, slots=True)
class PropertyExpressionOptions:
    """Overrides for the variable registered by ``get_property_expression``."""

    variable_name: str | None = None
    variable_type: str | None = None
    variable_description: str | None = None
    sensitive: bool = False


class HclGenerationContext(Protocol):
    def get_resource(self, instance_id: str) -> ResourceInstance | None: ...

    def get_terraform_address(self, instance_id: str) -> str | None: ...

    def get_attribute_reference(self, instance_id: str, attribute: str) -> str: ...

    def add_variable(self, variable: TerraformVariable) -> None: ...

    def add_output(self, output: TerraformOutput) -> None: ...

    def get_provider_config(self, provider_id: str) -> Mapping[str, Any]: ...

    def get_resource_group_expression(self, resource: ResourceInstance) -> str: ...

    def get_location_expression(self, resource: ResourceInstance) -> str: ...

    def get_tags_expression(self) -> str | None: ...

    def get_property_expression(
        self,
        resource: ResourceInstance,
        property_key: str,
        value: Any,
        options: PropertyExpressionOptions | None = None,
    ) -> str: ...


class PipelineContext:
    """``HclGenerationContext`` implementation backed by one pipeline run."""

    def __init__(
        self,
        *,
        resources: Mapping[str, ResourceInstance],
        addresses: Mapping[str, str],
        project_config: ProjectConfig,
        variables: VariableCollector,
        outputs: OutputCollector,
    ) -> None:
        self._resources = resources
        self._addresses = addresses
        self._project = project_config
        self._variables = variables
        self._outputs = outputs

    def get_resource(self, instance_id: str) -> ResourceInstance | None:
        return self._resources.get(instance_id)

    def get_terraform_address(self, instance_id: str) -> str | None:
        return self._addresses.get(instance_id)

    def get_attribute_reference(self, instance_id: str, attribute: str) -> str:
        address = self._addresses.get(instance_id)
        if address is None:
            raise UnresolvedReferenceError(instance_id)
        return f"{address}.{attribute}"

    def add_variable(self, variable: TerraformVariable) -> None:
        self._variables.add(variable)

    def add_output(self, output: TerraformOutput) -> None:
        self._outputs.add(output)

    def get_provider_config(self, provider_id: str) -> Mapping[str, Any]:
        return self._project.provider_configs.get(provider_id, {})

    def _resource_group_address(self, resource: ResourceInstance) -> str | None:
        rg_id = resource.references.get(RESOURCE_GROUP_REFERENCE)
        return self._addresses.get(rg_id) if rg_id else None

    def get_resource_group_expression(self, resource: ResourceInstance) -> str:
        """``<rg>.name`` of the enclosing container, else the project setting."""
        rg_address = self._resource_group_address(resource)
        if rg_address is not None:
            return f"{rg_address}.name"
        if self._project.resource_group_as_variable:
            return f"var.{RESOURCE_GROUP_VARIABLE}"
        if self._project.resource_group_name:
            return format_hcl_value(self._project.resource_group_name)
        raise MissingResourceGroupError(resource.terraform_name, "Resource Group")

    def get_location_expression(self, resource: ResourceInstance) -> str:
        rg_address = self._resource_group_address(resource)
        if rg_address is not None:
            return f"{rg_address}.location"
        if self._project.location_as_variable:
            return f"var.{LOCATION_VARIABLE}"
        if self._project.location:
            return format_hcl_value(self._project.location)
        raise MissingResourceGroupError(resource.terraform_name, "location")

    def get_tags_expression(self) -> str | None:
        """``local.common_tags`` when the project defines common tags."""
        return "local.common_tags" if self._project.common_tags else None

    def get_property_expression(
        self,
        resource: ResourceInstance,
        property_key: str,
        value: Any,
        options: PropertyExpressionOptions | None = None,
    ) -> str:
        """HCL expression for a property: a literal, or ``var.x`` in variable mode."""
        if resource.property_mode(property_key) != "variable":
            return format_hcl_value(value)

        opts = options or PropertyExpressionOptions()
        name = opts.variable_name or f"{resource.terraform_name}_{property_key}"
        is_number = isinstance(value, int | float) and not isinstance(value, bool)
        self._variables.add(
            TerraformVariable(
                name=name,
                type=opts.variable_type or ("number" if is_number else "string"),
                description=opts.variable_description
                or f"{property_key} for {resource.terraform_name}",
                default=value,
                sensitive=opts.sensitive,
            )
        )
        return f"var.{name}"

"""HCL generation orchestrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from tfstudio.engine.builder import HclBlockBuilder
from tfstudio.engine.collectors import OutputCollector, VariableCollector
from tfstudio.engine.context import LOCATION_VARIABLE, RESOURCE_GROUP_VARIABLE, PipelineContext
from tfstudio.engine.errors import UnknownResourceTypeError
from tfstudio.engine.escape import quote
from tfstudio.engine.graph import DependencyGraph
from tfstudio.engine.project import ProjectConfig
from tfstudio.engine.providers import ProviderConfigBuilder
from tfstudio.engine.types import (
    TFVARS_FILE,
    OutputBinding,
    PipelineResult,
    TerraformVariable,
)
from tfstudio.resources.instance import ResourceInstance

if TYPE_CHECKING:
    from tfstudio.engine.registry import PluginRegistry
    from tfstudio.engine.types import HclBlock
    from tfstudio.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)


class PipelineInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    resources: list[ResourceInstance]
    project_config: ProjectConfig = Field(default_factory=ProjectConfig)
    bindings: list[OutputBinding] = Field(default_factory=list)


class HclPipeline:
    """Turns resource instances plus project config into Terraform files.

    Generation is all-or-nothing: any error raises before files are built.
    """

    def __init__(self, registry: PluginRegistry) -> None:
        self._registry = registry

    def generate(self, pipeline_input: PipelineInput) -> PipelineResult:
        resources = pipeline_input.resources
        project = pipeline_input.project_config

        resource_map = {r.instance_id: r for r in resources}
        schemas = {r.instance_id: self._schema_for(r) for r in resources}
        real = [r for r in resources if not schemas[r.instance_id].is_virtual]

        addresses: dict[str, str] = {}
        for resource in real:
            terraform_type = self._terraform_type(resource, schemas[resource.instance_id])
            addresses[resource.instance_id] = f"{terraform_type}.{resource.terraform_name}"

        variables = self._seed_variables(project)
        outputs = OutputCollector()
        context = PipelineContext(
            resources=resource_map,
            addresses=addresses,
            project_config=project,
            variables=variables,
            outputs=outputs,
        )

        blocks: list[HclBlock] = []
        for resource in real:
            generator = self._registry.get_hcl_generator(resource.type_id)
            generated = generator.generate(resource, context)
            logger.debug("Generated %d block(s) for %s", len(generated), resource.instance_id)
            blocks.extend(generated)

        for binding in pipeline_input.bindings:
            blocks.extend(self._generate_binding(binding, resource_map, context))

        sorted_blocks = DependencyGraph(blocks).topological_sort()

        providers = ProviderConfigBuilder()
        for provider_id in dict.fromkeys(schemas[r.instance_id].provider for r in real):
            provider_config = self._registry.get_provider_config(provider_id)
            if provider_config is None:
                logger.debug("No provider config registered for %s", provider_id)
                continue
            providers.add_provider(provider_config, project.provider_configs.get(provider_id, {}))

        files = HclBlockBuilder().assemble(
            sorted_blocks,
            terraform_block=providers.generate_terraform_block(
                project.terraform_version, project.backend
            ),
            provider_blocks=providers.generate_provider_blocks(),
            variables_hcl=variables.generate_variables_hcl(),
            outputs_hcl=outputs.generate_outputs_hcl(),
            locals_hcl=_generate_locals(project),
        )

        tfvars = _generate_tfvars(variables.get_all(), project)
        if tfvars:
            files[TFVARS_FILE] = tfvars

        logger.info(
            "Generated %d block(s) from %d resource(s) for provider(s) %s",
            len(sorted_blocks),
            len(real),
            ", ".join(providers.active_provider_ids()) or "-",
        )
        return PipelineResult(files=files, collected_variables=variables.get_all())

    def _schema_for(self, resource: ResourceInstance) -> ResourceSchema:
        schema = self._registry.get_resource_schema(resource.type_id)
        if schema is None:
            raise UnknownResourceTypeError(resource.type_id)
        return schema

    def _terraform_type(self, resource: ResourceInstance, schema: ResourceSchema) -> str:
        generator = self._registry.get_hcl_generator(resource.type_id)
        return generator.resolve_terraform_type(resource.properties) or schema.terraform_type

    @staticmethod
    def _seed_variables(project: ProjectConfig) -> VariableCollector:
        variables = VariableCollector()
        if project.resource_group_as_variable:
            variables.add(
                TerraformVariable(
                    name=RESOURCE_GROUP_VARIABLE,
                    type="string",
                    description="Name of the resource group",
                    default=project.resource_group_name,
                )
            )
        if project.location_as_variable:
            variables.add(
                TerraformVariable(
                    name=LOCATION_VARIABLE,
                    type="string",
                    description="Region for all resources",
                    default=project.location,
                )
            )
        return variables

    def _generate_binding(
        self,
        binding: OutputBinding,
        resource_map: dict[str, ResourceInstance],
        context: PipelineContext,
    ) -> list[HclBlock]:
        source = resource_map.get(binding.source_instance_id)
        target = resource_map.get(binding.target_instance_id)
        if source is None or target is None:
            logger.debug("Skipping binding with missing endpoint: %s", binding)
            return []

        generator = self._registry.get_binding_generator(source.type_id, target.type_id)
        if generator is None:
            logger.debug("No binding generator for %s -> %s", source.type_id, target.type_id)
            return []
        return generator.generate(source, target, context, binding.source_attribute)


def _generate_locals(project: ProjectConfig) -> str:
    if not project.common_tags:
        return ""
    entries = "\n".join(f"    {k} = {quote(v)}" for k, v in project.common_tags.items())
    return f"locals {{\n  common_tags = {{\n{entries}\n  }}\n}}"


def _generate_tfvars(variables: list[TerraformVariable], project: ProjectConfig) -> str:
    lines = [
        f"{v.name} = {quote(project.variable_values[v.name])}"
        for v in variables
        if project.variable_values.get(v.name)
    ]
    return "\n".join(lines)

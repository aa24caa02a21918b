"""Engine types (blocks, variables, outputs, results)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


class BlockType(str, Enum):
    RESOURCE = "resource"
    DATA = "data"
    LOCALS = "locals"
    VARIABLE = "variable"
    OUTPUT = "output"


@dataclass(frozen=True, slots=True)
class HclBlock:
    """One unit of generated HCL text.

    ``depends_on`` holds ``type.name`` addresses; the dependency graph only
    follows the ones that resolve to another generated block.
    """

    block_type: BlockType
    terraform_type: str
    name: str
    content: str
    depends_on: tuple[str, ...] = ()

    @property
    def address(self) -> str | None:
        if self.terraform_type and self.name:
            return f"{self.terraform_type}.{self.name}"
        return None


class VariableValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    condition: str
    error_message: str


class TerraformVariable(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "string"
    description: str = ""
    default: Any = None
    sensitive: bool = False
    validation: VariableValidation | None = None


class TerraformOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    description: str = ""
    sensitive: bool = False


class OutputBinding(BaseModel):
    """Wire one resource's output attribute into another resource."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_instance_id: str
    target_instance_id: str
    source_attribute: str


TERRAFORM_FILE = "terraform.tf"
PROVIDERS_FILE = "providers.tf"
MAIN_FILE = "main.tf"
VARIABLES_FILE = "variables.tf"
OUTPUTS_FILE = "outputs.tf"
LOCALS_FILE = "locals.tf"
TFVARS_FILE = "terraform.tfvars"

OUTPUT_FILES: tuple[str, ...] = (
    TERRAFORM_FILE,
    PROVIDERS_FILE,
    MAIN_FILE,
    VARIABLES_FILE,
    OUTPUTS_FILE,
    LOCALS_FILE,
)

# File name -> HCL text. Always holds every name in ``OUTPUT_FILES``
# (empty string when there is nothing to emit); ``terraform.tfvars`` only
# when variable values are configured.
GeneratedFiles: TypeAlias = dict[str, str]


class PipelineResult(BaseModel):
    files: GeneratedFiles
    collected_variables: list[TerraformVariable] = Field(default_factory=list)

    def non_empty_files(self) -> dict[str, str]:
        return {name: content for name, content in self.files.items() if content.strip()}

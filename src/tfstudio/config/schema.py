"""Configuration models for YAML project files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tfstudio.engine.project import ProjectConfig
from tfstudio.engine.types import OutputBinding
from tfstudio.plugins import BUILTIN_PLUGINS
from tfstudio.resources.instance import TERRAFORM_NAME_PATTERN, PropertyMode, ResourceInstance
from tfstudio.validation.types import TopologyNode


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


def _none_to_dict(v: Any) -> Any:
    return v if v is not None else {}


class Settings(BaseSettings):
    """Process-level defaults, overridable with ``TFSTUDIO_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="TFSTUDIO_")

    config: Path = Path("tfstudio.yaml")
    output_dir: Path = Path("terraform")


class DiagramNode(BaseModel):
    """A diagram node as written in a project file.

    Carries the generation fields of a ``ResourceInstance`` plus the
    container (``parent_id``) and display label used by topology checks.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    terraform_name: str | None = Field(default=None, pattern=TERRAFORM_NAME_PATTERN)
    label: str | None = None
    parent_id: str | None = None
    properties: Annotated[dict[str, Any], BeforeValidator(_none_to_dict)] = {}
    references: Annotated[dict[str, str], BeforeValidator(_none_to_dict)] = {}
    variable_overrides: Annotated[dict[str, PropertyMode], BeforeValidator(_none_to_dict)] = {}

    def to_instance(
        self,
        *,
        terraform_name: str,
        properties: dict[str, Any],
        references: dict[str, str],
    ) -> ResourceInstance:
        return ResourceInstance(
            instance_id=self.id,
            type_id=self.type,
            terraform_name=terraform_name,
            properties=properties,
            references=references,
            variable_overrides=dict(self.variable_overrides),
        )

    def to_topology_node(self, properties: dict[str, Any] | None = None) -> TopologyNode:
        return TopologyNode(
            id=self.id,
            type=self.type,
            parent_id=self.parent_id,
            properties=dict(self.properties if properties is None else properties),
            label=self.label,
        )


class DiagramEdge(BaseModel):
    """A connection between two node handles."""

    model_config = ConfigDict(extra="forbid")

    source: str
    target: str
    source_handle: str
    target_handle: str


class Document(BaseModel):
    """A complete project file: configuration, plugins and the diagram."""

    model_config = ConfigDict(extra="forbid")

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    plugins: Annotated[dict[str, str], BeforeValidator(_none_to_dict)] = {}
    builtin_plugins: bool = True
    nodes: Annotated[list[DiagramNode], BeforeValidator(_none_to_list)] = []
    edges: Annotated[list[DiagramEdge], BeforeValidator(_none_to_list)] = []
    bindings: Annotated[list[OutputBinding], BeforeValidator(_none_to_list)] = []
    output_dir: Path | None = None
    config_dir: Path = Path()

    def provider_ids(self) -> list[str]:
        """Providers referenced by the diagram, in first-seen order."""
        return list(dict.fromkeys(node.type.split("/", 1)[0] for node in self.nodes))

    def plugin_references(self) -> dict[str, str]:
        """Provider id -> plugin reference, built-ins first, project entries winning."""
        refs = dict(BUILTIN_PLUGINS) if self.builtin_plugins else {}
        refs.update(self.plugins)
        return refs

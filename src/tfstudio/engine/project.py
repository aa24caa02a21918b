"""Project-level generation settings."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

from tfstudio.naming.template import NamingConvention


def _none_to_dict(v: Any) -> Any:
    return v if v is not None else {}


class BackendConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    config: dict[str, str] = {}


class ProjectConfig(BaseModel):
    """Settings supplied alongside the resources of a generation request.

    ``resource_group_as_variable`` / ``location_as_variable`` turn the
    project's resource group name and location into Terraform variables
    instead of literals.
    """

    model_config = ConfigDict(extra="forbid")

    provider_configs: Annotated[dict[str, dict[str, Any]], BeforeValidator(_none_to_dict)] = {}
    common_tags: Annotated[dict[str, str], BeforeValidator(_none_to_dict)] = {}
    variable_values: Annotated[dict[str, str], BeforeValidator(_none_to_dict)] = {}

    resource_group_name: str | None = None
    location: str | None = None
    resource_group_as_variable: bool = False
    location_as_variable: bool = False

    naming_convention: NamingConvention | None = None
    backend: BackendConfig | None = None
    terraform_version: str = ">= 1.0"

"""YAML project loading and convenience validate/generate API."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tfstudio.config.diagram import to_resource_instances, to_topology_nodes
from tfstudio.config.loader import ConfigError, load_config
from tfstudio.config.plugins import declare_entry_point_plugins, declare_plugins
from tfstudio.config.schema import DiagramEdge, DiagramNode, Document, Settings
from tfstudio.engine.errors import DiagramValidationError
from tfstudio.engine.pipeline import HclPipeline, PipelineInput
from tfstudio.engine.registry import PluginRegistry
from tfstudio.validation import validate_diagram, validate_network_topology

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from tfstudio.engine.types import PipelineResult
    from tfstudio.validation.types import DiagramValidationResult, TopologyError

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigError",
    "DiagramEdge",
    "DiagramNode",
    "Document",
    "Settings",
    "build_registry",
    "generate",
    "load",
    "load_config",
    "validate",
    "write_files",
]


def load(path: Path | str) -> Document:
    """Load a YAML project file."""
    return load_config(path)


def build_registry(
    document: Document, providers: Iterable[str] | None = None
) -> PluginRegistry:
    """Declare the document's plugins and load those for *providers*.

    *providers* defaults to the providers the diagram uses.
    """
    registry = PluginRegistry()
    declare_plugins(registry, document.plugin_references(), document.config_dir)

    wanted = list(document.provider_ids() if providers is None else providers)
    declare_entry_point_plugins(registry, wanted, document.config_dir)
    asyncio.run(registry.load_plugins_for_providers(wanted))
    return registry


def validate(
    document: Document, registry: PluginRegistry
) -> tuple[DiagramValidationResult, list[TopologyError]]:
    """Run diagram and network topology validation; never raises on bad data."""
    resources, _ = to_resource_instances(document, registry)
    diagram = validate_diagram(resources, registry)
    topology = validate_network_topology(to_topology_nodes(document, resources))
    return diagram, topology


def generate(
    document: Document, registry: PluginRegistry, *, allow_warnings: bool = True
) -> PipelineResult:
    """Validate and generate Terraform files for the document.

    Raises:
        DiagramValidationError: On error-severity issues, or on any issue
            when *allow_warnings* is false.
    """
    resources, bindings = to_resource_instances(document, registry)
    diagram = validate_diagram(resources, registry)
    topology = validate_network_topology(to_topology_nodes(document, resources))

    blocking = not diagram.valid or any(t.has_errors for t in topology)
    if blocking or (topology and not allow_warnings):
        raise DiagramValidationError(diagram, topology)

    pipeline_input = PipelineInput(
        resources=resources, project_config=document.project, bindings=bindings
    )
    return HclPipeline(registry).generate(pipeline_input)


def write_files(files: Mapping[str, str], directory: Path | str) -> list[Path]:
    """Write non-empty generated files into *directory*; returns the written paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name, content in files.items():
        if not content.strip():
            continue
        path = directory / name
        path.write_text(content.rstrip("\n") + "\n", encoding="utf-8")
        written.append(path)

    logger.info("Wrote %d file(s) to %s", len(written), directory)
    return written

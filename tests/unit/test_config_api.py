"""Tests for the load / build_registry / validate / generate convenience API."""

from __future__ import annotations

import importlib.metadata
from typing import TYPE_CHECKING

import pytest

from tfstudio.config import build_registry, generate, load, validate, write_files
from tfstudio.config.schema import Document
from tfstudio.engine.errors import DiagramValidationError
from tfstudio.engine.types import MAIN_FILE, PROVIDERS_FILE
from tfstudio.plugins.azure_networking import SUBNET_TYPE

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tfstudio.engine.registry import PluginRegistry


def _network_yaml(web: str = "10.0.1.0/24", db: str = "10.0.2.0/24") -> str:
    return f"""\
project:
  naming_convention:
    env: dev

nodes:
  - id: rg
    type: azurerm/core/resource_group
    label: app
  - id: vnet
    type: azurerm/networking/virtual_network
    parent_id: rg
    label: core
  - id: web
    type: azurerm/networking/subnet
    parent_id: vnet
    label: web
    properties:
      address_prefixes: [{web}]
  - id: db
    type: azurerm/networking/subnet
    parent_id: vnet
    label: db
    properties:
      address_prefixes: [{db}]
"""


@pytest.fixture
def no_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(importlib.metadata, "entry_points", lambda **_: [])


class TestBuildRegistry:
    def test_loads_diagram_providers(self, make_document: Callable[..., Document]) -> None:
        registry = build_registry(make_document(_network_yaml()))
        assert registry.is_provider_loaded("azurerm")
        assert registry.has_resource_type(SUBNET_TYPE)

    def test_explicit_providers(self, tmp_path: Path) -> None:
        registry = build_registry(Document(config_dir=tmp_path), ["azurerm"])
        assert registry.is_provider_loaded("azurerm")

    def test_empty_diagram_loads_nothing(self, tmp_path: Path) -> None:
        registry = build_registry(Document(config_dir=tmp_path))
        assert registry.resource_type_ids() == []

    @pytest.mark.usefixtures("no_entry_points")
    def test_builtins_disabled(self, tmp_path: Path) -> None:
        document = Document(builtin_plugins=False, config_dir=tmp_path)
        registry = build_registry(document, ["azurerm"])
        assert not registry.is_provider_loaded("azurerm")

    def test_project_plugin_file(self, tmp_path: Path) -> None:
        (tmp_path / "tfstudio_api_plugin.py").write_text(
            "from tfstudio.plugins.azure_networking import create_plugin\n"
        )
        document = Document(
            plugins={"azurerm": "tfstudio_api_plugin:create_plugin"}, config_dir=tmp_path
        )
        registry = build_registry(document, ["azurerm"])
        assert registry.has_resource_type(SUBNET_TYPE)


class TestValidate:
    def test_valid(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml())
        diagram, topology = validate(document, build_registry(document))
        assert diagram.valid
        assert diagram.errors == []
        assert topology == []

    def test_overlapping_subnets_warn(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml(db="10.0.1.128/25"))

        diagram, topology = validate(document, build_registry(document))

        assert diagram.valid
        assert [t.instance_id for t in topology] == ["web", "db"]
        assert not any(t.has_errors for t in topology)

    def test_subnet_outside_vnet(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml(db="10.1.0.0/24"))

        _, topology = validate(document, build_registry(document))

        [error] = topology
        assert error.instance_id == "db"
        assert error.has_errors

    def test_unknown_type_is_reported(self, azure_registry: PluginRegistry) -> None:
        document = Document.model_validate({"nodes": [{"id": "x", "type": "aws/net/vpc"}]})
        diagram, _ = validate(document, azure_registry)
        assert not diagram.valid
        assert diagram.errors[0].errors[0].message == "Unknown resource type: aws/net/vpc"


class TestGenerate:
    def test_generates_files(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml())

        result = generate(document, build_registry(document))

        main = result.files[MAIN_FILE]
        assert 'resource "azurerm_resource_group" "rg_app_dev"' in main
        assert 'resource "azurerm_virtual_network" "vnet_core_dev"' in main
        assert 'resource "azurerm_subnet" "snet_web_dev"' in main
        assert 'resource "azurerm_subnet" "snet_db_dev"' in main
        assert 'provider "azurerm"' in result.files[PROVIDERS_FILE]

    def test_errors_block_generation(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml(db="10.1.0.0/24"))

        with pytest.raises(DiagramValidationError) as exc_info:
            generate(document, build_registry(document))

        assert [t.instance_id for t in exc_info.value.topology] == ["db"]
        assert "1 resource(s)" in str(exc_info.value)

    def test_diagram_errors_block_generation(self, azure_registry: PluginRegistry) -> None:
        document = Document.model_validate({"nodes": [{"id": "x", "type": "aws/net/vpc"}]})
        with pytest.raises(DiagramValidationError):
            generate(document, azure_registry)

    def test_warnings_allowed_by_default(self, make_document: Callable[..., Document]) -> None:
        document = make_document(_network_yaml(db="10.0.1.128/25"))
        result = generate(document, build_registry(document))
        assert result.files[MAIN_FILE]

    def test_warnings_block_when_not_allowed(
        self, make_document: Callable[..., Document]
    ) -> None:
        document = make_document(_network_yaml(db="10.0.1.128/25"))

        with pytest.raises(DiagramValidationError) as exc_info:
            generate(document, build_registry(document), allow_warnings=False)

        assert exc_info.value.diagram.valid
        assert len(exc_info.value.topology) == 2


class TestWriteFiles:
    def test_skips_empty_files(self, tmp_path: Path) -> None:
        files = {"main.tf": "a = 1\n\n", "outputs.tf": "", "locals.tf": "  \n"}

        written = write_files(files, tmp_path / "out" / "tf")

        assert written == [tmp_path / "out" / "tf" / "main.tf"]
        assert (tmp_path / "out" / "tf" / "main.tf").read_text() == "a = 1\n"
        assert not (tmp_path / "out" / "tf" / "outputs.tf").exists()

    def test_adds_trailing_newline(self, tmp_path: Path) -> None:
        write_files({"main.tf": "a = 1"}, str(tmp_path))
        assert (tmp_path / "main.tf").read_text() == "a = 1\n"


def test_load_accepts_str(tmp_path: Path) -> None:
    path = tmp_path / "project.yaml"
    path.write_text("output_dir: build\n")
    document = load(str(path))
    assert document.config_dir == tmp_path
    assert str(document.output_dir) == "build"

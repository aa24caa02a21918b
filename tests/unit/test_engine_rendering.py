"""Tests for HCL escaping, collectors, provider and file assembly."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from tfstudio.engine.builder import HclBlockBuilder
from tfstudio.engine.collectors import OutputCollector, VariableCollector
from tfstudio.engine.escape import escape_hcl_string, format_hcl_value, quote
from tfstudio.engine.plugins import ProviderConfig
from tfstudio.engine.project import BackendConfig
from tfstudio.engine.providers import ProviderConfigBuilder
from tfstudio.engine.types import (
    LOCALS_FILE,
    MAIN_FILE,
    OUTPUT_FILES,
    OUTPUTS_FILE,
    PROVIDERS_FILE,
    TERRAFORM_FILE,
    VARIABLES_FILE,
    BlockType,
    HclBlock,
    PipelineResult,
    TerraformOutput,
    TerraformVariable,
    VariableValidation,
)

_AZURERM = ProviderConfig(
    id="azurerm",
    source="hashicorp/azurerm",
    version="~> 4.0",
    default_config={"subscription_id": "", "features": {}},
)


class TestEscape:
    def test_quotes_and_newlines(self) -> None:
        assert escape_hcl_string('say "hi"\n') == 'say \\"hi\\"\\n'

    def test_backslash_escaped_first(self) -> None:
        assert escape_hcl_string("C:\\dir\t") == "C:\\\\dir\\t"

    def test_interpolation_is_neutralized(self) -> None:
        assert escape_hcl_string("${var.secret}") == "$${var.secret}"

    def test_carriage_return(self) -> None:
        assert escape_hcl_string("a\r\nb") == "a\\r\\nb"

    def test_quote(self) -> None:
        assert quote('x"y') == '"x\\"y"'


class TestFormatHclValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (3, "3"),
            (1.5, "1.5"),
            ("eastus", '"eastus"'),
            ([], "[]"),
            (["10.0.0.0/16", 1, True], '["10.0.0.0/16", 1, true]'),
            (("a",), '["a"]'),
            ({}, "{}"),
            (PurePosixPath("a/b"), '"a/b"'),
        ],
    )
    def test_scalars_and_lists(self, value: object, expected: str) -> None:
        assert format_hcl_value(value) == expected

    def test_nested_mapping(self) -> None:
        value = {"a": 1, "b": {"c": "x"}}
        assert format_hcl_value(value) == '{\n    a = 1\n    b = {\n      c = "x"\n    }\n  }'

    def test_mapping_at_top_level(self) -> None:
        assert format_hcl_value({"env": "dev"}, indent=0) == '{\n  env = "dev"\n}'


class TestVariableCollector:
    def test_first_registration_wins(self) -> None:
        collector = VariableCollector()
        collector.add(TerraformVariable(name="location", default="eastus"))
        collector.add(TerraformVariable(name="location", default="westus"))

        assert len(collector) == 1
        assert collector.get_all()[0].default == "eastus"

    def test_render_full_variable(self) -> None:
        collector = VariableCollector()
        collector.add(
            TerraformVariable(
                name="x",
                description="X",
                default="a",
                sensitive=True,
                validation=VariableValidation(
                    condition="length(var.x) > 0", error_message="must not be empty"
                ),
            )
        )
        assert collector.generate_variables_hcl() == "\n".join(
            [
                'variable "x" {',
                "  type        = string",
                '  description = "X"',
                '  default     = "a"',
                "  sensitive   = true",
                "  validation {",
                "    condition     = length(var.x) > 0",
                '    error_message = "must not be empty"',
                "  }",
                "}",
            ]
        )

    def test_render_without_default(self) -> None:
        collector = VariableCollector()
        collector.add(TerraformVariable(name="cidrs", type="list(string)"))
        assert collector.generate_variables_hcl() == (
            'variable "cidrs" {\n  type        = list(string)\n  description = ""\n}'
        )

    def test_variables_are_separated_by_blank_line(self) -> None:
        collector = VariableCollector()
        collector.add(TerraformVariable(name="a"))
        collector.add(TerraformVariable(name="b"))
        assert "}\n\nvariable \"b\"" in collector.generate_variables_hcl()


class TestOutputCollector:
    def test_render(self) -> None:
        collector = OutputCollector()
        collector.add(
            TerraformOutput(
                name="vnet_id", value="azurerm_virtual_network.vnet.id", description="ID"
            )
        )
        collector.add(TerraformOutput(name="vnet_id", value="ignored"))

        assert len(collector.get_all()) == 1
        assert collector.generate_outputs_hcl() == "\n".join(
            [
                'output "vnet_id" {',
                "  value       = azurerm_virtual_network.vnet.id",
                '  description = "ID"',
                "}",
            ]
        )

    def test_sensitive(self) -> None:
        collector = OutputCollector()
        collector.add(TerraformOutput(name="key", value="x.key", sensitive=True))
        assert "  sensitive   = true" in collector.generate_outputs_hcl()


class TestProviderConfig:
    def test_required_provider(self) -> None:
        assert _AZURERM.required_provider_hcl() == "\n".join(
            [
                "    azurerm = {",
                '      source  = "hashicorp/azurerm"',
                '      version = "~> 4.0"',
                "    }",
            ]
        )

    def test_defaults_skip_empty_attributes(self) -> None:
        assert _AZURERM.provider_block_hcl({}) == 'provider "azurerm" {\n  features {}\n}'

    def test_user_config_overlays_defaults(self) -> None:
        hcl = _AZURERM.provider_block_hcl(
            {
                "subscription_id": "abc",
                "features": {"key_vault": {"purge_soft_delete_on_destroy": True}},
            }
        )
        assert hcl == "\n".join(
            [
                'provider "azurerm" {',
                '  subscription_id = "abc"',
                "  features {",
                "    key_vault {",
                "      purge_soft_delete_on_destroy = true",
                "    }",
                "  }",
                "}",
            ]
        )

    def test_variable_reference_is_unquoted(self) -> None:
        hcl = _AZURERM.provider_block_hcl({"subscription_id": "var.subscription_id"})
        assert "  subscription_id = var.subscription_id" in hcl

    def test_attributes_before_blocks(self) -> None:
        hcl = _AZURERM.provider_block_hcl({"features": {}, "tenant_id": "t"})
        assert hcl.index("tenant_id") < hcl.index("features")


class TestProviderConfigBuilder:
    def test_terraform_block_without_providers(self) -> None:
        block = ProviderConfigBuilder().generate_terraform_block()
        assert block == 'terraform {\n  required_version = ">= 1.0"\n}'

    def test_terraform_block_with_provider_and_backend(self) -> None:
        builder = ProviderConfigBuilder()
        builder.add_provider(_AZURERM, {})
        backend = BackendConfig(type="azurerm", config={"key": "prod.tfstate"})

        block = builder.generate_terraform_block(">= 1.5", backend)

        assert block.startswith('terraform {\n  required_version = ">= 1.5"\n\n')
        assert "  required_providers {\n    azurerm = {" in block
        assert '  backend "azurerm" {\n    key = "prod.tfstate"\n  }\n}' in block
        assert builder.active_provider_ids() == ["azurerm"]

    def test_provider_blocks_use_user_config(self) -> None:
        builder = ProviderConfigBuilder()
        builder.add_provider(_AZURERM, {"subscription_id": "sub"})
        assert 'subscription_id = "sub"' in builder.generate_provider_blocks()

    def test_no_providers(self) -> None:
        assert ProviderConfigBuilder().generate_provider_blocks() == ""


def _block(block_type: BlockType, name: str, content: str) -> HclBlock:
    return HclBlock(block_type=block_type, terraform_type="t", name=name, content=content)


class TestHclBlockBuilder:
    def test_routes_blocks_to_files(self) -> None:
        blocks = [
            _block(BlockType.RESOURCE, "r1", "resource r1"),
            _block(BlockType.VARIABLE, "v", "variable extra"),
            _block(BlockType.DATA, "d1", "data d1"),
            _block(BlockType.OUTPUT, "o", "output extra"),
            _block(BlockType.LOCALS, "l", "locals extra"),
        ]
        files = HclBlockBuilder().assemble(
            blocks,
            terraform_block="terraform {}",
            provider_blocks="provider {}",
            variables_hcl="variable collected",
            outputs_hcl="",
            locals_hcl="",
        )

        assert files[TERRAFORM_FILE] == "terraform {}"
        assert files[PROVIDERS_FILE] == "provider {}"
        assert files[MAIN_FILE] == "resource r1\n\ndata d1"
        assert files[VARIABLES_FILE] == "variable collected\n\nvariable extra"
        assert files[OUTPUTS_FILE] == "output extra"
        assert files[LOCALS_FILE] == "locals extra"

    def test_every_file_present_when_empty(self) -> None:
        files = HclBlockBuilder().assemble(
            [],
            terraform_block="",
            provider_blocks="",
            variables_hcl="",
            outputs_hcl="",
            locals_hcl="",
        )
        assert set(files) == set(OUTPUT_FILES)
        assert all(content == "" for content in files.values())
        assert PipelineResult(files=files).non_empty_files() == {}

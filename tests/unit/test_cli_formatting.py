from __future__ import annotations

import re

from tfstudio.cli.formatting import format_issue_summary, format_issues, format_types, issue_counts
from tfstudio.engine.plugins import HclGenerator, InfraPlugin, ResourceTypeRegistration
from tfstudio.engine.registry import PluginRegistry
from tfstudio.resources.schema import ResourceSchema
from tfstudio.validation.types import (
    DiagramError,
    DiagramValidationResult,
    TopologyError,
    ValidationIssue,
)


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


_DIAGRAM = DiagramValidationResult(
    valid=False,
    errors=[
        DiagramError(
            instance_id="rg",
            type_id="azurerm/core/resource_group",
            label="app",
            errors=[
                ValidationIssue(property_key="name", message="Name is required"),
                ValidationIssue(property_key="location", message="Location is required"),
            ],
        )
    ],
)

_TOPOLOGY = [
    TopologyError(
        instance_id="db",
        errors=[
            ValidationIssue(
                property_key="address_prefixes",
                message="Subnet CIDR 10.0.1.128/25 overlaps with sibling subnet web (10.0.1.0/24)",
                severity="warning",
            )
        ],
    )
]


class TestFormatIssues:
    def test_empty(self) -> None:
        assert format_issues(DiagramValidationResult(valid=True), [], color=False) == (
            "No issues found."
        )

    def test_grouped(self) -> None:
        result = format_issues(_DIAGRAM, _TOPOLOGY, color=False)
        assert result == (
            "  # app (azurerm/core/resource_group)\n"
            "    x name: Name is required\n"
            "    x location: Location is required\n"
            "\n"
            "  # db\n"
            "    ! address_prefixes: Subnet CIDR 10.0.1.128/25 overlaps with sibling subnet "
            "web (10.0.1.0/24)"
        )

    def test_color_mode_contains_ansi(self) -> None:
        result = format_issues(_DIAGRAM, _TOPOLOGY, color=True)
        assert "\x1b[" in result
        assert _strip_ansi(result) == format_issues(_DIAGRAM, _TOPOLOGY, color=False)


class TestIssueSummary:
    def test_counts(self) -> None:
        assert issue_counts(_DIAGRAM, _TOPOLOGY) == {"error": 2, "warning": 1}

    def test_all_zeros(self) -> None:
        assert format_issue_summary({"error": 0, "warning": 0}, color=False) == (
            "Validation: 0 errors, 0 warnings."
        )

    def test_with_counts(self) -> None:
        assert format_issue_summary({"error": 2, "warning": 1}, color=False) == (
            "Validation: 2 errors, 1 warning."
        )

    def test_color_mode_contains_ansi(self) -> None:
        result = format_issue_summary({"error": 1, "warning": 0}, color=True)
        assert "\x1b[" in result
        assert _strip_ansi(result) == "Validation: 1 error, 0 warnings."


class TestFormatTypes:
    def test_builtin_types(self, azure_registry: PluginRegistry) -> None:
        result = format_types(azure_registry, color=False)
        core, networking = result.split("\n\n")
        assert core == "Core\n  azurerm/core/resource_group  Resource Group [container]"
        assert networking.splitlines()[0] == "Networking"
        assert "  azurerm/networking/subnet  Subnet" in networking

    def test_uncategorized_types_listed_by_id(self, azure_registry: PluginRegistry) -> None:
        schema = ResourceSchema(
            type_id="misc/widget",
            provider="misc",
            display_name="Widget",
            category="misc",
            terraform_type="misc_widget",
        )
        azure_registry.register_plugin(
            InfraPlugin(
                id="misc",
                name="Misc",
                version="0",
                provider_id="misc",
                resource_types={
                    "misc/widget": ResourceTypeRegistration(
                        schema=schema, hcl_generator=HclGenerator()
                    )
                },
            )
        )

        result = format_types(azure_registry, color=False)

        assert result.endswith("misc\n  misc/widget  Widget")

    def test_empty_registry(self) -> None:
        assert format_types(PluginRegistry(), color=False) == "No resource types registered."

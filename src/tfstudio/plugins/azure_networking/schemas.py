"""Resource schemas of the Azure networking plugin."""

from __future__ import annotations

from tfstudio.resources.schema import (
    HandleDefinition,
    NamingConstraints,
    OutputDefinition,
    ParentReference,
    PropertySchema,
    PropertyValidation,
    ResourceSchema,
    SelectOption,
)

PROVIDER_ID = "azurerm"

RESOURCE_GROUP_TYPE = "azurerm/core/resource_group"
VIRTUAL_NETWORK_TYPE = "azurerm/networking/virtual_network"
SUBNET_TYPE = "azurerm/networking/subnet"
NETWORK_SECURITY_GROUP_TYPE = "azurerm/networking/network_security_group"

_NAME_PATTERN = r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*[a-zA-Z0-9_]$"
_NAME_PATTERN_MESSAGE = "Must start with alphanumeric, end with alphanumeric or underscore"

_LOCATIONS = (
    ("East US", "eastus"),
    ("East US 2", "eastus2"),
    ("West US", "westus"),
    ("West US 2", "westus2"),
    ("Central US", "centralus"),
    ("North Europe", "northeurope"),
    ("West Europe", "westeurope"),
    ("UK South", "uksouth"),
    ("Southeast Asia", "southeastasia"),
    ("Australia East", "australiaeast"),
)

_SERVICE_ENDPOINTS = (
    "Microsoft.Storage",
    "Microsoft.Sql",
    "Microsoft.KeyVault",
    "Microsoft.Web",
)


def _name_property(
    min_length: int,
    max_length: int,
    pattern: str = _NAME_PATTERN,
    pattern_message: str = _NAME_PATTERN_MESSAGE,
) -> PropertySchema:
    return PropertySchema(
        key="name",
        label="Name",
        required=True,
        validation=PropertyValidation(
            min_length=min_length,
            max_length=max_length,
            pattern=pattern,
            pattern_message=pattern_message,
        ),
    )


_ID_OUTPUT = OutputDefinition(key="id", label="Resource ID", terraform_attribute="id")

RESOURCE_GROUP_SCHEMA = ResourceSchema(
    type_id=RESOURCE_GROUP_TYPE,
    provider=PROVIDER_ID,
    display_name="Resource Group",
    category="core",
    terraform_type="azurerm_resource_group",
    description="Azure Resource Group, the logical container for related resources",
    properties=(
        _name_property(
            1,
            90,
            pattern=r"^[-\w._()]+$",
            pattern_message="Alphanumerics, underscores, hyphens, periods, and parentheses",
        ),
        PropertySchema(
            key="location",
            label="Location",
            type="select",
            required=True,
            default="eastus",
            options=tuple(SelectOption(label=label, value=value) for label, value in _LOCATIONS),
        ),
    ),
    handles=(HandleDefinition(id="resources-out", type="source", label="Resources"),),
    outputs=(
        _ID_OUTPUT,
        OutputDefinition(key="name", label="Name", terraform_attribute="name"),
    ),
    is_container=True,
    caf_abbreviation="rg",
    naming_constraints=NamingConstraints(max_length=90),
)

VIRTUAL_NETWORK_SCHEMA = ResourceSchema(
    type_id=VIRTUAL_NETWORK_TYPE,
    provider=PROVIDER_ID,
    display_name="Virtual Network",
    category="networking",
    terraform_type="azurerm_virtual_network",
    description="Azure Virtual Network (VNet) for isolating cloud resources",
    properties=(
        _name_property(2, 64),
        PropertySchema(
            key="address_space",
            label="Address Space",
            type="array",
            item_type="cidr",
            required=True,
            default=["10.0.0.0/16"],
            description="CIDR blocks for the virtual network",
        ),
        PropertySchema(
            key="dns_servers",
            label="DNS Servers",
            type="array",
            item_type="string",
            description="Custom DNS server IP addresses",
        ),
    ),
    handles=(HandleDefinition(id="subnet-out", type="source", label="Subnets"),),
    outputs=(
        _ID_OUTPUT,
        OutputDefinition(key="name", label="Name", terraform_attribute="name"),
    ),
    is_container=True,
    can_be_child_of=(RESOURCE_GROUP_TYPE,),
    requires_resource_group=True,
    caf_abbreviation="vnet",
    naming_constraints=NamingConstraints(max_length=64),
)

SUBNET_SCHEMA = ResourceSchema(
    type_id=SUBNET_TYPE,
    provider=PROVIDER_ID,
    display_name="Subnet",
    category="networking",
    terraform_type="azurerm_subnet",
    description="Azure Subnet within a Virtual Network",
    properties=(
        _name_property(1, 80),
        PropertySchema(
            key="address_prefixes",
            label="Address Prefixes",
            type="array",
            item_type="cidr",
            required=True,
            default=["10.0.1.0/24"],
            description="CIDR blocks for the subnet",
        ),
        PropertySchema(
            key="service_endpoints",
            label="Service Endpoints",
            type="multiselect",
            description="Azure service endpoints to enable",
            options=tuple(SelectOption(label=e, value=e) for e in _SERVICE_ENDPOINTS),
        ),
        PropertySchema(
            key="virtual_network_name",
            label="Virtual Network",
            type="reference",
            required=True,
            reference_types=(VIRTUAL_NETWORK_TYPE,),
        ),
    ),
    handles=(
        HandleDefinition(id="vnet-in", type="target", position="top", label="Virtual Network"),
        HandleDefinition(id="resource-out", type="source", label="Resources"),
        HandleDefinition(id="nsg-in", type="target", position="right", label="NSG"),
    ),
    outputs=(_ID_OUTPUT,),
    is_container=True,
    can_be_child_of=(VIRTUAL_NETWORK_TYPE,),
    parent_reference=ParentReference(property_key="virtual_network_name"),
    requires_resource_group=True,
    caf_abbreviation="snet",
    naming_constraints=NamingConstraints(max_length=80),
)

NETWORK_SECURITY_GROUP_SCHEMA = ResourceSchema(
    type_id=NETWORK_SECURITY_GROUP_TYPE,
    provider=PROVIDER_ID,
    display_name="Network Security Group",
    category="networking",
    terraform_type="azurerm_network_security_group",
    description="Azure Network Security Group (NSG) for filtering network traffic",
    properties=(
        _name_property(1, 80),
        PropertySchema(
            key="security_rules",
            label="Security Rules",
            type="array",
            description="Inbound and outbound security rules",
        ),
    ),
    handles=(HandleDefinition(id="nsg-out", type="source", position="left", label="Subnets"),),
    outputs=(_ID_OUTPUT,),
    can_be_child_of=(RESOURCE_GROUP_TYPE,),
    requires_resource_group=True,
    caf_abbreviation="nsg",
    naming_constraints=NamingConstraints(max_length=80),
)

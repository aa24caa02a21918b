"""Azure networking plugin: resource groups, virtual networks, subnets and NSGs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tfstudio import __version__
from tfstudio.engine.plugins import (
    ConnectionRule,
    CreatesReference,
    IconDefinition,
    InfraPlugin,
    OutputBindingSpec,
    PaletteCategory,
    ProviderConfig,
    ResourceTypeRegistration,
)
from tfstudio.plugins.azure_networking.generators import (
    NetworkSecurityGroupGenerator,
    ResourceGroupGenerator,
    SubnetGenerator,
    SubnetNsgAssociationGenerator,
    VirtualNetworkGenerator,
)
from tfstudio.plugins.azure_networking.schemas import (
    NETWORK_SECURITY_GROUP_SCHEMA,
    NETWORK_SECURITY_GROUP_TYPE,
    PROVIDER_ID,
    RESOURCE_GROUP_SCHEMA,
    RESOURCE_GROUP_TYPE,
    SUBNET_SCHEMA,
    SUBNET_TYPE,
    VIRTUAL_NETWORK_SCHEMA,
    VIRTUAL_NETWORK_TYPE,
)

if TYPE_CHECKING:
    from tfstudio.engine.plugins import PluginRegistryReader

logger = logging.getLogger(__name__)

PLUGIN_ID = "tfstudio-azure-networking"

AZURERM_PROVIDER = ProviderConfig(
    id=PROVIDER_ID,
    source="hashicorp/azurerm",
    version="~> 4.0",
    default_config={"subscription_id": "", "features": {}},
)

CONNECTION_RULES = (
    ConnectionRule(
        source_type=VIRTUAL_NETWORK_TYPE,
        source_handle="subnet-out",
        target_type=SUBNET_TYPE,
        target_handle="vnet-in",
        label="Contains subnet",
        creates_reference=CreatesReference(side="target", property_key="virtual_network_name"),
    ),
    ConnectionRule(
        source_type=NETWORK_SECURITY_GROUP_TYPE,
        source_handle="nsg-out",
        target_type=SUBNET_TYPE,
        target_handle="nsg-in",
        label="Associates NSG with subnet",
        output_binding=OutputBindingSpec(source_attribute="id"),
    ),
)

PALETTE_CATEGORIES = (
    PaletteCategory(id="core", label="Core", order=0),
    PaletteCategory(id="networking", label="Networking", order=10),
)


def _check_parent_types(reader: PluginRegistryReader) -> None:
    """Log container types referenced by this plugin that nobody registered."""
    for type_id in (
        RESOURCE_GROUP_TYPE,
        VIRTUAL_NETWORK_TYPE,
        SUBNET_TYPE,
        NETWORK_SECURITY_GROUP_TYPE,
    ):
        schema = reader.get_resource_schema(type_id)
        if schema is None:
            continue
        for parent in schema.can_be_child_of:
            if not reader.has_resource_type(parent):
                logger.warning("%s can be placed in unregistered type %s", type_id, parent)


def create_plugin() -> InfraPlugin:
    return InfraPlugin(
        id=PLUGIN_ID,
        name="Azure Networking",
        version=__version__,
        provider_id=PROVIDER_ID,
        resource_types={
            RESOURCE_GROUP_TYPE: ResourceTypeRegistration(
                schema=RESOURCE_GROUP_SCHEMA,
                hcl_generator=ResourceGroupGenerator(),
                icon=IconDefinition(type="url", value="azure/resource-groups.svg"),
            ),
            VIRTUAL_NETWORK_TYPE: ResourceTypeRegistration(
                schema=VIRTUAL_NETWORK_SCHEMA,
                hcl_generator=VirtualNetworkGenerator(),
                icon=IconDefinition(type="url", value="azure/virtual-networks.svg"),
            ),
            SUBNET_TYPE: ResourceTypeRegistration(
                schema=SUBNET_SCHEMA,
                hcl_generator=SubnetGenerator(),
            ),
            NETWORK_SECURITY_GROUP_TYPE: ResourceTypeRegistration(
                schema=NETWORK_SECURITY_GROUP_SCHEMA,
                hcl_generator=NetworkSecurityGroupGenerator(),
                icon=IconDefinition(type="url", value="azure/network-security-groups.svg"),
            ),
        },
        connection_rules=CONNECTION_RULES,
        palette_categories=PALETTE_CATEGORIES,
        provider_config=AZURERM_PROVIDER,
        binding_generators=(SubnetNsgAssociationGenerator(),),
        on_all_plugins_registered=_check_parent_types,
    )


__all__ = [
    "AZURERM_PROVIDER",
    "NETWORK_SECURITY_GROUP_TYPE",
    "PLUGIN_ID",
    "PROVIDER_ID",
    "RESOURCE_GROUP_TYPE",
    "SUBNET_TYPE",
    "VIRTUAL_NETWORK_TYPE",
    "create_plugin",
]

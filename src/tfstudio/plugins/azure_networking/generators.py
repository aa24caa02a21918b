"""HCL generators of the Azure networking plugin."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tfstudio.engine.context import PropertyExpressionOptions
from tfstudio.engine.escape import format_hcl_value, quote
from tfstudio.engine.plugins import BindingHclGenerator, HclGenerator
from tfstudio.engine.types import BlockType, HclBlock, TerraformOutput
from tfstudio.plugins.azure_networking.schemas import (
    NETWORK_SECURITY_GROUP_TYPE,
    SUBNET_TYPE,
)
from tfstudio.resources.instance import RESOURCE_GROUP_REFERENCE

if TYPE_CHECKING:
    from tfstudio.engine.context import HclGenerationContext
    from tfstudio.resources.instance import ResourceInstance

_CIDR_LIST = PropertyExpressionOptions(variable_type="list(string)")

_SECURITY_RULE_FIELDS = (
    "name",
    "priority",
    "direction",
    "access",
    "protocol",
    "source_port_range",
    "destination_port_range",
    "source_address_prefix",
    "destination_address_prefix",
)
_SECURITY_RULE_DEFAULTS: dict[str, Any] = {
    "source_port_range": "*",
    "source_address_prefix": "*",
    "destination_address_prefix": "*",
}


def _resource_block(
    terraform_type: str,
    resource: ResourceInstance,
    body: list[str],
    depends_on: tuple[str, ...] = (),
) -> HclBlock:
    lines = [f'resource "{terraform_type}" "{resource.terraform_name}" {{', *body, "}"]
    return HclBlock(
        block_type=BlockType.RESOURCE,
        terraform_type=terraform_type,
        name=resource.terraform_name,
        content="\n".join(lines),
        depends_on=depends_on,
    )


def _dependencies(
    resource: ResourceInstance, context: HclGenerationContext, *reference_keys: str
) -> tuple[str, ...]:
    """Addresses of the generated resources behind *reference_keys*."""
    ids = (resource.references.get(key) for key in (RESOURCE_GROUP_REFERENCE, *reference_keys))
    addresses = (context.get_terraform_address(i) for i in ids if i)
    return tuple(a for a in addresses if a is not None)


def _tags(context: HclGenerationContext) -> list[str]:
    expr = context.get_tags_expression()
    return ["", f"  tags = {expr}"] if expr else []


class ResourceGroupGenerator(HclGenerator):
    def generate(
        self, resource: ResourceInstance, context: HclGenerationContext
    ) -> list[HclBlock]:
        props = resource.properties
        name = context.get_property_expression(resource, "name", props.get("name"))
        location = context.get_property_expression(
            resource, "location", props.get("location") or "eastus"
        )
        body = [
            f"  name     = {name}",
            f"  location = {location}",
            *_tags(context),
        ]
        return [_resource_block("azurerm_resource_group", resource, body)]


class VirtualNetworkGenerator(HclGenerator):
    def generate(
        self, resource: ResourceInstance, context: HclGenerationContext
    ) -> list[HclBlock]:
        props = resource.properties
        name = context.get_property_expression(resource, "name", props.get("name"))
        address_space = context.get_property_expression(
            resource, "address_space", props.get("address_space") or ["10.0.0.0/16"], _CIDR_LIST
        )
        body = [
            f"  name                = {name}",
            f"  resource_group_name = {context.get_resource_group_expression(resource)}",
            f"  location            = {context.get_location_expression(resource)}",
            f"  address_space       = {address_space}",
        ]
        dns_servers = props.get("dns_servers")
        if dns_servers:
            body.append(f"  dns_servers         = {format_hcl_value(dns_servers)}")
        body.extend(_tags(context))

        context.add_output(
            TerraformOutput(
                name=f"{resource.terraform_name}_id",
                value=context.get_attribute_reference(resource.instance_id, "id"),
                description=f"ID of virtual network {resource.terraform_name}",
            )
        )
        return [
            _resource_block(
                "azurerm_virtual_network", resource, body, _dependencies(resource, context)
            )
        ]


class SubnetGenerator(HclGenerator):
    def generate(
        self, resource: ResourceInstance, context: HclGenerationContext
    ) -> list[HclBlock]:
        props = resource.properties
        name = context.get_property_expression(resource, "name", props.get("name"))
        prefixes = context.get_property_expression(
            resource,
            "address_prefixes",
            props.get("address_prefixes") or ["10.0.1.0/24"],
            _CIDR_LIST,
        )

        vnet_id = resource.references.get("virtual_network_name")
        if vnet_id:
            vnet_name = context.get_attribute_reference(vnet_id, "name")
        else:
            vnet_name = quote("<vnet-name>")

        body = [
            f"  name                 = {name}",
            f"  resource_group_name  = {context.get_resource_group_expression(resource)}",
            f"  virtual_network_name = {vnet_name}",
            f"  address_prefixes     = {prefixes}",
        ]
        endpoints = props.get("service_endpoints")
        if endpoints:
            body.append(f"  service_endpoints    = {format_hcl_value(endpoints)}")
        depends_on = _dependencies(resource, context, "virtual_network_name")
        return [_resource_block("azurerm_subnet", resource, body, depends_on)]


class NetworkSecurityGroupGenerator(HclGenerator):
    def generate(
        self, resource: ResourceInstance, context: HclGenerationContext
    ) -> list[HclBlock]:
        props = resource.properties
        name = context.get_property_expression(resource, "name", props.get("name"))
        body = [
            f"  name                = {name}",
            f"  resource_group_name = {context.get_resource_group_expression(resource)}",
            f"  location            = {context.get_location_expression(resource)}",
        ]
        for rule in props.get("security_rules") or []:
            body.extend(["", "  security_rule {"])
            for field in _SECURITY_RULE_FIELDS:
                value = rule.get(field, _SECURITY_RULE_DEFAULTS.get(field))
                body.append(f"    {field:<26} = {format_hcl_value(value)}")
            body.append("  }")
        body.extend(_tags(context))
        return [
            _resource_block(
                "azurerm_network_security_group", resource, body, _dependencies(resource, context)
            )
        ]


class SubnetNsgAssociationGenerator(BindingHclGenerator):
    """Associates a network security group with a subnet."""

    source_type = NETWORK_SECURITY_GROUP_TYPE
    target_type = SUBNET_TYPE

    def generate(
        self,
        source: ResourceInstance,
        target: ResourceInstance,
        context: HclGenerationContext,
        source_attribute: str,
    ) -> list[HclBlock]:
        subnet_id = context.get_attribute_reference(target.instance_id, "id")
        nsg_attr = context.get_attribute_reference(source.instance_id, source_attribute)
        depends_on = tuple(
            addr
            for addr in (
                context.get_terraform_address(target.instance_id),
                context.get_terraform_address(source.instance_id),
            )
            if addr is not None
        )

        terraform_type = "azurerm_subnet_network_security_group_association"
        name = f"{target.terraform_name}_{source.terraform_name}"
        content = "\n".join(
            [
                f'resource "{terraform_type}" "{name}" {{',
                f"  subnet_id                 = {subnet_id}",
                f"  network_security_group_id = {nsg_attr}",
                "}",
            ]
        )
        return [
            HclBlock(
                block_type=BlockType.RESOURCE,
                terraform_type=terraform_type,
                name=name,
                content=content,
                depends_on=depends_on,
            )
        ]

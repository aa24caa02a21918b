"""Network topology checks: subnet containment and sibling overlap."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tfstudio.networking.cidr import cidr_contains, cidrs_overlap, is_valid_cidr
from tfstudio.validation.types import TopologyError, ValidationIssue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tfstudio.validation.types import TopologyNode

SUBNET_TYPE = "azurerm/networking/subnet"


def _first_cidr(node: TopologyNode, key: str) -> str | None:
    # Only the first entry of a multi-CIDR list is inspected.
    values: Any = node.properties.get(key)
    if isinstance(values, list | tuple) and values and isinstance(values[0], str):
        return values[0]
    return None


def validate_network_topology(
    nodes: Sequence[TopologyNode],
    *,
    subnet_type: str = SUBNET_TYPE,
    address_space_key: str = "address_space",
    address_prefixes_key: str = "address_prefixes",
) -> list[TopologyError]:
    """Validate subnets against their container network and their siblings.

    A subnet CIDR outside its parent's address space is an error. A subnet
    overlapping a sibling gets a single warning, naming the first sibling it
    collides with. Subnets without a parent, or without a valid CIDR, are
    not checked.
    """
    by_parent: dict[str, list[TopologyNode]] = {}
    for node in nodes:
        if node.type == subnet_type and node.parent_id:
            by_parent.setdefault(node.parent_id, []).append(node)

    nodes_by_id = {n.id: n for n in nodes}
    results: list[TopologyError] = []

    for parent_id, subnets in by_parent.items():
        parent = nodes_by_id.get(parent_id)
        if parent is None:
            continue
        parent_cidr = _first_cidr(parent, address_space_key)

        for subnet in subnets:
            subnet_cidr = _first_cidr(subnet, address_prefixes_key)
            if subnet_cidr is None or not is_valid_cidr(subnet_cidr):
                continue

            issues: list[ValidationIssue] = []
            if (
                parent_cidr is not None
                and is_valid_cidr(parent_cidr)
                and not cidr_contains(parent_cidr, subnet_cidr)
            ):
                issues.append(
                    ValidationIssue(
                        property_key=address_prefixes_key,
                        message=(
                            f"Subnet CIDR {subnet_cidr} is outside VNet address space "
                            f"{parent_cidr}"
                        ),
                    )
                )

            for sibling in subnets:
                if sibling.id == subnet.id:
                    continue
                sibling_cidr = _first_cidr(sibling, address_prefixes_key)
                if sibling_cidr is None or not is_valid_cidr(sibling_cidr):
                    continue
                if cidrs_overlap(subnet_cidr, sibling_cidr):
                    issues.append(
                        ValidationIssue(
                            property_key=address_prefixes_key,
                            message=(
                                f"Subnet CIDR {subnet_cidr} overlaps with sibling subnet "
                                f"{sibling.label or sibling.id} ({sibling_cidr})"
                            ),
                            severity="warning",
                        )
                    )
                    break

            if issues:
                results.append(TopologyError(instance_id=subnet.id, errors=issues))

    return results

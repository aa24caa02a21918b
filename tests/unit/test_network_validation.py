from __future__ import annotations

from typing import Any

from tfstudio.validation import TopologyNode, validate_network_topology
from tfstudio.validation.network import SUBNET_TYPE

_VNET_TYPE = "azurerm/networking/virtual_network"


def _vnet(node_id: str = "vnet", *cidrs: str) -> TopologyNode:
    return TopologyNode(
        id=node_id,
        type=_VNET_TYPE,
        properties={"address_space": list(cidrs or ("10.0.0.0/16",))},
    )


def _subnet(
    node_id: str, cidr: Any, parent_id: str | None = "vnet", **kwargs: Any
) -> TopologyNode:
    properties = {"address_prefixes": [cidr]} if cidr is not None else {}
    return TopologyNode(
        id=node_id, type=SUBNET_TYPE, parent_id=parent_id, properties=properties, **kwargs
    )


def test_valid_topology() -> None:
    nodes = [_vnet(), _subnet("a", "10.0.1.0/24"), _subnet("b", "10.0.2.0/24")]
    assert validate_network_topology(nodes) == []


def test_subnet_outside_address_space() -> None:
    nodes = [_vnet(), _subnet("a", "10.1.0.0/24")]

    [error] = validate_network_topology(nodes)

    assert error.instance_id == "a"
    assert error.has_errors
    [issue] = error.errors
    assert issue.property_key == "address_prefixes"
    assert issue.severity == "error"
    assert issue.message == "Subnet CIDR 10.1.0.0/24 is outside VNet address space 10.0.0.0/16"


def test_sibling_overlap_is_a_warning_on_both() -> None:
    nodes = [
        _vnet(),
        _subnet("a", "10.0.0.0/23", label="web"),
        _subnet("b", "10.0.1.0/24", label="app"),
    ]

    errors = validate_network_topology(nodes)

    assert [e.instance_id for e in errors] == ["a", "b"]
    assert not any(e.has_errors for e in errors)
    assert errors[0].errors[0].severity == "warning"
    assert errors[0].errors[0].message == (
        "Subnet CIDR 10.0.0.0/23 overlaps with sibling subnet app (10.0.1.0/24)"
    )
    assert errors[1].errors[0].message == (
        "Subnet CIDR 10.0.1.0/24 overlaps with sibling subnet web (10.0.0.0/23)"
    )


def test_one_overlap_warning_per_subnet() -> None:
    nodes = [
        _vnet(),
        _subnet("a", "10.0.0.0/22"),
        _subnet("b", "10.0.1.0/24"),
        _subnet("c", "10.0.2.0/24"),
    ]

    errors = {e.instance_id: e for e in validate_network_topology(nodes)}

    assert len(errors["a"].errors) == 1
    assert errors["a"].errors[0].message.endswith("sibling subnet b (10.0.1.0/24)")


def test_outside_and_overlap_reported_together() -> None:
    nodes = [_vnet(), _subnet("a", "10.1.0.0/24"), _subnet("b", "10.1.0.0/25")]

    errors = {e.instance_id: e for e in validate_network_topology(nodes)}

    assert [i.severity for i in errors["a"].errors] == ["error", "warning"]


def test_subnets_in_different_vnets_do_not_overlap() -> None:
    nodes = [
        _vnet("v1"),
        _vnet("v2"),
        _subnet("a", "10.0.1.0/24", parent_id="v1"),
        _subnet("b", "10.0.1.0/24", parent_id="v2"),
    ]
    assert validate_network_topology(nodes) == []


def test_only_first_cidr_is_checked() -> None:
    nodes = [
        _vnet("vnet", "10.0.0.0/16", "192.168.0.0/16"),
        _subnet("a", "192.168.1.0/24"),
    ]
    [error] = validate_network_topology(nodes)
    assert "outside VNet address space 10.0.0.0/16" in error.errors[0].message


def test_skipped_subnets() -> None:
    nodes = [
        _vnet(),
        _subnet("orphan", "10.9.0.0/24", parent_id=None),
        _subnet("missing-parent", "10.9.0.0/24", parent_id="ghost"),
        _subnet("no-cidr", None),
        _subnet("bad-cidr", "10.0.0.0/99"),
        TopologyNode(
            id="not-a-list",
            type=SUBNET_TYPE,
            parent_id="vnet",
            properties={"address_prefixes": "10.9.0.0/24"},
        ),
    ]
    assert validate_network_topology(nodes) == []


def test_parent_without_valid_space_only_checks_overlap() -> None:
    parent = TopologyNode(id="vnet", type=_VNET_TYPE, properties={"address_space": ["bogus"]})
    nodes = [parent, _subnet("a", "10.0.0.0/24"), _subnet("b", "10.0.0.0/24")]

    errors = validate_network_topology(nodes)

    assert [e.instance_id for e in errors] == ["a", "b"]
    assert all(i.severity == "warning" for e in errors for i in e.errors)


def test_custom_keys_and_type() -> None:
    nodes = [
        TopologyNode(id="vpc", type="aws/vpc", properties={"cidr_blocks": ["10.0.0.0/16"]}),
        TopologyNode(
            id="s", type="aws/subnet", parent_id="vpc", properties={"cidrs": ["172.16.0.0/24"]}
        ),
    ]
    [error] = validate_network_topology(
        nodes,
        subnet_type="aws/subnet",
        address_space_key="cidr_blocks",
        address_prefixes_key="cidrs",
    )
    assert error.errors[0].property_key == "cidrs"

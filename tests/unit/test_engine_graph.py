from __future__ import annotations

import pytest

from tfstudio.engine.errors import DependencyCycleError
from tfstudio.engine.graph import DependencyGraph
from tfstudio.engine.types import BlockType, HclBlock


def _block(name: str, *depends_on: str, terraform_type: str = "t") -> HclBlock:
    return HclBlock(
        block_type=BlockType.RESOURCE,
        terraform_type=terraform_type,
        name=name,
        content=f'resource "{terraform_type}" "{name}" {{}}',
        depends_on=depends_on,
    )


def _names(blocks: list[HclBlock]) -> list[str]:
    return [b.name for b in blocks]


def test_independent_blocks_keep_input_order() -> None:
    blocks = [_block("c"), _block("a"), _block("b")]
    assert _names(DependencyGraph(blocks).topological_sort()) == ["c", "a", "b"]


def test_dependency_comes_first() -> None:
    blocks = [_block("subnet", "t.vnet"), _block("vnet", "t.rg"), _block("rg")]
    assert _names(DependencyGraph(blocks).topological_sort()) == ["rg", "vnet", "subnet"]


def test_ready_blocks_follow_input_order() -> None:
    blocks = [_block("b", "t.root"), _block("root"), _block("a", "t.root")]
    assert _names(DependencyGraph(blocks).topological_sort()) == ["root", "b", "a"]


def test_unknown_dependency_is_ignored() -> None:
    blocks = [_block("a", "azurerm_thing.elsewhere"), _block("b")]
    assert _names(DependencyGraph(blocks).topological_sort()) == ["a", "b"]


def test_blocks_without_address_are_kept() -> None:
    locals_block = HclBlock(
        block_type=BlockType.LOCALS, terraform_type="", name="", content="locals {}"
    )
    sorted_blocks = DependencyGraph([locals_block, _block("a")]).topological_sort()
    assert sorted_blocks[0] is locals_block
    assert locals_block.address is None


def test_cycle_raises_with_remaining_addresses() -> None:
    blocks = [_block("free"), _block("a", "t.b"), _block("b", "t.a")]
    with pytest.raises(DependencyCycleError) as exc_info:
        DependencyGraph(blocks).topological_sort()

    assert exc_info.value.addresses == ["t.a", "t.b"]
    assert "Circular dependency" in str(exc_info.value)


def test_self_dependency_is_a_cycle() -> None:
    with pytest.raises(DependencyCycleError):
        DependencyGraph([_block("a", "t.a")]).topological_sort()


def test_empty_graph() -> None:
    assert DependencyGraph([]).topological_sort() == []

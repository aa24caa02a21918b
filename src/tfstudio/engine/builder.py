"""Assemble sorted blocks and rendered sections into output files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tfstudio.engine.types import (
    LOCALS_FILE,
    MAIN_FILE,
    OUTPUTS_FILE,
    PROVIDERS_FILE,
    TERRAFORM_FILE,
    VARIABLES_FILE,
    BlockType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tfstudio.engine.types import GeneratedFiles, HclBlock


def _join(*parts: str) -> str:
    return "\n\n".join(p for p in parts if p)


class HclBlockBuilder:
    def assemble(
        self,
        sorted_blocks: Iterable[HclBlock],
        *,
        terraform_block: str,
        provider_blocks: str,
        variables_hcl: str,
        outputs_hcl: str,
        locals_hcl: str,
    ) -> GeneratedFiles:
        """Route blocks to files, keeping their sorted order within each file."""
        by_type: dict[BlockType, list[str]] = {t: [] for t in BlockType}
        main: list[str] = []
        for block in sorted_blocks:
            if block.block_type in (BlockType.RESOURCE, BlockType.DATA):
                main.append(block.content)
            else:
                by_type[block.block_type].append(block.content)

        return {
            TERRAFORM_FILE: terraform_block,
            PROVIDERS_FILE: provider_blocks,
            MAIN_FILE: _join(*main),
            VARIABLES_FILE: _join(variables_hcl, *by_type[BlockType.VARIABLE]),
            OUTPUTS_FILE: _join(outputs_hcl, *by_type[BlockType.OUTPUT]),
            LOCALS_FILE: _join(locals_hcl, *by_type[BlockType.LOCALS]),
        }

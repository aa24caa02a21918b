"""Dependency ordering of generated HCL blocks."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from tfstudio.engine.errors import DependencyCycleError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tfstudio.engine.types import HclBlock


class DependencyGraph:
    """Blocks linked by their ``depends_on`` addresses.

    Addresses that do not resolve to a block in the graph are dropped; they
    usually point at something outside the generated set.
    """

    def __init__(self, blocks: Iterable[HclBlock]) -> None:
        self._blocks = list(blocks)

        by_address: dict[str, int] = {}
        for i, block in enumerate(self._blocks):
            address = block.address
            if address is not None:
                by_address[address] = i

        # block index -> indices of the blocks it depends on
        self._deps: list[set[int]] = []
        for i, block in enumerate(self._blocks):
            deps = {by_address[a] for a in block.depends_on if a in by_address}
            self._deps.append(deps)

    def topological_sort(self) -> list[HclBlock]:
        """Return blocks with every dependency before its dependents.

        Ready blocks are emitted in their original list order.
        """
        indegree = [len(deps) for deps in self._deps]
        dependents: list[list[int]] = [[] for _ in self._blocks]
        for i, deps in enumerate(self._deps):
            for dep in sorted(deps):
                dependents[dep].append(i)

        queue = deque(i for i, deg in enumerate(indegree) if deg == 0)
        order: list[int] = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for child in dependents[current]:
                indegree[child] -= 1
                if indegree[child] == 0:
                    queue.append(child)

        if len(order) != len(self._blocks):
            emitted = set(order)
            remaining = [
                self._blocks[i].address or self._blocks[i].name
                for i in range(len(self._blocks))
                if i not in emitted
            ]
            raise DependencyCycleError(remaining)

        return [self._blocks[i] for i in order]

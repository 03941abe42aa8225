# src/flowguard/core/graph/chain.py
"""Execution-chain tracing.

Only execution edges (execution-out port -> execution-in port) take part.
The trace is a depth-first search from the start block that explores every
branch before giving up, so a conditional block whose first branch dead-ends
still counts when its second branch reaches the end block. Revisited blocks
are skipped rather than treated as failures, which keeps loops legal.
"""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from flowguard.core.graph.index import FlowIndex


@dataclass(frozen=True, slots=True)
class ChainTrace:
    """Result of tracing the execution chain from a start block to an end block.

    Attributes:
        complete: True if some execution path reaches the end block
        visited: Blocks in the order the search entered them
        broken_at: Last block entered when the search failed, None when complete
    """

    complete: bool
    visited: tuple[str, ...]
    broken_at: str | None = None


def trace_chain(start_id: str, end_id: str, index: FlowIndex) -> ChainTrace:
    """Trace execution edges from ``start_id`` looking for ``end_id``.

    The search stops as soon as the end block is entered. On failure,
    ``broken_at`` is the last block entered, i.e. the deepest point of the
    final branch attempted.

    Args:
        start_id: Start block id
        end_id: End block id
        index: Resolved flow

    Returns:
        ChainTrace with the visit order
    """
    graph = index.execution_graph()
    if start_id not in graph:
        return ChainTrace(complete=False, visited=())

    visited: list[str] = []
    # dfs_preorder_nodes is lazy; stopping early leaves the rest unexplored
    for node in nx.dfs_preorder_nodes(graph, source=start_id):
        visited.append(node)
        if node == end_id:
            return ChainTrace(complete=True, visited=tuple(visited))
    return ChainTrace(complete=False, visited=tuple(visited), broken_at=visited[-1])


def find_execution_cycles(index: FlowIndex) -> list[list[str]]:
    """Elementary cycles among execution edges, each rotated to start at its smallest block id.

    Returned in sorted order so repeated runs produce identical output.
    """
    graph = index.execution_graph()
    cycles = []
    for cycle in nx.simple_cycles(graph):
        pivot = cycle.index(min(cycle))
        cycles.append(cycle[pivot:] + cycle[:pivot])
    return sorted(cycles)

# src/flowguard/core/graph/reachability.py
"""Reachability over connections treated as undirected.

Used for orphan detection: a block is orphaned when no chain of connections
of any kind leads to it from a start block. Traversal only passes through
non-auxiliary blocks. Auxiliary blocks join the reachable set in a separate
refinement pass, and only when they are directly connected to a reachable
block, so a chain of auxiliary blocks hanging off one another is not
transitively rescued.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

import networkx as nx

from flowguard.contracts.enums import SentinelType
from flowguard.contracts.types import BlockID
from flowguard.core.graph.index import FlowIndex


def reachable_from(
    seed_ids: Iterable[str],
    index: FlowIndex,
    *,
    within: Callable[[str], bool] | None = None,
) -> frozenset[str]:
    """Blocks reachable from any seed, following edges in both directions.

    Iterative depth-first traversal with an explicit stack; every node is
    expanded at most once, so cycles terminate.

    Args:
        seed_ids: Starting blocks (ids not in the flow are ignored)
        index: Resolved flow
        within: Optional node filter; traversal never enters or passes
            through nodes for which it returns False

    Returns:
        Reachable block ids, seeds included
    """
    graph = index.graph if within is None else nx.subgraph_view(index.graph, filter_node=within)
    stack = [seed for seed in seed_ids if seed in graph]
    visited: set[str] = set()
    while stack:
        node = stack.pop()
        if node in visited:
            continue
        visited.add(node)
        stack.extend(n for n in nx.all_neighbors(graph, node) if n not in visited)
    return frozenset(visited)


@dataclass(frozen=True, slots=True)
class OrphanAnalysis:
    """Outcome of the reachability pass from the start blocks.

    Attributes:
        seeds: Start blocks used as traversal seeds
        reachable: Reachable blocks after the auxiliary refinement pass
        orphaned: Unreachable blocks, in flow order
    """

    seeds: tuple[BlockID, ...]
    reachable: frozenset[str]
    orphaned: tuple[BlockID, ...]


def find_orphans(index: FlowIndex) -> OrphanAnalysis:
    """Compute reachable and orphaned blocks, seeding from every start block.

    With no start block nothing is reachable and every block is orphaned.
    """
    seeds = tuple(index.sentinel_blocks(SentinelType.START))
    reachable = set(reachable_from(seeds, index, within=lambda node: not index.is_auxiliary(node)))

    # Refinement: auxiliary blocks directly attached to a reachable block
    attached = {block.id for block in index.blocks() if index.is_auxiliary(block.id) and index.neighbours(block.id) & reachable}
    reachable |= attached

    orphaned = tuple(block.id for block in index.blocks() if block.id not in reachable)
    return OrphanAnalysis(seeds=seeds, reachable=frozenset(reachable), orphaned=orphaned)

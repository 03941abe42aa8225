"""Graph views and traversals over a flow snapshot.

Public API:
- FlowIndex: resolved, read-only view of one snapshot
- reachable_from / find_orphans: undirected reachability for orphan detection
- trace_chain / find_execution_cycles: execution-edge traversal
"""

from flowguard.core.graph.chain import ChainTrace, find_execution_cycles, trace_chain
from flowguard.core.graph.index import FlowIndex, ResolvedConnection
from flowguard.core.graph.reachability import OrphanAnalysis, find_orphans, reachable_from

__all__ = [
    "ChainTrace",
    "FlowIndex",
    "OrphanAnalysis",
    "ResolvedConnection",
    "find_execution_cycles",
    "find_orphans",
    "reachable_from",
    "trace_chain",
]

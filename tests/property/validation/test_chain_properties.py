# tests/property/validation/test_chain_properties.py
"""Property-based tests for execution-chain tracing.

Properties:
1. The chain is complete exactly when a directed execution path exists
2. Tracing terminates and enters each block at most once, even with cycles
3. A failed trace reports the last block it entered
"""

from __future__ import annotations

import networkx as nx
from hypothesis import given

from flowguard.contracts import Flow
from flowguard.core.graph import FlowIndex, trace_chain
from tests.helpers.catalog import catalog_registry
from tests.property.settings import STANDARD_SETTINGS
from tests.strategies import execution_dags

_REGISTRY = catalog_registry()


class TestChainProperties:
    """Chain tracing agrees with plain path existence."""

    @given(flow=execution_dags())
    @STANDARD_SETTINGS
    def test_complete_iff_path_exists(self, flow: Flow) -> None:
        index = FlowIndex.build(flow, _REGISTRY)

        trace = trace_chain("start", "end", index)

        assert trace.complete == nx.has_path(index.execution_graph(), "start", "end")

    @given(flow=execution_dags(allow_cycles=True))
    @STANDARD_SETTINGS
    def test_tracing_terminates_with_cycles(self, flow: Flow) -> None:
        index = FlowIndex.build(flow, _REGISTRY)

        trace = trace_chain("start", "end", index)

        assert len(trace.visited) == len(set(trace.visited))
        assert len(trace.visited) <= len(index)
        assert trace.visited[0] == "start"

    @given(flow=execution_dags(allow_cycles=True))
    @STANDARD_SETTINGS
    def test_broken_at_is_last_visited(self, flow: Flow) -> None:
        trace = trace_chain("start", "end", FlowIndex.build(flow, _REGISTRY))

        if trace.complete:
            assert trace.broken_at is None
            assert trace.visited[-1] == "end"
        else:
            assert trace.broken_at == trace.visited[-1]
            assert "end" not in trace.visited

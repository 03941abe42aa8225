# src/flowguard/core/graph/index.py
"""FlowIndex: a read-only, resolved view of one flow snapshot.

Every analysis needs the same lookups (block by id, schema by block,
port definition by connection endpoint, connections per port). FlowIndex
computes them once per validation call and wraps the connections in a
NetworkX MultiDiGraph so traversals can use NetworkX primitives.

Graph structure:
    nodes: block ids (first occurrence wins when ids are duplicated),
           with ``block`` and ``schema`` attributes
    edges: one keyed edge per connection whose endpoints both exist,
           key = position in ``flow.connections``, ``connection``
           attribute holds the edge

Connection ids are not trusted to be unique: every per-connection lookup
is keyed by position, and repeated ids are listed in
``duplicate_connection_ids`` for the structural check.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import networkx as nx
from networkx import DiGraph, MultiDiGraph

from flowguard.contracts.enums import SentinelType
from flowguard.contracts.flow import Block, Connection, Flow
from flowguard.contracts.schema import BlockSchema, PortDefinition
from flowguard.contracts.types import BlockID, ConnectionID
from flowguard.core.registry import SchemaLookup


@dataclass(frozen=True, slots=True)
class ResolvedConnection:
    """A connection with both endpoint port definitions looked up (None when unresolvable)."""

    connection: Connection
    source_port: PortDefinition | None
    target_port: PortDefinition | None

    @property
    def is_execution(self) -> bool:
        """True for execution-out -> execution-in edges; these are the only edges the chain tracer follows."""
        return (
            self.source_port is not None
            and self.target_port is not None
            and self.source_port.is_execution_output
            and self.target_port.is_execution_input
        )


class FlowIndex:
    """Resolved lookups over a flow snapshot.

    Build with ``FlowIndex.build(flow, lookup)``. The schema lookup is
    consulted exactly once per distinct block type.
    """

    def __init__(
        self,
        flow: Flow,
        graph: MultiDiGraph[str],
        blocks: dict[BlockID, Block],
        schemas: dict[BlockID, BlockSchema | None],
        duplicate_ids: tuple[BlockID, ...],
        resolved: dict[int, ResolvedConnection],
        dangling: tuple[Connection, ...],
        duplicate_connection_ids: tuple[ConnectionID, ...] = (),
    ) -> None:
        self.flow = flow
        self.graph = graph
        self._blocks = blocks
        self._schemas = schemas
        self.duplicate_ids = duplicate_ids
        self.duplicate_connection_ids = duplicate_connection_ids
        self._resolved = resolved
        self.dangling = dangling
        self._incoming: dict[tuple[BlockID, str], list[int]] = {}
        self._outgoing: dict[tuple[BlockID, str], list[int]] = {}
        # position -> how many earlier connections share its target / source port
        self._input_rank: dict[int, int] = {}
        self._output_rank: dict[int, int] = {}
        for position, conn in enumerate(flow.connections):
            if position not in resolved:
                continue
            incoming = self._incoming.setdefault((conn.target_block_id, conn.target_port_id), [])
            outgoing = self._outgoing.setdefault((conn.source_block_id, conn.source_port_id), [])
            self._input_rank[position] = len(incoming)
            self._output_rank[position] = len(outgoing)
            incoming.append(position)
            outgoing.append(position)

    @classmethod
    def build(cls, flow: Flow, lookup: SchemaLookup) -> FlowIndex:
        """Resolve a flow snapshot against a schema lookup.

        Raises:
            SchemaLookupError: If the lookup itself fails (propagated unchanged)
        """
        graph: MultiDiGraph[str] = nx.MultiDiGraph()
        blocks: dict[BlockID, Block] = {}
        schemas: dict[BlockID, BlockSchema | None] = {}
        by_type: dict[str, BlockSchema | None] = {}
        duplicates: list[BlockID] = []

        for block in flow.blocks:
            if block.id in blocks:
                duplicates.append(block.id)
                continue
            if block.block_type not in by_type:
                by_type[block.block_type] = lookup.get_block_schema(block.block_type)
            schema = by_type[block.block_type]
            blocks[block.id] = block
            schemas[block.id] = schema
            graph.add_node(block.id, block=block, schema=schema)

        resolved: dict[int, ResolvedConnection] = {}
        dangling: list[Connection] = []
        seen_connection_ids: set[ConnectionID] = set()
        duplicate_connection_ids: dict[ConnectionID, None] = {}
        for position, conn in enumerate(flow.connections):
            if conn.id in seen_connection_ids:
                duplicate_connection_ids.setdefault(conn.id, None)
            seen_connection_ids.add(conn.id)
            if conn.source_block_id not in blocks or conn.target_block_id not in blocks:
                dangling.append(conn)
                continue
            source_schema = schemas[conn.source_block_id]
            target_schema = schemas[conn.target_block_id]
            resolved[position] = ResolvedConnection(
                connection=conn,
                source_port=source_schema.output_port(conn.source_port_id) if source_schema else None,
                target_port=target_schema.input_port(conn.target_port_id) if target_schema else None,
            )
            graph.add_edge(conn.source_block_id, conn.target_block_id, key=position, connection=conn)

        return cls(
            flow,
            graph,
            blocks,
            schemas,
            tuple(duplicates),
            resolved,
            tuple(dangling),
            tuple(duplicate_connection_ids),
        )

    # ----- blocks -------------------------------------------------------

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def blocks(self) -> Iterator[Block]:
        """Unique blocks in flow order."""
        return iter(self._blocks.values())

    def block(self, block_id: str) -> Block | None:
        return self._blocks.get(BlockID(block_id))

    def schema(self, block_id: str) -> BlockSchema | None:
        return self._schemas.get(BlockID(block_id))

    def is_core(self, block_id: str) -> bool:
        schema = self.schema(block_id)
        return schema is not None and schema.is_core

    def is_auxiliary(self, block_id: str) -> bool:
        schema = self.schema(block_id)
        return schema is not None and schema.is_auxiliary

    def sentinel_blocks(self, sentinel: SentinelType) -> list[BlockID]:
        """Ids of blocks whose schema carries the given sentinel, in flow order."""
        return [block_id for block_id, schema in self._schemas.items() if schema is not None and schema.sentinel == sentinel]

    # ----- connections --------------------------------------------------

    def resolved_connections(self) -> Iterator[ResolvedConnection]:
        """Connections whose endpoints both exist, in flow order."""
        return iter(self._resolved.values())

    def incoming(self, block_id: str, port_id: str) -> list[Connection]:
        """Connections arriving at an input port, in flow order."""
        return [self.flow.connections[p] for p in self._incoming.get((BlockID(block_id), port_id), ())]

    def outgoing(self, block_id: str, port_id: str) -> list[Connection]:
        """Connections leaving an output port, in flow order."""
        return [self.flow.connections[p] for p in self._outgoing.get((BlockID(block_id), port_id), ())]

    def port_ranks(self, position: int) -> tuple[int, int] | None:
        """Earlier connections on the same (input, output) ports as the connection at ``position``.

        None for a dangling connection or a position outside the flow.
        """
        if position not in self._resolved:
            return None
        return self._input_rank[position], self._output_rank[position]

    def has_incoming(self, block_id: str, port_id: str) -> bool:
        return bool(self._incoming.get((BlockID(block_id), port_id)))

    def has_outgoing(self, block_id: str, port_id: str) -> bool:
        return bool(self._outgoing.get((BlockID(block_id), port_id)))

    def neighbours(self, block_id: str) -> set[str]:
        """Blocks directly connected to ``block_id`` in either direction."""
        if block_id not in self.graph:
            return set()
        return {n for n in nx.all_neighbors(self.graph, block_id) if n != block_id}

    def execution_graph(self) -> DiGraph[str]:
        """Directed graph of execution edges only, over every block.

        Successor order follows connection order, so depth-first traversal
        explores branches in the order the editor created them.
        """
        graph: DiGraph[str] = nx.DiGraph()
        graph.add_nodes_from(self._blocks)
        graph.add_edges_from(
            (rc.connection.source_block_id, rc.connection.target_block_id) for rc in self._resolved.values() if rc.is_execution
        )
        return graph

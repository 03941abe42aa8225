"""Flow snapshot data model: blocks, connections and the flow itself.

These are read-only inputs to the validator. The editor builds them; the
validator never mutates them. Mappings are wrapped in MappingProxyType so
a snapshot shared between concurrent validation calls cannot be altered.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

from flowguard.contracts.types import BlockID, BlockTypeID, ConnectionID, PortID

PortConnections: TypeAlias = Mapping[PortID, tuple[ConnectionID, ...]]


def _freeze_ports(ports: Mapping[str, Iterable[str]] | None) -> PortConnections:
    if not ports:
        return MappingProxyType({})
    return MappingProxyType({PortID(port): tuple(ConnectionID(c) for c in ids) for port, ids in ports.items()})


def _freeze_mapping(values: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class Connection:
    """A directed edge from an output port of one block to an input port of another."""

    id: ConnectionID
    source_block_id: BlockID
    source_port_id: PortID
    target_block_id: BlockID
    target_port_id: PortID

    @property
    def is_self_loop(self) -> bool:
        return self.source_block_id == self.target_block_id


@dataclass(frozen=True, slots=True)
class Block:
    """A block instance placed in a flow.

    Ports are declared by the block type's schema, not by the instance. The
    instance only records which connections attach to which port, keeping
    inputs and outputs apart.

    Attributes:
        id: Unique identifier within the flow
        block_type: Block-type identifier resolved through the schema registry
        inputs: Input port id -> connection ids attached to it
        outputs: Output port id -> connection ids attached to it
        parameters: Parameter name -> configured value
    """

    id: BlockID
    block_type: BlockTypeID
    inputs: PortConnections = field(default_factory=lambda: MappingProxyType({}))
    outputs: PortConnections = field(default_factory=lambda: MappingProxyType({}))
    parameters: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Accept plain dicts from callers; store read-only views.
        object.__setattr__(self, "inputs", _freeze_ports(self.inputs))
        object.__setattr__(self, "outputs", _freeze_ports(self.outputs))
        object.__setattr__(self, "parameters", _freeze_mapping(self.parameters))

    def input_connections(self, port_id: str) -> tuple[ConnectionID, ...]:
        return self.inputs.get(PortID(port_id), ())

    def output_connections(self, port_id: str) -> tuple[ConnectionID, ...]:
        return self.outputs.get(PortID(port_id), ())

    def has_parameter(self, name: str) -> bool:
        """True when the parameter key is explicitly present on the instance."""
        return name in self.parameters


@dataclass(frozen=True, slots=True)
class Flow:
    """Immutable snapshot of a flow graph.

    Block order is the editor's order and is preserved in every report.
    Block ids are expected to be unique and connections are expected to
    reference blocks in this flow, but neither is enforced here: violations
    are validation findings, not construction failures.
    """

    blocks: tuple[Block, ...] = ()
    connections: tuple[Connection, ...] = ()
    name: str | None = None
    globals: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))
        object.__setattr__(self, "connections", tuple(self.connections))
        object.__setattr__(self, "globals", _freeze_mapping(self.globals))

    @property
    def block_ids(self) -> tuple[BlockID, ...]:
        return tuple(block.id for block in self.blocks)

    @classmethod
    def assemble(
        cls,
        blocks: Iterable[Block],
        connections: Iterable[Connection],
        *,
        name: str | None = None,
        globals: Mapping[str, Any] | None = None,
    ) -> Flow:
        """Build a flow whose per-block port maps are derived from the edge list.

        Any port maps already present on the given blocks are replaced.
        Connections are attached in edge-list order.

        Args:
            blocks: Block instances (their inputs/outputs are ignored)
            connections: Edge list
            name: Optional flow name
            globals: Optional flow-level global variables

        Returns:
            Flow with consistent block port maps
        """
        connections = tuple(connections)
        inputs: dict[str, dict[str, list[str]]] = {}
        outputs: dict[str, dict[str, list[str]]] = {}
        for conn in connections:
            outputs.setdefault(conn.source_block_id, {}).setdefault(conn.source_port_id, []).append(conn.id)
            inputs.setdefault(conn.target_block_id, {}).setdefault(conn.target_port_id, []).append(conn.id)

        rebuilt = tuple(
            Block(
                id=block.id,
                block_type=block.block_type,
                inputs=inputs.get(block.id, {}),
                outputs=outputs.get(block.id, {}),
                parameters=block.parameters,
            )
            for block in blocks
        )
        return cls(blocks=rebuilt, connections=connections, name=name, globals=globals or {})

"""Connection validation: one proposed edge, every existing edge, and export consistency.

Checks run in a fixed order and stop at the first failure:

1. Both block types resolve to schemas
2. The source port is an output and the target port an input of those schemas
3. Source and target are different blocks
4. The port kinds are compatible (a cross-family match is a CONVERSION warning)
5. Neither port is over its connection limit

Input ports accept ``settings.default_input_connection_limit`` connections
unless their definition sets ``max_connections``; output ports are
unbounded unless their definition sets it.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowguard.contracts.enums import CompatibilityLevel, ValidationCode
from flowguard.contracts.flow import Block, Connection, Flow
from flowguard.contracts.report import ConnectionValidationResult, ValidationIssue
from flowguard.contracts.schema import BlockSchema, PortDefinition
from flowguard.core.config import ValidatorSettings
from flowguard.core.graph.index import FlowIndex
from flowguard.core.ports import PortCompatibilityTable
from flowguard.core.registry import SchemaLookup
from flowguard.validation.findings import error, warning


@dataclass(frozen=True, slots=True)
class InvalidConnection:
    """A connection rejected by bulk validation, with the reason."""

    connection: Connection
    issue: ValidationIssue


@dataclass(frozen=True, slots=True)
class BulkConnectionResult:
    """Every connection of a flow partitioned into valid and invalid.

    ``warnings`` holds conversion warnings for connections that are valid.
    """

    valid: tuple[Connection, ...]
    invalid: tuple[InvalidConnection, ...]
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return tuple(item.issue for item in self.invalid)


@dataclass(frozen=True, slots=True)
class ExportConsistencyResult:
    """Whether every connection still points at blocks present in the flow.

    Attributes:
        valid: True when no connection references a missing block
        orphaned_connections: Connections with at least one missing endpoint
        missing_block_ids: Referenced but absent block ids, first-seen order
        errors: One MISSING_SOURCE_BLOCK / MISSING_TARGET_BLOCK per missing endpoint
        warnings: A single MISSING_BLOCKS summary when any block is missing
    """

    valid: bool
    orphaned_connections: tuple[Connection, ...]
    missing_block_ids: tuple[str, ...]
    errors: tuple[ValidationIssue, ...]
    warnings: tuple[ValidationIssue, ...] = ()


def _port_label(schema: BlockSchema, port: PortDefinition) -> str:
    return f"{schema.display_name}.{port.display_name}"


class ConnectionValidator:
    """Validates connections against block schemas and the port compatibility table.

    Args:
        lookup: Schema lookup used to resolve block types
        port_table: Compatibility rules (defaults to the built-in table)
        settings: Validator policy (defaults to ValidatorSettings())
    """

    def __init__(
        self,
        lookup: SchemaLookup,
        port_table: PortCompatibilityTable | None = None,
        settings: ValidatorSettings | None = None,
    ) -> None:
        self._lookup = lookup
        self._ports = port_table if port_table is not None else PortCompatibilityTable()
        self._settings = settings if settings is not None else ValidatorSettings()

    def input_limit(self, port: PortDefinition) -> int:
        return port.max_connections if port.max_connections is not None else self._settings.default_input_connection_limit

    def validate(
        self,
        source_block: Block,
        source_port_id: str,
        target_block: Block,
        target_port_id: str,
    ) -> ConnectionValidationResult:
        """Check a proposed connection before it is committed.

        Cardinality is measured against the connections already recorded in
        the blocks' port maps, so the proposal itself is not yet counted.
        """
        return self._evaluate(
            source_block,
            self._lookup.get_block_schema(source_block.block_type),
            source_port_id,
            target_block,
            self._lookup.get_block_schema(target_block.block_type),
            target_port_id,
            occupied_inputs=len(target_block.input_connections(target_port_id)),
            occupied_outputs=len(source_block.output_connections(source_port_id)),
            connection_id=None,
        )

    def validate_existing(
        self,
        connection: Connection,
        index: FlowIndex,
        *,
        position: int | None = None,
    ) -> ConnectionValidationResult:
        """Check a connection that is already part of the flow.

        A port is over its limit when this connection comes after the first
        ``limit`` connections on it, in flow order. ``position`` is the
        connection's index in ``flow.connections``; when omitted it is found
        by identity. A connection that is not part of the flow is checked as
        if appended to it.
        """
        source_block = index.block(connection.source_block_id)
        target_block = index.block(connection.target_block_id)
        if source_block is None or target_block is None:
            return ConnectionValidationResult(
                valid=False,
                compatibility=CompatibilityLevel.INCOMPATIBLE,
                error=self._missing_block_issue(connection, source_missing=source_block is None),
            )
        if position is None:
            position = next((n for n, c in enumerate(index.flow.connections) if c is connection), None)
        ranks = index.port_ranks(position) if position is not None else None
        if ranks is None:
            ranks = (
                len(index.incoming(target_block.id, connection.target_port_id)),
                len(index.outgoing(source_block.id, connection.source_port_id)),
            )
        occupied_inputs, occupied_outputs = ranks
        return self._evaluate(
            source_block,
            index.schema(source_block.id),
            connection.source_port_id,
            target_block,
            index.schema(target_block.id),
            connection.target_port_id,
            occupied_inputs=occupied_inputs,
            occupied_outputs=occupied_outputs,
            connection_id=connection.id,
        )

    def validate_all(self, index: FlowIndex) -> BulkConnectionResult:
        """Validate every connection of the indexed flow, in flow order.

        A connection with a missing endpoint is invalid with the source side
        reported first; the remaining checks never run for it.
        """
        valid: list[Connection] = []
        invalid: list[InvalidConnection] = []
        warnings: list[ValidationIssue] = []
        for position, connection in enumerate(index.flow.connections):
            result = self.validate_existing(connection, index, position=position)
            if result.valid:
                valid.append(connection)
                if result.warning is not None:
                    warnings.append(result.warning)
            else:
                assert result.error is not None
                invalid.append(InvalidConnection(connection, result.error))
        return BulkConnectionResult(valid=tuple(valid), invalid=tuple(invalid), warnings=tuple(warnings))

    def validate_export_consistency(self, flow: Flow) -> ExportConsistencyResult:
        """Find connections whose endpoints no longer exist in the block list."""
        block_ids = {block.id for block in flow.blocks}
        orphaned: list[Connection] = []
        missing: dict[str, None] = {}
        errors: list[ValidationIssue] = []
        for connection in flow.connections:
            source_missing = connection.source_block_id not in block_ids
            target_missing = connection.target_block_id not in block_ids
            if source_missing:
                missing.setdefault(connection.source_block_id, None)
                errors.append(self._missing_block_issue(connection, source_missing=True))
            if target_missing:
                missing.setdefault(connection.target_block_id, None)
                errors.append(self._missing_block_issue(connection, source_missing=False))
            if source_missing or target_missing:
                orphaned.append(connection)
        warnings: tuple[ValidationIssue, ...] = ()
        if missing:
            warnings = (
                warning(
                    ValidationCode.MISSING_BLOCKS,
                    f"Missing blocks: {', '.join(missing)}",
                    missing_block_ids=list(missing),
                    orphaned_connections=len(orphaned),
                ),
            )
        return ExportConsistencyResult(
            valid=not orphaned,
            orphaned_connections=tuple(orphaned),
            missing_block_ids=tuple(missing),
            errors=tuple(errors),
            warnings=warnings,
        )

    @staticmethod
    def _missing_block_issue(connection: Connection, *, source_missing: bool) -> ValidationIssue:
        if source_missing:
            return error(
                ValidationCode.MISSING_SOURCE_BLOCK,
                f"Connection '{connection.id}' starts at missing block '{connection.source_block_id}'",
                connection_id=connection.id,
                missing_block_id=connection.source_block_id,
            )
        return error(
            ValidationCode.MISSING_TARGET_BLOCK,
            f"Connection '{connection.id}' ends at missing block '{connection.target_block_id}'",
            connection_id=connection.id,
            missing_block_id=connection.target_block_id,
        )

    def _evaluate(
        self,
        source_block: Block,
        source_schema: BlockSchema | None,
        source_port_id: str,
        target_block: Block,
        target_schema: BlockSchema | None,
        target_port_id: str,
        *,
        occupied_inputs: int,
        occupied_outputs: int,
        connection_id: str | None,
    ) -> ConnectionValidationResult:
        def fail(issue: ValidationIssue) -> ConnectionValidationResult:
            return ConnectionValidationResult(valid=False, compatibility=CompatibilityLevel.INCOMPATIBLE, error=issue)

        for block, schema in ((source_block, source_schema), (target_block, target_schema)):
            if schema is None:
                return fail(
                    error(
                        ValidationCode.UNRESOLVED_BLOCK_DEFINITION,
                        f"Cannot check connection: block '{block.id}' has unknown type '{block.block_type}'",
                        block_id=block.id,
                        connection_id=connection_id,
                        block_type=block.block_type,
                    )
                )
        assert source_schema is not None and target_schema is not None

        source_port = source_schema.output_port(source_port_id)
        if source_port is None:
            return fail(
                error(
                    ValidationCode.MISSING_SOURCE_PORT,
                    f"Block type '{source_schema.id}' has no output port '{source_port_id}'",
                    block_id=source_block.id,
                    connection_id=connection_id,
                    port_id=source_port_id,
                )
            )
        target_port = target_schema.input_port(target_port_id)
        if target_port is None:
            return fail(
                error(
                    ValidationCode.MISSING_TARGET_PORT,
                    f"Block type '{target_schema.id}' has no input port '{target_port_id}'",
                    block_id=target_block.id,
                    connection_id=connection_id,
                    port_id=target_port_id,
                )
            )

        if source_block.id == target_block.id:
            return fail(
                error(
                    ValidationCode.SELF_CONNECTION,
                    f"Block '{source_block.id}' cannot connect to itself",
                    block_id=source_block.id,
                    connection_id=connection_id,
                )
            )

        level = self._ports.compatibility(source_port.kinds, target_port.kinds)
        if level == CompatibilityLevel.INCOMPATIBLE:
            return fail(
                error(
                    ValidationCode.PORT_TYPE_MISMATCH,
                    f"Incompatible port types: {_port_label(source_schema, source_port)} {list(source_port.kinds)} "
                    f"-> {_port_label(target_schema, target_port)} {list(target_port.kinds)}",
                    block_id=target_block.id,
                    connection_id=connection_id,
                    source_kinds=list(source_port.kinds),
                    target_kinds=list(target_port.kinds),
                )
            )

        input_limit = self.input_limit(target_port)
        if occupied_inputs >= input_limit:
            return fail(
                error(
                    ValidationCode.TOO_MANY_CONNECTIONS,
                    f"Input port '{target_port.display_name}' on block '{target_block.id}' accepts at most {input_limit} connection(s)",
                    block_id=target_block.id,
                    connection_id=connection_id,
                    port_id=target_port.id,
                    limit=input_limit,
                )
            )
        if source_port.max_connections is not None and occupied_outputs >= source_port.max_connections:
            return fail(
                error(
                    ValidationCode.TOO_MANY_CONNECTIONS,
                    f"Output port '{source_port.display_name}' on block '{source_block.id}' "
                    f"accepts at most {source_port.max_connections} connection(s)",
                    block_id=source_block.id,
                    connection_id=connection_id,
                    port_id=source_port.id,
                    limit=source_port.max_connections,
                )
            )

        if level == CompatibilityLevel.CONVERSION:
            return ConnectionValidationResult(
                valid=True,
                compatibility=level,
                warning=warning(
                    ValidationCode.PORT_CONVERSION,
                    f"Type conversion: {_port_label(source_schema, source_port)} -> {_port_label(target_schema, target_port)}",
                    block_id=target_block.id,
                    connection_id=connection_id,
                    source_kinds=list(source_port.kinds),
                    target_kinds=list(target_port.kinds),
                ),
            )
        return ConnectionValidationResult(valid=True, compatibility=level)


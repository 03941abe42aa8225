"""Category-specific structural rules for blocks.

Core blocks carry the execution chain, so each must expose an execution
port: an execution output on the start block, an execution input on the end
block, and at least one execution port of either direction elsewhere.
Auxiliary blocks must expose no execution port at all, and should be wired
directly to at least one core block.

Blocks without a schema are skipped; the aggregator reports them.
"""

from __future__ import annotations

from flowguard.contracts.enums import SentinelType, ValidationCode
from flowguard.contracts.flow import Block
from flowguard.contracts.schema import BlockSchema
from flowguard.core.graph.index import FlowIndex
from flowguard.validation.findings import Findings, error, warning


class BlockArchitectureValidator:
    """Enforces core/auxiliary structural rules over a whole flow."""

    def validate(self, index: FlowIndex) -> Findings:
        findings = Findings()
        for block in index.blocks():
            schema = index.schema(block.id)
            if schema is None:
                continue
            if schema.is_core:
                self._check_core(block, schema, findings)
            elif schema.is_auxiliary:
                self._check_auxiliary(block, schema, index, findings)
        return findings

    def _check_core(self, block: Block, schema: BlockSchema, findings: Findings) -> None:
        if schema.sentinel == SentinelType.START:
            if not schema.has_execution_output:
                findings.add(
                    error(
                        ValidationCode.INVALID_BLOCK_TYPE,
                        f"Start block '{schema.display_name}' must expose an execution output",
                        block_id=block.id,
                        block_type=schema.id,
                    )
                )
        elif schema.sentinel == SentinelType.END:
            if not schema.has_execution_input:
                findings.add(
                    error(
                        ValidationCode.INVALID_BLOCK_TYPE,
                        f"End block '{schema.display_name}' must expose an execution input",
                        block_id=block.id,
                        block_type=schema.id,
                    )
                )
        elif not schema.execution_ports:
            findings.add(
                error(
                    ValidationCode.INVALID_BLOCK_TYPE,
                    f"Core block '{schema.display_name}' must expose at least one execution port",
                    block_id=block.id,
                    block_type=schema.id,
                )
            )

    def _check_auxiliary(self, block: Block, schema: BlockSchema, index: FlowIndex, findings: Findings) -> None:
        execution_ports = schema.execution_ports
        if execution_ports:
            findings.add(
                error(
                    ValidationCode.AUXILIARY_EXECUTION_PORT,
                    f"Auxiliary block '{schema.display_name}' must not expose execution ports",
                    block_id=block.id,
                    block_type=schema.id,
                    ports=[port.id for port in execution_ports],
                )
            )
        # Direct connections only
        if not any(index.is_core(neighbour) for neighbour in index.neighbours(block.id)):
            findings.add(
                warning(
                    ValidationCode.ISOLATED_AUXILIARY_BLOCK,
                    f"Auxiliary block '{schema.display_name}' is not connected to any core block",
                    block_id=block.id,
                )
            )

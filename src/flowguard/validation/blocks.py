"""Per-block validation: connection requirements plus parameters.

Connection requirements come from the schema's ConnectionRules bundle.
Block types that declare no bundle fall back to their ports' ``required``
flags. Variable-carrying ports are left to the variable checker in that
fallback, which owns "required variable port is unconnected".
"""

from __future__ import annotations

from flowguard.contracts.enums import ValidationCode
from flowguard.contracts.flow import Block
from flowguard.contracts.report import BlockValidationResult
from flowguard.contracts.schema import BlockSchema, ConnectionRules
from flowguard.core.graph.index import FlowIndex
from flowguard.validation.findings import Findings, error, warning
from flowguard.validation.parameters import ParameterValidator


class BlockValidator:
    """Validates one block instance against its schema.

    Args:
        parameters: Parameter validator to delegate to
    """

    def __init__(self, parameters: ParameterValidator | None = None) -> None:
        self._parameters = parameters if parameters is not None else ParameterValidator()

    def validate(self, block: Block, index: FlowIndex) -> BlockValidationResult:
        """Validate connections and parameters of ``block``.

        Blocks whose type has no schema yield an empty result; the aggregator
        reports the missing definition itself.
        """
        schema = index.schema(block.id)
        if schema is None:
            return BlockValidationResult(block_id=block.id)

        findings = Findings()
        rules = schema.rules.connections if schema.rules is not None else None
        if rules is not None:
            self._check_connection_rules(block, schema, rules, index, findings)
        else:
            self._check_required_ports(block, schema, index, findings)
        findings.merge(self._parameters.validate(block, schema, index))
        return BlockValidationResult(block_id=block.id, errors=tuple(findings.errors), warnings=tuple(findings.warnings))

    def _port_label(self, schema: BlockSchema, port_id: str, *, is_input: bool) -> str:
        port = schema.input_port(port_id) if is_input else schema.output_port(port_id)
        return port.display_name if port is not None else port_id

    def _check_connection_rules(
        self, block: Block, schema: BlockSchema, rules: ConnectionRules, index: FlowIndex, findings: Findings
    ) -> None:
        for port_id in rules.required_inputs:
            if not index.has_incoming(block.id, port_id):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_INPUT,
                        f"Required input '{self._port_label(schema, port_id, is_input=True)}' is not connected",
                        block_id=block.id,
                        port_id=port_id,
                    )
                )
        for port_id in rules.required_outputs:
            if not index.has_outgoing(block.id, port_id):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_OUTPUT,
                        f"Required output '{self._port_label(schema, port_id, is_input=False)}' is not connected",
                        block_id=block.id,
                        port_id=port_id,
                    )
                )
        for port_id in rules.recommended_inputs:
            if not index.has_incoming(block.id, port_id):
                findings.add(
                    warning(
                        ValidationCode.MISSING_RECOMMENDED_INPUT,
                        f"Connecting input '{self._port_label(schema, port_id, is_input=True)}' is recommended",
                        block_id=block.id,
                        port_id=port_id,
                    )
                )
        for port_id in rules.recommended_outputs:
            if not index.has_outgoing(block.id, port_id):
                findings.add(
                    warning(
                        ValidationCode.MISSING_RECOMMENDED_OUTPUT,
                        f"Connecting output '{self._port_label(schema, port_id, is_input=False)}' is recommended",
                        block_id=block.id,
                        port_id=port_id,
                    )
                )

    def _check_required_ports(self, block: Block, schema: BlockSchema, index: FlowIndex, findings: Findings) -> None:
        # Fallback for block types without a connection rule bundle
        for port in schema.inputs:
            if port.required and not port.carries_variable and not index.has_incoming(block.id, port.id):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_INPUT,
                        f"Required input '{port.display_name}' is not connected",
                        block_id=block.id,
                        port_id=port.id,
                    )
                )
        for port in schema.outputs:
            if port.required and not port.carries_variable and not index.has_outgoing(block.id, port.id):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_OUTPUT,
                        f"Required output '{port.display_name}' is not connected",
                        block_id=block.id,
                        port_id=port.id,
                    )
                )

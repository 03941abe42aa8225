"""Variable definition/use consistency.

Block types opt in through their schema's VariableBinding: DEFINES blocks
name a variable in one parameter, CONSUMES blocks reference one. A single
pass classifies every block, then the name-level checks run over the
collected maps:

- consumer references a name nobody defines     -> UNDEFINED_VARIABLE (error)
- consumer references nothing                   -> VARIABLE_CHAIN_BROKEN (warning)
- name defined by more than one block           -> VARIABLE_NAME_DUPLICATE (warning, once per name)
- name defined but never consumed               -> UNUSED_VARIABLE (warning, once per name)

Independently of names, a core block whose schema marks a variable-carrying
input port as required must have an incoming connection on that port.
"""

from __future__ import annotations

from typing import Any

from flowguard.contracts.enums import ValidationCode, VariableRole
from flowguard.contracts.flow import Block
from flowguard.contracts.schema import BlockSchema
from flowguard.core.graph.index import FlowIndex
from flowguard.validation.findings import Findings, error, warning


def _variable_name(block: Block, schema: BlockSchema, parameter: str) -> str | None:
    if block.has_parameter(parameter):
        value: Any = block.parameters[parameter]
    else:
        declared = schema.parameter(parameter)
        value = declared.default if declared is not None else None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class VariableConsistencyChecker:
    """Cross-references variable definers and consumers across a flow."""

    def validate(self, index: FlowIndex) -> Findings:
        findings = Findings()
        definitions: dict[str, list[str]] = {}
        consumers: list[tuple[Block, str | None]] = []

        for block in index.blocks():
            schema = index.schema(block.id)
            if schema is None or schema.variable is None:
                continue
            name = _variable_name(block, schema, schema.variable.parameter)
            if schema.variable.role == VariableRole.DEFINES:
                if name is not None:
                    definitions.setdefault(name, []).append(block.id)
            else:
                consumers.append((block, name))

        for name, block_ids in definitions.items():
            if len(block_ids) > 1:
                findings.add(
                    warning(
                        ValidationCode.VARIABLE_NAME_DUPLICATE,
                        f"Variable '{name}' is defined by {len(block_ids)} blocks",
                        variable=name,
                        block_ids=list(block_ids),
                    )
                )

        available = sorted(definitions)
        used: set[str] = set()
        for block, name in consumers:
            if name is None:
                findings.add(
                    warning(
                        ValidationCode.VARIABLE_CHAIN_BROKEN,
                        f"Block '{block.id}' does not reference any variable",
                        block_id=block.id,
                    )
                )
                continue
            used.add(name)
            if name not in definitions:
                findings.add(
                    error(
                        ValidationCode.UNDEFINED_VARIABLE,
                        f"Block '{block.id}' references undefined variable '{name}'",
                        block_id=block.id,
                        variable=name,
                        available=available,
                    )
                )

        for name, block_ids in definitions.items():
            if name not in used:
                findings.add(
                    warning(
                        ValidationCode.UNUSED_VARIABLE,
                        f"Variable '{name}' is defined but never used",
                        block_id=block_ids[0],
                        variable=name,
                        block_ids=list(block_ids),
                    )
                )

        self._check_required_variable_ports(index, findings)
        return findings

    def _check_required_variable_ports(self, index: FlowIndex, findings: Findings) -> None:
        for block in index.blocks():
            schema = index.schema(block.id)
            if schema is None or not schema.is_core:
                continue
            for port in schema.inputs:
                if port.required and port.carries_variable and not index.has_incoming(block.id, port.id):
                    findings.add(
                        error(
                            ValidationCode.REQUIRED_PORT_UNCONNECTED,
                            f"Core block '{schema.display_name}' requires a connection on '{port.display_name}'",
                            block_id=block.id,
                            port_id=port.id,
                        )
                    )

"""Declarative parameter validation.

Driven entirely by the block type's ParameterRules. Block types without a
parameter rule bundle fall back to the ``required`` flags on their declared
parameters; there is no per-type hand-written logic.

Parameter values resolve to the instance value when the key is present,
else the declared default. A value is empty when it is None, "", [] or {}.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from flowguard.contracts.enums import ParameterType, ValidationCode
from flowguard.contracts.flow import Block
from flowguard.contracts.schema import (
    CONNECTION_ALTERNATIVE_PREFIX,
    GLOBAL_VARIABLE_ALTERNATIVE,
    BlockSchema,
    ParameterRules,
)
from flowguard.core.conditions import parse_condition
from flowguard.core.config import ValidatorSettings
from flowguard.core.graph.index import FlowIndex
from flowguard.validation.findings import Findings, error, warning


def is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, dict, tuple)) and not value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_number(value: Any) -> float | None:
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


class ParameterValidator:
    """Evaluates a block's parameter values against its schema's rules."""

    def __init__(self, settings: ValidatorSettings | None = None) -> None:
        self._settings = settings if settings is not None else ValidatorSettings()

    def resolved_parameters(self, block: Block, schema: BlockSchema) -> dict[str, Any]:
        """Declared defaults overlaid with the instance's values."""
        values = {param.id: param.default for param in schema.parameters}
        values.update(block.parameters)
        return values

    def validate(self, block: Block, schema: BlockSchema, index: FlowIndex) -> Findings:
        findings = Findings()
        values = self.resolved_parameters(block, schema)
        rules = schema.rules.parameters if schema.rules is not None else None
        if rules is None:
            self._check_declared_required(block, schema, values, findings)
            return findings

        self._check_required(block, schema, rules, values, findings)
        self._check_recommended(block, schema, rules, values, findings)
        self._check_alternatives(block, schema, rules, values, index, findings)
        self._check_conditional(block, schema, rules, values, index, findings)
        return findings

    def _label(self, schema: BlockSchema, name: str) -> str:
        param = schema.parameter(name)
        return param.display_name if param is not None else name

    def _has_value(self, block: Block, name: str, values: Mapping[str, Any]) -> bool:
        """A zero only counts when the instance sets it explicitly."""
        value = values.get(name)
        if _is_number(value) and value == 0:
            return block.has_parameter(name)
        return not is_empty(value)

    def _global_variable_selected(self, values: Mapping[str, Any]) -> bool:
        return bool(values.get(self._settings.global_variable_toggle)) and not is_empty(
            values.get(self._settings.global_variable_selection)
        )

    def _alternative_satisfied(self, block: Block, alternatives: Iterable[str], values: Mapping[str, Any], index: FlowIndex) -> bool:
        for alternative in alternatives:
            if alternative.startswith(CONNECTION_ALTERNATIVE_PREFIX):
                if index.has_incoming(block.id, alternative[len(CONNECTION_ALTERNATIVE_PREFIX) :]):
                    return True
            elif alternative == GLOBAL_VARIABLE_ALTERNATIVE and self._global_variable_selected(values):
                return True
        return False

    def _check_declared_required(self, block: Block, schema: BlockSchema, values: Mapping[str, Any], findings: Findings) -> None:
        for param in schema.parameters:
            if param.required and is_empty(values.get(param.id)):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_PARAMETER,
                        f"Required parameter '{param.display_name}' is not set",
                        block_id=block.id,
                        parameter=param.id,
                    )
                )

    def _check_required(
        self, block: Block, schema: BlockSchema, rules: ParameterRules, values: Mapping[str, Any], findings: Findings
    ) -> None:
        for name in rules.required:
            if is_empty(values.get(name)):
                findings.add(
                    error(
                        ValidationCode.MISSING_REQUIRED_PARAMETER,
                        f"Required parameter '{self._label(schema, name)}' is not set",
                        block_id=block.id,
                        parameter=name,
                    )
                )

    def _check_recommended(
        self, block: Block, schema: BlockSchema, rules: ParameterRules, values: Mapping[str, Any], findings: Findings
    ) -> None:
        for name in rules.recommended:
            if is_empty(values.get(name)):
                findings.add(
                    warning(
                        ValidationCode.MISSING_RECOMMENDED_PARAMETER,
                        f"Setting parameter '{self._label(schema, name)}' is recommended",
                        block_id=block.id,
                        parameter=name,
                    )
                )

    def _check_alternatives(
        self,
        block: Block,
        schema: BlockSchema,
        rules: ParameterRules,
        values: Mapping[str, Any],
        index: FlowIndex,
        findings: Findings,
    ) -> None:
        for rule in rules.required_with_alternatives:
            if self._has_value(block, rule.parameter, values):
                continue
            if self._alternative_satisfied(block, rule.alternatives, values, index):
                continue
            findings.add(
                error(
                    ValidationCode.MISSING_PARAMETER_OR_ALTERNATIVE,
                    f"Parameter '{self._label(schema, rule.parameter)}' has no value and no alternative source",
                    block_id=block.id,
                    parameter=rule.parameter,
                    alternatives=list(rule.alternatives),
                )
            )

    def _check_conditional(
        self,
        block: Block,
        schema: BlockSchema,
        rules: ParameterRules,
        values: Mapping[str, Any],
        index: FlowIndex,
        findings: Findings,
    ) -> None:
        for rule in rules.conditional_required:
            if not parse_condition(rule.condition).evaluate(values):
                continue
            for name in rule.required_params:
                param = schema.parameter(name)
                if param is not None and param.type == ParameterType.DURATION:
                    present = self._duration_present(block, name, values)
                else:
                    present = not is_empty(values.get(name))
                if present or self._alternative_satisfied(block, rule.alternatives, values, index):
                    continue
                findings.add(
                    error(
                        ValidationCode.MISSING_CONDITIONAL_PARAMETER,
                        f"Parameter '{self._label(schema, name)}' is required when {rule.condition}",
                        block_id=block.id,
                        parameter=name,
                        condition=rule.condition,
                    )
                )

    def _duration_present(self, block: Block, name: str, values: Mapping[str, Any]) -> bool:
        number = _as_number(values.get(name))
        if number is None:
            return False
        if number > 0:
            return True
        return number == 0 and block.has_parameter(name)

"""Block-type schema models.

A schema is what the registry hands back for a block-type id: category,
declared ports and parameters, and the declarative rule bundle that drives
per-block validation. Schemas are frozen Pydantic models so catalog files
are validated once at load time and never change afterwards.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from flowguard.contracts.enums import (
    EXECUTION_INPUT_KINDS,
    EXECUTION_KINDS,
    EXECUTION_OUTPUT_KINDS,
    VARIABLE_KINDS,
    BlockCategory,
    ParameterType,
    PortDirection,
    SentinelType,
    VariableRole,
)

CONNECTION_ALTERNATIVE_PREFIX = "connection:"
GLOBAL_VARIABLE_ALTERNATIVE = "globalVariable"


def _check_alternative(alternative: str) -> str:
    if alternative == GLOBAL_VARIABLE_ALTERNATIVE:
        return alternative
    if alternative.startswith(CONNECTION_ALTERNATIVE_PREFIX) and alternative[len(CONNECTION_ALTERNATIVE_PREFIX) :]:
        return alternative
    raise ValueError(
        f"alternative must be '{GLOBAL_VARIABLE_ALTERNATIVE}' or '{CONNECTION_ALTERNATIVE_PREFIX}<port id>', got {alternative!r}"
    )


class PortDefinition(BaseModel):
    """A port declared by a block-type schema.

    ``kinds`` holds every kind the port accepts (a composite type when more
    than one). ``max_connections`` overrides the configured default limit;
    None means "use the default" for inputs and "unbounded" for outputs.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    kinds: tuple[str, ...] = Field(min_length=1)
    label: str | None = None
    required: bool = False
    max_connections: int | None = Field(default=None, gt=0)

    @property
    def is_execution(self) -> bool:
        return any(kind in EXECUTION_KINDS for kind in self.kinds)

    @property
    def is_execution_output(self) -> bool:
        return any(kind in EXECUTION_OUTPUT_KINDS for kind in self.kinds)

    @property
    def is_execution_input(self) -> bool:
        return any(kind in EXECUTION_INPUT_KINDS for kind in self.kinds)

    @property
    def carries_variable(self) -> bool:
        return any(kind in VARIABLE_KINDS for kind in self.kinds)

    @property
    def display_name(self) -> str:
        return self.label or self.id


class ParameterDefinition(BaseModel):
    """A configurable parameter of a block type."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    type: ParameterType = ParameterType.STRING
    label: str | None = None
    required: bool = False
    default: Any = None

    @property
    def display_name(self) -> str:
        return self.label or self.id


class ConnectionRules(BaseModel):
    """Declarative connection requirements: port ids that must or should be connected."""

    model_config = {"frozen": True, "extra": "forbid"}

    required_inputs: tuple[str, ...] = ()
    required_outputs: tuple[str, ...] = ()
    recommended_inputs: tuple[str, ...] = ()
    recommended_outputs: tuple[str, ...] = ()


class AlternativeRequirement(BaseModel):
    """A parameter that may stay empty when any alternative source is satisfied.

    Alternatives are either ``connection:<port id>`` (an incoming connection
    exists on that input port) or ``globalVariable`` (a global variable is
    selected on the block instead).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    parameter: str = Field(min_length=1)
    alternatives: tuple[str, ...] = Field(min_length=1)

    @field_validator("alternatives")
    @classmethod
    def validate_alternatives(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(_check_alternative(alt) for alt in v)


class ConditionalRequirement(BaseModel):
    """Parameters that become required when a condition over other parameters holds.

    The condition is parsed at construction so a malformed catalog fails
    loudly at load time instead of silently never matching.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    condition: str = Field(min_length=1)
    required_params: tuple[str, ...] = Field(min_length=1)
    alternatives: tuple[str, ...] = ()

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v: str) -> str:
        from flowguard.core.conditions import parse_condition

        # ConditionSyntaxError is a ValueError, so Pydantic reports it as a field error
        parse_condition(v)
        return v

    @field_validator("alternatives")
    @classmethod
    def validate_alternatives(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(_check_alternative(alt) for alt in v)


class ParameterRules(BaseModel):
    """Declarative parameter requirements for a block type."""

    model_config = {"frozen": True, "extra": "forbid"}

    required: tuple[str, ...] = ()
    recommended: tuple[str, ...] = ()
    required_with_alternatives: tuple[AlternativeRequirement, ...] = ()
    conditional_required: tuple[ConditionalRequirement, ...] = ()


class ValidationRules(BaseModel):
    """The rule bundle attached to a block type.

    Either half may be absent; the block validator falls back to declared
    port and parameter flags for whichever half is missing.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    connections: ConnectionRules | None = None
    parameters: ParameterRules | None = None


class VariableBinding(BaseModel):
    """Declares that a block type defines or consumes a named variable.

    ``parameter`` names the block parameter holding the variable name
    (for definers) or the referenced name (for consumers).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    role: VariableRole
    parameter: str = Field(min_length=1)


class BlockSchema(BaseModel):
    """Everything the validator knows about one block type.

    Example:
        BlockSchema(
            id="start",
            name="Start",
            category=BlockCategory.CORE,
            sentinel=SentinelType.START,
            outputs=(PortDefinition(id="o1", kinds=("flow_out",)),),
        )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    name: str | None = None
    category: BlockCategory = BlockCategory.CORE
    sentinel: SentinelType | None = None
    inputs: tuple[PortDefinition, ...] = ()
    outputs: tuple[PortDefinition, ...] = ()
    parameters: tuple[ParameterDefinition, ...] = ()
    rules: ValidationRules | None = None
    variable: VariableBinding | None = None
    deprecated: bool = False
    experimental: bool = False
    version: str | None = None

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Self:
        """Port ids must be unique per direction and parameter ids unique overall."""
        for direction, ports in ((PortDirection.INPUT, self.inputs), (PortDirection.OUTPUT, self.outputs)):
            seen: set[str] = set()
            for port in ports:
                if port.id in seen:
                    raise ValueError(f"duplicate {direction} port id '{port.id}' in block type '{self.id}'")
                seen.add(port.id)
        param_ids = [p.id for p in self.parameters]
        duplicates = sorted({p for p in param_ids if param_ids.count(p) > 1})
        if duplicates:
            raise ValueError(f"duplicate parameter ids {duplicates} in block type '{self.id}'")
        return self

    @model_validator(mode="after")
    def validate_sentinel_category(self) -> Self:
        if self.sentinel is not None and self.category != BlockCategory.CORE:
            raise ValueError(f"sentinel block type '{self.id}' must be in the '{BlockCategory.CORE}' category")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def is_core(self) -> bool:
        return self.category == BlockCategory.CORE

    @property
    def is_auxiliary(self) -> bool:
        return self.category == BlockCategory.AUXILIARY

    def input_port(self, port_id: str) -> PortDefinition | None:
        for port in self.inputs:
            if port.id == port_id:
                return port
        return None

    def output_port(self, port_id: str) -> PortDefinition | None:
        for port in self.outputs:
            if port.id == port_id:
                return port
        return None

    def parameter(self, name: str) -> ParameterDefinition | None:
        for param in self.parameters:
            if param.id == name:
                return param
        return None

    @property
    def execution_ports(self) -> tuple[PortDefinition, ...]:
        return tuple(port for port in (*self.inputs, *self.outputs) if port.is_execution)

    @property
    def has_execution_output(self) -> bool:
        return any(port.is_execution_output for port in self.outputs)

    @property
    def has_execution_input(self) -> bool:
        return any(port.is_execution_input for port in self.inputs)

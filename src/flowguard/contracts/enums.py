"""All kinds, categories and codes shared across the validation engine.

Values are the strings used in catalog and flow documents, so every enum
is a StrEnum and compares equal to its serialized form.
"""

from enum import StrEnum


class PortDirection(StrEnum):
    """Which side of a block a port sits on."""

    INPUT = "input"
    OUTPUT = "output"


class PortKind(StrEnum):
    """Built-in port kinds.

    A kind's family is its name without the direction suffix, so
    ``var_data_out`` and ``var_data_in`` share the ``var_data`` family.
    Schemas may also declare custom kind strings; those have no rules
    unless a compatibility rule names them.
    """

    FLOW_IN = "flow_in"
    FLOW_OUT = "flow_out"
    LOOP_OUT = "loop_out"
    VAR_NAME_IN = "var_name_in"
    VAR_NAME_OUT = "var_name_out"
    VAR_DATA_IN = "var_data_in"
    VAR_DATA_OUT = "var_data_out"
    ERROR_IN = "error_in"
    ERROR_OUT = "error_out"

    @property
    def family(self) -> str:
        return kind_family(self.value)

    @property
    def is_execution(self) -> bool:
        return self.value in EXECUTION_KINDS


EXECUTION_OUTPUT_KINDS: frozenset[str] = frozenset({PortKind.FLOW_OUT, PortKind.LOOP_OUT})
EXECUTION_INPUT_KINDS: frozenset[str] = frozenset({PortKind.FLOW_IN})
EXECUTION_KINDS: frozenset[str] = EXECUTION_OUTPUT_KINDS | EXECUTION_INPUT_KINDS
VARIABLE_KINDS: frozenset[str] = frozenset(
    {
        PortKind.VAR_NAME_IN,
        PortKind.VAR_NAME_OUT,
        PortKind.VAR_DATA_IN,
        PortKind.VAR_DATA_OUT,
    }
)


def kind_family(kind: str) -> str:
    """Strip the direction suffix from a port kind string.

    ``loop_out`` is a loop body entry point and belongs to the ``flow`` family.
    """
    if kind == PortKind.LOOP_OUT:
        return "flow"
    for suffix in ("_in", "_out"):
        if kind.endswith(suffix):
            return kind[: -len(suffix)]
    return kind


class BlockCategory(StrEnum):
    """Category tag of a block type.

    CORE blocks participate in the execution chain; AUXILIARY blocks only
    supply data or configuration to core blocks.
    """

    CORE = "core"
    AUXILIARY = "auxiliary"


class SentinelType(StrEnum):
    """Marks the unique entry and exit block types of a flow."""

    START = "start"
    END = "end"


class VariableRole(StrEnum):
    """How a block type takes part in variable bookkeeping."""

    DEFINES = "defines"
    CONSUMES = "consumes"


class ParameterType(StrEnum):
    """Declared type of a block parameter.

    DURATION parameters treat an implicit zero as "not set".
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DURATION = "duration"
    SELECT = "select"
    JSON = "json"


class Severity(StrEnum):
    """Severity band of a validation finding."""

    ERROR = "error"
    WARNING = "warning"


class CompatibilityLevel(StrEnum):
    """Outcome of matching a source port against a target port.

    Values:
        PERFECT: Compatible kinds from the same family
        CONVERSION: Compatible only through a cross-family rule
        INCOMPATIBLE: No rule allows the pairing
    """

    PERFECT = "perfect"
    CONVERSION = "conversion"
    INCOMPATIBLE = "incompatible"


class ValidationCode(StrEnum):
    """Machine-usable codes attached to every finding."""

    # Structure
    NO_BLOCKS = "NO_BLOCKS"
    DUPLICATE_BLOCK_ID = "DUPLICATE_BLOCK_ID"
    DUPLICATE_CONNECTION_ID = "DUPLICATE_CONNECTION_ID"
    MISSING_BLOCK_DEFINITION = "MISSING_BLOCK_DEFINITION"
    MISSING_SOURCE_BLOCK = "MISSING_SOURCE_BLOCK"
    MISSING_TARGET_BLOCK = "MISSING_TARGET_BLOCK"
    MISSING_BLOCKS = "MISSING_BLOCKS"
    UNRESOLVED_BLOCK_DEFINITION = "UNRESOLVED_BLOCK_DEFINITION"

    # Connections
    MISSING_SOURCE_PORT = "MISSING_SOURCE_PORT"
    MISSING_TARGET_PORT = "MISSING_TARGET_PORT"
    SELF_CONNECTION = "SELF_CONNECTION"
    PORT_TYPE_MISMATCH = "PORT_TYPE_MISMATCH"
    TOO_MANY_CONNECTIONS = "TOO_MANY_CONNECTIONS"
    PORT_CONVERSION = "PORT_CONVERSION"

    # Blocks and parameters
    MISSING_REQUIRED_INPUT = "MISSING_REQUIRED_INPUT"
    MISSING_REQUIRED_OUTPUT = "MISSING_REQUIRED_OUTPUT"
    MISSING_RECOMMENDED_INPUT = "MISSING_RECOMMENDED_INPUT"
    MISSING_RECOMMENDED_OUTPUT = "MISSING_RECOMMENDED_OUTPUT"
    MISSING_REQUIRED_PARAMETER = "MISSING_REQUIRED_PARAMETER"
    MISSING_RECOMMENDED_PARAMETER = "MISSING_RECOMMENDED_PARAMETER"
    MISSING_PARAMETER_OR_ALTERNATIVE = "MISSING_PARAMETER_OR_ALTERNATIVE"
    MISSING_CONDITIONAL_PARAMETER = "MISSING_CONDITIONAL_PARAMETER"
    DEPRECATED_BLOCK = "DEPRECATED_BLOCK"
    EXPERIMENTAL_BLOCK = "EXPERIMENTAL_BLOCK"

    # Execution chain
    MISSING_START_BLOCK = "MISSING_START_BLOCK"
    MULTIPLE_START_BLOCKS = "MULTIPLE_START_BLOCKS"
    MISSING_END_BLOCK = "MISSING_END_BLOCK"
    MULTIPLE_END_BLOCKS = "MULTIPLE_END_BLOCKS"
    BROKEN_FLOW_CHAIN = "BROKEN_FLOW_CHAIN"
    EXECUTION_CYCLE = "EXECUTION_CYCLE"

    # Architecture
    INVALID_BLOCK_TYPE = "INVALID_BLOCK_TYPE"
    AUXILIARY_EXECUTION_PORT = "AUXILIARY_EXECUTION_PORT"
    ISOLATED_AUXILIARY_BLOCK = "ISOLATED_AUXILIARY_BLOCK"

    # Variables
    UNDEFINED_VARIABLE = "UNDEFINED_VARIABLE"
    VARIABLE_NAME_DUPLICATE = "VARIABLE_NAME_DUPLICATE"
    UNUSED_VARIABLE = "UNUSED_VARIABLE"
    VARIABLE_CHAIN_BROKEN = "VARIABLE_CHAIN_BROKEN"
    REQUIRED_PORT_UNCONNECTED = "REQUIRED_PORT_UNCONNECTED"

    # Reachability
    ORPHANED_BLOCK = "ORPHANED_BLOCK"
    UNREACHABLE_END_BLOCK = "UNREACHABLE_END_BLOCK"

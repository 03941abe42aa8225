"""Shared contracts for the flowguard validation engine.

This package is the leaf of the import graph: the flow snapshot, block
schemas, report types, enums and exceptions used by every other package.

Usage:
    from flowguard.contracts import Block, Connection, Flow, BlockSchema, ValidationReport
"""

from flowguard.contracts.enums import (
    EXECUTION_INPUT_KINDS,
    EXECUTION_KINDS,
    EXECUTION_OUTPUT_KINDS,
    VARIABLE_KINDS,
    BlockCategory,
    CompatibilityLevel,
    ParameterType,
    PortDirection,
    PortKind,
    SentinelType,
    Severity,
    ValidationCode,
    VariableRole,
    kind_family,
)
from flowguard.contracts.errors import (
    ConditionSyntaxError,
    DuplicateSchemaError,
    FlowLoadError,
    SchemaLookupError,
)
from flowguard.contracts.flow import Block, Connection, Flow
from flowguard.contracts.report import (
    BlockValidationResult,
    ConnectionValidationResult,
    ValidationIssue,
    ValidationReport,
    ValidationSummary,
)
from flowguard.contracts.schema import (
    AlternativeRequirement,
    BlockSchema,
    ConditionalRequirement,
    ConnectionRules,
    ParameterDefinition,
    ParameterRules,
    PortDefinition,
    ValidationRules,
    VariableBinding,
)
from flowguard.contracts.types import BlockID, BlockTypeID, ConnectionID, PortID

__all__ = [
    "EXECUTION_INPUT_KINDS",
    "EXECUTION_KINDS",
    "EXECUTION_OUTPUT_KINDS",
    "VARIABLE_KINDS",
    "AlternativeRequirement",
    "Block",
    "BlockCategory",
    "BlockID",
    "BlockSchema",
    "BlockTypeID",
    "BlockValidationResult",
    "CompatibilityLevel",
    "ConditionSyntaxError",
    "ConditionalRequirement",
    "Connection",
    "ConnectionID",
    "ConnectionRules",
    "ConnectionValidationResult",
    "DuplicateSchemaError",
    "Flow",
    "FlowLoadError",
    "ParameterDefinition",
    "ParameterRules",
    "ParameterType",
    "PortDefinition",
    "PortDirection",
    "PortID",
    "PortKind",
    "SchemaLookupError",
    "SentinelType",
    "Severity",
    "ValidationCode",
    "ValidationIssue",
    "ValidationReport",
    "ValidationRules",
    "ValidationSummary",
    "VariableBinding",
    "VariableRole",
    "kind_family",
]

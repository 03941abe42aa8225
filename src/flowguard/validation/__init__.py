"""Flow validation passes and the aggregator that runs them.

Public API:
- FlowValidator / validate_flow: whole-flow validation
- ConnectionValidator: single-edge, bulk and export-consistency checks
- BlockValidator, ParameterValidator: per-block rule bundles
- BlockArchitectureValidator, VariableConsistencyChecker,
  MainChainValidator, OrphanValidator: flow-wide passes
"""

from flowguard.validation.architecture import BlockArchitectureValidator
from flowguard.validation.blocks import BlockValidator
from flowguard.validation.connections import (
    BulkConnectionResult,
    ConnectionValidator,
    ExportConsistencyResult,
    InvalidConnection,
)
from flowguard.validation.findings import Findings
from flowguard.validation.main_chain import ChainCheck, MainChainValidator
from flowguard.validation.orphans import OrphanValidator
from flowguard.validation.parameters import ParameterValidator
from flowguard.validation.validator import FlowValidator, validate_flow
from flowguard.validation.variables import VariableConsistencyChecker

__all__ = [
    "BlockArchitectureValidator",
    "BlockValidator",
    "BulkConnectionResult",
    "ChainCheck",
    "ConnectionValidator",
    "ExportConsistencyResult",
    "Findings",
    "FlowValidator",
    "InvalidConnection",
    "MainChainValidator",
    "OrphanValidator",
    "ParameterValidator",
    "VariableConsistencyChecker",
    "validate_flow",
]

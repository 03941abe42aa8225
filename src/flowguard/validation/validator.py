# src/flowguard/validation/validator.py
"""Validation aggregator.

Runs every analysis against one flow snapshot and merges the findings into
a single ValidationReport. Pass order is fixed so reports are reproducible:

1. structure      - empty flow (stops here), duplicate block and connection ids
2. blocks         - schema present, deprecated/experimental, rule bundle
3. connections    - every edge: endpoints, ports, self-loop, kinds, limits
4. main chain     - start/end sentinels and an execution path between them
5. architecture   - core/auxiliary structural rules
6. variables      - definition/use consistency
7. orphans        - reachability from the start block

No pass reads another pass's findings; the only shared input is the
FlowIndex built once per call. Nothing is cached between calls apart from
what the schema lookup itself memoizes.
"""

from __future__ import annotations

from flowguard.contracts.enums import ValidationCode
from flowguard.contracts.flow import Block, Flow
from flowguard.contracts.report import ConnectionValidationResult, ValidationIssue, ValidationReport, ValidationSummary
from flowguard.core.config import ValidatorSettings
from flowguard.core.graph.index import FlowIndex
from flowguard.core.graph.reachability import find_orphans
from flowguard.core.logging import get_logger
from flowguard.core.ports import PortCompatibilityTable
from flowguard.core.registry import SchemaLookup
from flowguard.validation.architecture import BlockArchitectureValidator
from flowguard.validation.blocks import BlockValidator
from flowguard.validation.connections import ConnectionValidator
from flowguard.validation.findings import Findings, error, warning
from flowguard.validation.main_chain import MainChainValidator
from flowguard.validation.orphans import OrphanValidator
from flowguard.validation.parameters import ParameterValidator
from flowguard.validation.variables import VariableConsistencyChecker

logger = get_logger(__name__)


class FlowValidator:
    """Validates flow snapshots against a schema lookup.

    One instance can validate any number of flows, sequentially or from
    several threads: it holds no per-call state.

    Args:
        lookup: Block-type schema lookup (e.g. a SchemaRegistry)
        port_table: Port compatibility rules (defaults to the built-in table)
        settings: Validator policy (defaults to ValidatorSettings())

    Example:
        registry = SchemaRegistry(schemas)
        report = FlowValidator(registry).validate_flow(flow)
        if not report.is_valid:
            ...
    """

    def __init__(
        self,
        lookup: SchemaLookup,
        *,
        port_table: PortCompatibilityTable | None = None,
        settings: ValidatorSettings | None = None,
    ) -> None:
        self._lookup = lookup
        self._settings = settings if settings is not None else ValidatorSettings()
        self._ports = port_table if port_table is not None else PortCompatibilityTable()
        self._connections = ConnectionValidator(lookup, self._ports, self._settings)
        self._blocks = BlockValidator(ParameterValidator(self._settings))
        self._chain = MainChainValidator(self._settings)
        self._architecture = BlockArchitectureValidator()
        self._variables = VariableConsistencyChecker()
        self._orphans = OrphanValidator()

    @property
    def settings(self) -> ValidatorSettings:
        return self._settings

    @property
    def port_table(self) -> PortCompatibilityTable:
        return self._ports

    def validate_connection(
        self,
        source_block: Block,
        source_port_id: str,
        target_block: Block,
        target_port_id: str,
    ) -> ConnectionValidationResult:
        """Check a proposed connection for live editor feedback."""
        return self._connections.validate(source_block, source_port_id, target_block, target_port_id)

    def validate_flow(self, flow: Flow) -> ValidationReport:
        """Validate a flow snapshot.

        Returns:
            The consolidated report; ``is_valid`` is False iff any error was found

        Raises:
            SchemaLookupError: If the schema lookup fails (validation could not run)
        """
        log = logger.bind(flow_name=flow.name)
        log.debug("flow_validation_started", blocks=len(flow.blocks), connections=len(flow.connections))

        if not flow.blocks:
            report = ValidationReport(
                errors=(error(ValidationCode.NO_BLOCKS, "Flow contains no blocks"),),
                summary=ValidationSummary(
                    total_connections=len(flow.connections),
                    invalid_connections=len(flow.connections),
                    checks_failed=1,
                ),
            )
            log.debug("flow_validation_completed", errors=1, warnings=0, is_valid=False)
            return report

        index = FlowIndex.build(flow, self._lookup)

        structure = Findings()
        for block_id in index.duplicate_ids:
            structure.add(error(ValidationCode.DUPLICATE_BLOCK_ID, f"Duplicate block id '{block_id}'", block_id=block_id))
        for connection_id in index.duplicate_connection_ids:
            structure.add(
                error(
                    ValidationCode.DUPLICATE_CONNECTION_ID,
                    f"Duplicate connection id '{connection_id}'",
                    connection_id=connection_id,
                )
            )

        blocks = self._validate_blocks(index)

        bulk = self._connections.validate_all(index)
        connections = Findings()
        connections.extend(bulk.errors)
        connections.extend(bulk.warnings)

        chain = self._chain.validate(index)
        architecture = self._architecture.validate(index)
        variables = self._variables.validate(index)

        analysis = find_orphans(index)
        covered = {chain.broken_end_id} if chain.broken_end_id is not None else set()
        orphans = self._orphans.validate(index, analysis, covered)

        passes = (structure, blocks, connections, chain.findings, architecture, variables, orphans)
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        for findings in passes:
            errors.extend(findings.errors)
            warnings.extend(findings.warnings)

        failed_blocks = {issue.block_id for issue in errors if issue.block_id is not None and issue.block_id in index}
        summary = ValidationSummary(
            total_blocks=len(index),
            valid_blocks=len(index) - len(failed_blocks),
            invalid_blocks=len(failed_blocks),
            total_connections=len(flow.connections),
            valid_connections=len(bulk.valid),
            invalid_connections=len(bulk.invalid),
            has_start_block=bool(chain.start_ids),
            has_reachable_end=chain.trace is not None and chain.trace.complete,
            orphaned_blocks=len(analysis.orphaned),
            checks_passed=sum(1 for findings in passes if not findings.has_errors),
            checks_failed=sum(1 for findings in passes if findings.has_errors),
        )
        report = ValidationReport(errors=tuple(errors), warnings=tuple(warnings), summary=summary)
        log.debug(
            "flow_validation_completed",
            errors=len(report.errors),
            warnings=len(report.warnings),
            is_valid=report.is_valid,
        )
        return report

    def is_flow_executable(self, flow: Flow) -> bool:
        """Valid, has a start block, and every block is reachable from it."""
        report = self.validate_flow(flow)
        return report.is_valid and report.summary.has_start_block and report.summary.orphaned_blocks == 0

    def _validate_blocks(self, index: FlowIndex) -> Findings:
        findings = Findings()
        for block in index.blocks():
            schema = index.schema(block.id)
            if schema is None:
                findings.add(
                    error(
                        ValidationCode.MISSING_BLOCK_DEFINITION,
                        f"No block definition for type '{block.block_type}'",
                        block_id=block.id,
                        block_type=block.block_type,
                    )
                )
                continue
            if schema.deprecated:
                findings.add(
                    warning(
                        ValidationCode.DEPRECATED_BLOCK,
                        f"Block type '{schema.display_name}' is deprecated",
                        block_id=block.id,
                        block_type=schema.id,
                    )
                )
            if schema.experimental:
                findings.add(
                    warning(
                        ValidationCode.EXPERIMENTAL_BLOCK,
                        f"Block type '{schema.display_name}' is experimental",
                        block_id=block.id,
                        block_type=schema.id,
                    )
                )
            result = self._blocks.validate(block, index)
            findings.extend(result.errors)
            findings.extend(result.warnings)
        return findings


def validate_flow(
    flow: Flow,
    lookup: SchemaLookup,
    *,
    settings: ValidatorSettings | None = None,
) -> ValidationReport:
    """Validate a flow with a one-off FlowValidator."""
    return FlowValidator(lookup, settings=settings).validate_flow(flow)

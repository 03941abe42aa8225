"""Start/end discovery and execution-chain completeness."""

from __future__ import annotations

from dataclasses import dataclass, field

from flowguard.contracts.enums import SentinelType, ValidationCode
from flowguard.contracts.types import BlockID
from flowguard.core.config import ValidatorSettings
from flowguard.core.graph.chain import ChainTrace, find_execution_cycles, trace_chain
from flowguard.core.graph.index import FlowIndex
from flowguard.validation.findings import Findings, error, warning


@dataclass(slots=True)
class ChainCheck:
    """Findings of the main-chain pass plus what it learned about the sentinels.

    ``trace`` is None when the chain could not be traced (no start or no end).
    """

    findings: Findings = field(default_factory=Findings)
    start_ids: list[BlockID] = field(default_factory=list)
    end_ids: list[BlockID] = field(default_factory=list)
    trace: ChainTrace | None = None

    @property
    def broken_end_id(self) -> BlockID | None:
        """The end block a BROKEN_FLOW_CHAIN error was reported for, if any."""
        if self.trace is None or self.trace.complete or not self.end_ids:
            return None
        return self.end_ids[0]


class MainChainValidator:
    """Checks for exactly one start block, an end block, and an execution path between them.

    With several start or end blocks, the first of each (in flow order) is traced.
    """

    def __init__(self, settings: ValidatorSettings | None = None) -> None:
        self._settings = settings if settings is not None else ValidatorSettings()

    def validate(self, index: FlowIndex) -> ChainCheck:
        check = ChainCheck(
            start_ids=index.sentinel_blocks(SentinelType.START),
            end_ids=index.sentinel_blocks(SentinelType.END),
        )
        findings = check.findings

        if not check.start_ids:
            findings.add(error(ValidationCode.MISSING_START_BLOCK, "Flow has no start block"))
        elif len(check.start_ids) > 1:
            findings.add(
                error(
                    ValidationCode.MULTIPLE_START_BLOCKS,
                    f"Flow has {len(check.start_ids)} start blocks; exactly one is allowed",
                    block_ids=list(check.start_ids),
                )
            )

        if not check.end_ids:
            findings.add(error(ValidationCode.MISSING_END_BLOCK, "Flow has no end block"))
        elif len(check.end_ids) > 1:
            findings.add(
                warning(
                    ValidationCode.MULTIPLE_END_BLOCKS,
                    f"Flow has {len(check.end_ids)} end blocks",
                    block_ids=list(check.end_ids),
                )
            )

        if check.start_ids and check.end_ids:
            start_id, end_id = check.start_ids[0], check.end_ids[0]
            check.trace = trace_chain(start_id, end_id, index)
            if not check.trace.complete:
                suffix = f" at block '{check.trace.broken_at}'" if check.trace.broken_at else ""
                findings.add(
                    error(
                        ValidationCode.BROKEN_FLOW_CHAIN,
                        f"Execution chain from start to end is broken{suffix}",
                        block_id=check.trace.broken_at,
                        start_block_id=start_id,
                        end_block_id=end_id,
                        broken_at=check.trace.broken_at,
                        visited=list(check.trace.visited),
                    )
                )

        if self._settings.report_execution_cycles:
            for cycle in find_execution_cycles(index):
                findings.add(
                    warning(
                        ValidationCode.EXECUTION_CYCLE,
                        f"Execution cycle: {' -> '.join([*cycle, cycle[0]])}",
                        block_id=cycle[0],
                        cycle=cycle,
                    )
                )
        return check

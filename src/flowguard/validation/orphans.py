"""Orphaned-block findings from the reachability analysis."""

from __future__ import annotations

from collections.abc import Collection

from flowguard.contracts.enums import SentinelType, ValidationCode
from flowguard.core.graph.index import FlowIndex
from flowguard.core.graph.reachability import OrphanAnalysis
from flowguard.validation.findings import Findings, error, warning


class OrphanValidator:
    """Turns an OrphanAnalysis into findings.

    - orphaned core block         -> ORPHANED_BLOCK error
    - orphaned non-core block     -> ORPHANED_BLOCK warning (unknown types included)
    - unreachable end block       -> UNREACHABLE_END_BLOCK error, unless the
      chain check already reported that end block as broken

    Nothing is reported when the flow has no start block: the missing start
    is the finding, and every block being unreachable adds nothing.
    """

    def validate(self, index: FlowIndex, analysis: OrphanAnalysis, covered_end_ids: Collection[str] = ()) -> Findings:
        findings = Findings()
        if not analysis.seeds:
            return findings

        for block_id in analysis.orphaned:
            schema = index.schema(block_id)
            if schema is not None and schema.sentinel == SentinelType.END:
                if block_id not in covered_end_ids:
                    findings.add(
                        error(
                            ValidationCode.UNREACHABLE_END_BLOCK,
                            f"End block '{block_id}' cannot be reached from the start block",
                            block_id=block_id,
                        )
                    )
            elif schema is not None and schema.is_core:
                findings.add(
                    error(
                        ValidationCode.ORPHANED_BLOCK,
                        f"Core block '{block_id}' cannot be reached from the start block",
                        block_id=block_id,
                        category=schema.category.value,
                    )
                )
            else:
                findings.add(
                    warning(
                        ValidationCode.ORPHANED_BLOCK,
                        f"Block '{block_id}' cannot be reached from the start block",
                        block_id=block_id,
                        category=schema.category.value if schema is not None else None,
                    )
                )
        return findings

"""Validation findings and the consolidated report.

The report is the only thing the validator constructs. Everything here is
frozen so two runs over the same snapshot compare equal field for field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from flowguard.contracts.enums import CompatibilityLevel, Severity, ValidationCode
from flowguard.contracts.types import BlockID, ConnectionID


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One finding: an error or a warning.

    Attributes:
        code: Machine-usable rule code
        message: Human-readable description
        severity: ERROR or WARNING
        block_id: Block the finding is attributed to, if any
        connection_id: Connection the finding is attributed to, if any
        context: Structured details for programmatic consumers
    """

    code: ValidationCode
    message: str
    severity: Severity
    block_id: BlockID | None = None
    connection_id: ConnectionID | None = None
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.block_id is not None:
            result["block_id"] = self.block_id
        if self.connection_id is not None:
            result["connection_id"] = self.connection_id
        if self.context:
            result["context"] = _plain(self.context)
        return result


def _plain(value: Any) -> Any:
    """Convert read-only containers back to JSON-friendly builtins."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, frozenset, set)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """Summary statistics for one validation run."""

    total_blocks: int = 0
    valid_blocks: int = 0
    invalid_blocks: int = 0
    total_connections: int = 0
    valid_connections: int = 0
    invalid_connections: int = 0
    has_start_block: bool = False
    has_reachable_end: bool = False
    orphaned_blocks: int = 0
    checks_passed: int = 0
    checks_failed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_blocks": self.total_blocks,
            "valid_blocks": self.valid_blocks,
            "invalid_blocks": self.invalid_blocks,
            "total_connections": self.total_connections,
            "valid_connections": self.valid_connections,
            "invalid_connections": self.invalid_connections,
            "has_start_block": self.has_start_block,
            "has_reachable_end": self.has_reachable_end,
            "orphaned_blocks": self.orphaned_blocks,
            "checks_passed": self.checks_passed,
            "checks_failed": self.checks_failed,
        }


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Consolidated result of validating one flow snapshot.

    ``is_valid`` is True iff ``errors`` is empty; warnings never affect it.
    """

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return self.errors + self.warnings

    def codes(self) -> list[ValidationCode]:
        """All finding codes, errors first, in report order."""
        return [issue.code for issue in self.issues]

    def issues_for_block(self, block_id: str) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.block_id == block_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ConnectionValidationResult:
    """Outcome of checking one proposed or existing connection.

    A CONVERSION match is valid but carries a warning so the editor can
    flag an imperfect but legal connection.
    """

    valid: bool
    compatibility: CompatibilityLevel
    error: ValidationIssue | None = None
    warning: ValidationIssue | None = None


@dataclass(frozen=True, slots=True)
class BlockValidationResult:
    """Per-block findings from the block validator."""

    block_id: BlockID
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

"""Helpers for building findings and collecting them in order."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from flowguard.contracts.enums import Severity, ValidationCode
from flowguard.contracts.report import ValidationIssue
from flowguard.contracts.types import BlockID, ConnectionID


def error(
    code: ValidationCode,
    message: str,
    *,
    block_id: str | None = None,
    connection_id: str | None = None,
    **context: Any,
) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        message=message,
        severity=Severity.ERROR,
        block_id=BlockID(block_id) if block_id is not None else None,
        connection_id=ConnectionID(connection_id) if connection_id is not None else None,
        context=context,
    )


def warning(
    code: ValidationCode,
    message: str,
    *,
    block_id: str | None = None,
    connection_id: str | None = None,
    **context: Any,
) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        message=message,
        severity=Severity.WARNING,
        block_id=BlockID(block_id) if block_id is not None else None,
        connection_id=ConnectionID(connection_id) if connection_id is not None else None,
        context=context,
    )


@dataclass(slots=True)
class Findings:
    """Ordered error and warning lists produced by one sub-validator."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def add(self, issue: ValidationIssue) -> None:
        if issue.is_error:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        for issue in issues:
            self.add(issue)

    def merge(self, other: Findings) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def codes(self) -> list[ValidationCode]:
        return [issue.code for issue in (*self.errors, *self.warnings)]

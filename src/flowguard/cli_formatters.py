"""CLI output formatters for validation reports.

Provides a console (human-readable) and a JSON renderer for
ValidationReport, plus the port-rule table listing.
"""

from __future__ import annotations

import json

import typer

from flowguard.contracts.report import ValidationIssue, ValidationReport
from flowguard.core.ports import PortCompatibilityTable


def _format_issue(issue: ValidationIssue) -> str:
    location = []
    if issue.block_id is not None:
        location.append(f"block={issue.block_id}")
    if issue.connection_id is not None:
        location.append(f"connection={issue.connection_id}")
    where = f" ({', '.join(location)})" if location else ""
    return f"[{issue.code.value}]{where} {issue.message}"


def format_report_console(report: ValidationReport, *, title: str | None = None) -> None:
    """Print a report for humans: verdict line, findings, then summary counts."""
    heading = f"{title}: " if title else ""
    if report.is_valid:
        typer.secho(f"{heading}✓ Flow is valid", fg=typer.colors.GREEN)
    else:
        typer.secho(f"{heading}✗ Flow is invalid ({len(report.errors)} error(s))", fg=typer.colors.RED)

    for issue in report.errors:
        typer.echo(f"  ✗ {_format_issue(issue)}")
    for issue in report.warnings:
        typer.echo(f"  ⚠ {_format_issue(issue)}")

    s = report.summary
    typer.echo(
        f"Blocks: {s.total_blocks} ({s.invalid_blocks} invalid, {s.orphaned_blocks} orphaned) | "
        f"Connections: {s.total_connections} ({s.invalid_connections} invalid) | "
        f"Start: {'yes' if s.has_start_block else 'no'} | "
        f"End reachable: {'yes' if s.has_reachable_end else 'no'} | "
        f"Checks: {s.checks_passed} passed, {s.checks_failed} failed"
    )


def format_report_json(report: ValidationReport) -> None:
    """Print a report as one JSON document on stdout."""
    typer.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))


def format_port_rules(table: PortCompatibilityTable) -> None:
    for rule in table.rules:
        arrow = "<->" if rule.bidirectional else "->"
        typer.echo(f"{rule.source} {arrow} {rule.target}")

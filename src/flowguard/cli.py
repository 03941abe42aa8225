# src/flowguard/cli.py
"""Flowguard Command Line Interface.

Entry point for the flowguard CLI tool.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import typer
from pydantic import ValidationError

from flowguard import __version__
from flowguard.cli_formatters import format_port_rules, format_report_console, format_report_json
from flowguard.contracts.errors import DuplicateSchemaError, FlowLoadError, SchemaLookupError
from flowguard.core.config import ValidatorSettings, load_settings
from flowguard.core.logging import configure_logging
from flowguard.core.ports import PortCompatibilityTable

__all__ = ["app"]

app = typer.Typer(
    name="flowguard",
    help="Flowguard: static validation for block-and-port automation flows.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"flowguard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Flowguard: static validation for block-and-port automation flows."""


def _format_validation_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error panel with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]❌ {title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def _pydantic_details(e: ValidationError) -> list[str]:
    details = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"])
        details.append(f"{loc}: {err['msg']}")
    return details


T = TypeVar("T")


def _load_or_exit(path: Path, what: str, loader: Callable[[Path], T]) -> T:
    try:
        return loader(path)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"{what.capitalize()} file does not exist: {path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except FlowLoadError as e:
        _format_validation_error(
            title="Parse Error",
            message=str(e),
            hint="Check for unclosed brackets, incorrect indentation, or invalid characters.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        _format_validation_error(
            title=f"Invalid {what.capitalize()}",
            message=f"{path.name} does not match the expected {what} shape",
            details=_pydantic_details(e),
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None
    except DuplicateSchemaError as e:
        _format_validation_error(title="Catalog Conflict", message=str(e))
        raise typer.Exit(1) from None


@app.command()
def validate(
    flow: Path = typer.Option(..., "--flow", "-f", help="Path to the flow document (YAML or JSON)."),
    catalog: Path = typer.Option(..., "--catalog", "-c", help="Path to the block-type catalog (YAML or JSON)."),
    settings: Path | None = typer.Option(None, "--settings", "-s", help="Path to validator settings YAML."),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Validate a flow against a block-type catalog."""
    from flowguard.core.loading import load_catalog, load_flow
    from flowguard.validation import FlowValidator

    config = _load_or_exit(settings.expanduser(), "settings", load_settings) if settings is not None else ValidatorSettings()
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)

    registry = _load_or_exit(catalog.expanduser(), "catalog", load_catalog)
    snapshot = _load_or_exit(flow.expanduser(), "flow", load_flow)

    try:
        report = FlowValidator(registry, settings=config).validate_flow(snapshot)
    except SchemaLookupError as e:
        _format_validation_error(title="Validation Could Not Run", message=str(e))
        raise typer.Exit(1) from None

    if json_output:
        format_report_json(report)
    else:
        format_report_console(report, title=snapshot.name)

    if not report.is_valid:
        raise typer.Exit(1)


@app.command()
def ports() -> None:
    """List the built-in port compatibility rules."""
    format_port_rules(PortCompatibilityTable())


if __name__ == "__main__":
    app()

"""CLI interface for psychrocalc.

This module provides a command-line interface for single psychrometric
calculations and CSV batch processing.

Usage:
    psychro calc dbt_wbt 25 20
    psychro calc wbt_rh 18 70 --altitude 500 --json
    psychro batch readings.csv -o results.csv
    psychro sample -o template.csv
    psychro validate readings.csv
    psychro init-config -o psychro.yaml
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from psychrocalc.calculation.batch import BatchRunner
from psychrocalc.calculation.csv_format import (
    generate_output_csv,
    generate_sample_csv,
    parse_csv,
    validate_csv_data,
)
from psychrocalc.calculation.resolver import PsychrometricResolver
from psychrocalc.core.config import PsychroConfig, load_config, save_config
from psychrocalc.core.errors import PsychroError
from psychrocalc.core.state import AirState, InputKind
from psychrocalc.core.validation import ValidationReport, validate_single

app = typer.Typer(
    name="psychro",
    help="Psychrometric property calculator.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="YAML or JSON configuration file"),
]

# Property rows of the result table: (label, attribute, unit)
_PROPERTY_ROWS = [
    ("Dry Bulb Temperature", "dbt", "°C"),
    ("Wet Bulb Temperature", "wbt", "°C"),
    ("Relative Humidity", "rh", "%"),
    ("Dew Point Temperature", "dpt", "°C"),
    ("Humidity Ratio", "humidity_ratio", "kg/kg"),
    ("Enthalpy", "enthalpy", "kJ/kg"),
    ("Specific Volume", "specific_volume", "m³/kg"),
    ("Vapor Pressure", "vapor_pressure", "kPa"),
    ("Atmospheric Pressure", "pressure", "kPa"),
]


@app.callback()
def _configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Psychrometric property calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(config_path: Path | None) -> PsychroConfig:
    """Load configuration, or defaults when no path is given."""
    if config_path is None:
        return PsychroConfig()
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] Config file not found: {config_path}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Error:[/] Invalid configuration: {e}")
        raise typer.Exit(1) from None


def _read_csv(input_path: Path) -> str:
    try:
        return input_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        console.print(f"[red]Error:[/] File not found: {input_path}")
        raise typer.Exit(1) from None


def _print_report(report: ValidationReport) -> None:
    for warning in report.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")
    for error in report.errors:
        console.print(f"[red]Error:[/] {error}")


# Negative temperatures would otherwise be parsed as options.
@app.command(context_settings={"ignore_unknown_options": True})
def calc(
    kind: Annotated[
        str,
        typer.Argument(help="Input kind: dbt_wbt, dbt_rh, dbt_dpt or wbt_rh"),
    ],
    value1: Annotated[float, typer.Argument(help="First measured value")],
    value2: Annotated[float, typer.Argument(help="Second measured value")],
    altitude: Annotated[
        float,
        typer.Option("--altitude", "-a", help="Altitude in meters"),
    ] = 0.0,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON"),
    ] = False,
    config_path: ConfigOption = None,
) -> None:
    """Calculate the full air state from a measured pair."""
    config = _load(config_path)

    errors = validate_single(kind, value1, value2, altitude, config.validation)
    if errors:
        for error in errors:
            console.print(f"[red]Error:[/] {error}")
        raise typer.Exit(1)

    resolver = PsychrometricResolver(config.solver)
    try:
        state = resolver.resolve(kind, value1, value2, altitude)
    except PsychroError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None

    if as_json:
        console.print_json(json.dumps(state.to_dict()))
        return

    _print_state(InputKind.parse(kind), value1, value2, altitude, state)


def _print_state(
    kind: InputKind,
    value1: float,
    value2: float,
    altitude: float,
    state: AirState,
) -> None:
    label1, label2 = kind.labels
    table = Table(title="Psychrometric Properties")
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit")

    for label, attribute, unit in _PROPERTY_ROWS:
        table.add_row(label, f"{getattr(state, attribute):g}", unit)

    console.print(f"\n[bold]Input:[/] {label1} = {value1:g}, {label2} = {value2:g}")
    console.print(f"  Altitude: {altitude:g} m\n")
    console.print(table)
    for warning in state.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")


@app.command()
def batch(
    input_path: Annotated[Path, typer.Argument(help="Input CSV file")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output CSV file"),
    ] = None,
    config_path: ConfigOption = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Calculate properties for every row of a CSV file."""
    config = _load(config_path)
    parsed = parse_csv(_read_csv(input_path))

    report = validate_csv_data(parsed, config.validation)
    if not report.is_valid:
        _print_report(report)
        console.print(f"\n[red]Validation failed:[/] {len(report.errors)} error(s)")
        raise typer.Exit(1)
    if not quiet:
        _print_report(report)

    runner = BatchRunner(PsychrometricResolver(config.solver), config.batch)
    rows = parsed.to_batch_rows()

    if not quiet:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Processing...", total=1.0)
            result = runner.run(
                rows,
                on_progress=lambda fraction: progress.update(task, completed=fraction),
            )
            progress.update(task, description="[green]Complete!")
    else:
        result = runner.run(rows)

    output = output or input_path.with_name(f"{input_path.stem}_results.csv")
    output.write_text(generate_output_csv(result.results), encoding="utf-8")

    if not quiet:
        console.print("\n[bold]Batch Complete[/]")
        console.print(f"  Rows: {result.total}")
        console.print(f"  Succeeded: {result.success_count}")
        console.print(f"  Failed: {result.error_count}")
        console.print(f"  Wall time: {result.elapsed:.2f}s")
        for error in result.errors:
            console.print(f"[red]Row {error.row_number}:[/] {error.message}")
        console.print(f"\n[dim]Results saved to {output}[/]")

    if result.error_count and not result.success_count:
        raise typer.Exit(1)


@app.command()
def sample(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path"),
    ] = Path("psychrometric_template.csv"),
) -> None:
    """Write a sample input CSV covering every input kind."""
    output.write_text(generate_sample_csv(), encoding="utf-8")
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file with your readings, then run:")
    console.print(f"  psychro batch {output}")


@app.command()
def validate(
    input_path: Annotated[Path, typer.Argument(help="Input CSV file")],
    config_path: ConfigOption = None,
) -> None:
    """Validate an input CSV file without processing it."""
    config = _load(config_path)
    parsed = parse_csv(_read_csv(input_path))
    report = validate_csv_data(parsed, config.validation)

    _print_report(report)
    if not report.is_valid:
        console.print(f"[red]Invalid:[/] {len(report.errors)} error(s)")
        raise typer.Exit(1)

    console.print(f"[green]Valid:[/] {len(parsed.rows)} rows")
    if report.warnings:
        console.print(f"  Warnings: {len(report.warnings)}")


@app.command("init-config")
def init_config(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path"),
    ] = Path("psychro.yaml"),
) -> None:
    """Generate a configuration file with the default settings."""
    save_config(PsychroConfig(), output)
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file to tune the solvers, then pass it with:")
    console.print(f"  psychro calc --config {output} ...")


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())

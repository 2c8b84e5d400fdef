"""Pack command: lay a job's parts out on stock sheets."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from panelcut.application import PackCutListCommand
from panelcut.application.config import ConfigError, load_config
from panelcut.cli.commands.validate import _display_load_error
from panelcut.infrastructure import JsonResultExporter, LayoutReportFormatter

OUTPUT_FORMATS = ("text", "json")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def pack_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report to this file"),
    ] = None,
    optimize: Annotated[
        bool | None,
        typer.Option(
            "--optimize/--no-optimize",
            help="Run the simulated annealing search (default: job setting)",
        ),
    ] = None,
    time_budget: Annotated[
        float | None,
        typer.Option("--time-budget", help="Annealing time budget in seconds", min=0.01),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for the annealing search"),
    ] = None,
    show_cuts: Annotated[
        bool,
        typer.Option("--show-cuts", help="List the cut sequence for each sheet"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log placement details"),
    ] = False,
) -> None:
    """Pack a job's parts onto stock sheets.

    Exit codes:
        0 - All parts placed
        1 - Invalid job file or packing failed

    Example:
        panelcut pack kitchen.json --format json --output layout.json
    """
    _configure_logging(verbose)

    if output_format not in OUTPUT_FORMATS:
        typer.echo(
            f"Unknown format '{output_format}'. Available formats: {', '.join(OUTPUT_FORMATS)}",
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        job = load_config(job_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = PackCutListCommand().execute(
        job,
        optimize=optimize,
        time_budget=time_budget,
        seed=seed,
    )

    if not result.success:
        typer.echo(LayoutReportFormatter().format(result), err=True)
        raise typer.Exit(code=1)

    if output_format == "json":
        report = JsonResultExporter().export(result)
    else:
        report = LayoutReportFormatter(show_cuts=show_cuts).format(result)

    if output_file is not None:
        output_file.write_text(report + "\n", encoding="utf-8")
        typer.echo(f"Layout written to {output_file}")
    else:
        typer.echo(report)

"""Validate command for checking job files.

Checks a JSON job file for syntax and schema errors, then converts it to
domain objects and verifies that every part fits the stock sheet in at
least one legal orientation.
"""

from pathlib import Path
from typing import Annotated

import typer

from panelcut.application.config import (
    ConfigError,
    config_to_packing,
    config_to_parts,
    config_to_stock,
    describe_location,
    load_config,
)
from panelcut.domain.exceptions import PackingError
from panelcut.domain.services import expand_parts


def _field_label(detail: dict) -> str:
    if "part_index" not in detail:
        return detail["path"]
    prefix = f"parts[{detail['part_index']}]"
    return detail["path"][len(prefix) + 1 :] or "entry"


def _display_load_error(error: ConfigError) -> None:
    """Print a job load failure; schema violations are grouped per part."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            typer.echo(
                f"    Line {detail.get('line', '?')}, Column {detail.get('column', '?')}: "
                f"{detail.get('message', 'Unknown error')}",
                err=True,
            )
    elif error.error_type == "validation":
        groups: dict[str, list[dict]] = {}
        for detail in error.details:
            heading = describe_location(detail) if "part_index" in detail else "job settings"
            groups.setdefault(heading, []).append(detail)
        for heading, details in groups.items():
            typer.echo(f"  {heading[0].upper()}{heading[1:]}:", err=True)
            for detail in details:
                line = f"    {_field_label(detail)}: {detail['message']}"
                value = detail.get("value")
                if value is not None and not isinstance(value, (dict, list)):
                    line += f" (got {value!r})"
                typer.echo(line, err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


def validate_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a packing job file.

    Exit codes:
        0 - Job is valid
        1 - Job has errors (cannot be packed)

    Example:
        panelcut validate kitchen.json
    """
    typer.echo(f"Validating {job_file}...")
    typer.echo()

    try:
        job = load_config(job_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    try:
        stock = config_to_stock(job.stock)
        config_to_packing(job.packing)
        instances = expand_parts(config_to_parts(job), stock)
    except PackingError as e:
        typer.echo("Errors:", err=True)
        typer.echo(f"  {e.error_type}: {e.message}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"Validation passed. {len(job.parts)} part(s), {len(instances)} piece(s) "
        f"on {stock.width:g} x {stock.height:g} stock."
    )

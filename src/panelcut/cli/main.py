"""Typer CLI for sheet cutting layouts."""

import typer

from panelcut.cli.commands import pack_command, validate_command

app = typer.Typer(
    name="panelcut",
    help="Lay out rectangular parts on stock sheets with guillotine cuts.",
    no_args_is_help=True,
)

app.command(name="pack")(pack_command)
app.command(name="validate")(validate_command)


if __name__ == "__main__":
    app()

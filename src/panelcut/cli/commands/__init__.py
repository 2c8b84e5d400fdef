"""CLI command implementations for the panelcut application.

This package contains subcommands for the panelcut CLI:
- pack: Pack a job file onto stock sheets
- validate: Validate a job file
"""

from panelcut.cli.commands.pack import pack_command
from panelcut.cli.commands.validate import validate_command

__all__ = ["pack_command", "validate_command"]

"""CLI command modules."""

import typer

from firmflash.cli.commands.firmware import (
    register_commands as register_firmware_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_firmware_commands(app)

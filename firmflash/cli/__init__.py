"""Command-line interface for firmflash."""

from firmflash.cli.app import app, main
from firmflash.cli.commands import register_all_commands


register_all_commands(app)

__all__ = ["app", "main"]

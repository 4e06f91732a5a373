"""Helper functions for CLI commands."""

from firmflash.cli.helpers.output import (
    print_error_message,
    print_json,
    print_list_item,
    print_success_message,
)
from firmflash.cli.helpers.progress import RichFlashProgressDisplay


__all__ = [
    "RichFlashProgressDisplay",
    "print_error_message",
    "print_json",
    "print_list_item",
    "print_success_message",
]

"""Helper functions for CLI output formatting with Rich integration."""

import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from firmflash.firmware.models import FirmwareInfo
from firmflash.firmware.ports import SerialPortInfo


def get_console() -> Console:
    """Console bound to the current stdout, without hard wrapping."""
    return Console(soft_wrap=True, highlight=False)


def print_success_message(message: str) -> None:
    """Print a success message with a checkmark."""
    get_console().print(f"[green]✓[/green] {escape(message)}")


def print_error_message(message: str) -> None:
    """Print an error message with an X symbol."""
    get_console().print(f"[red]✗[/red] {escape(message)}")


def print_list_item(item: str, indent: int = 1) -> None:
    """Print a list item with bullet and indentation."""
    get_console().print(f"{' ' * (indent * 2)}• {escape(item)}")


def print_json(data: Any) -> None:
    """Print data as indented JSON, bypassing Rich markup."""
    print(json.dumps(data, indent=2))


def print_firmware_table(entries: Sequence[FirmwareInfo]) -> None:
    """Render catalog entries as a table."""
    table = Table(title="Available firmware")
    table.add_column("Env", style="cyan")
    table.add_column("Version")
    table.add_column("Name")
    table.add_column("Chip")
    table.add_column("Flash size")
    table.add_column("Path", overflow="fold")
    for entry in entries:
        cells = [
            entry.env,
            entry.version,
            entry.name,
            entry.chip,
            entry.flash_size,
            str(entry.path),
        ]
        table.add_row(*(escape(cell) for cell in cells))
    get_console().print(table)


def print_ports_table(ports: Sequence[SerialPortInfo]) -> None:
    """Render serial ports as a table."""
    table = Table(title="Serial ports")
    table.add_column("Port", style="cyan")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column("Manufacturer")
    table.add_column("VID:PID")
    for port in ports:
        vid_pid = (
            f"{port.vid:04x}:{port.pid:04x}"
            if port.vid is not None and port.pid is not None
            else ""
        )
        cells = [
            port.port_name,
            port.port_type,
            port.description or "",
            port.manufacturer or "",
            vid_pid,
        ]
        table.add_row(*(escape(cell) for cell in cells))
    get_console().print(table)

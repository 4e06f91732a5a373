"""Firmware-related CLI commands."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from firmflash.cli.app import get_app_context
from firmflash.cli.decorators import handle_errors
from firmflash.cli.helpers import (
    RichFlashProgressDisplay,
    print_json,
    print_list_item,
    print_success_message,
)
from firmflash.cli.helpers.output import print_firmware_table, print_ports_table
from firmflash.firmware.catalog import (
    default_catalog_candidates,
    discover_catalog,
    scan_catalog,
)
from firmflash.firmware.flash import create_flash_service
from firmflash.firmware.models import FlashRequest
from firmflash.firmware.ports import list_serial_ports


logger = logging.getLogger(__name__)

OutputFormatOption = Annotated[
    str,
    typer.Option(
        "--format",
        "-f",
        help="Output format: text or json",
        case_sensitive=False,
    ),
]

firmware_app = typer.Typer(
    name="firmware",
    help="Firmware catalog, serial port and flashing commands.",
    no_args_is_help=True,
)


@firmware_app.command(name="list")
@handle_errors
def list_firmware(
    ctx: typer.Context,
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Catalog root (defaults to configured and built-in locations)",
        ),
    ] = None,
    output_format: OutputFormatOption = "text",
) -> None:
    """List firmware versions found in the catalog.

    The catalog is laid out as <root>/<env>/<version>/manifest.json. Versions
    whose manifest cannot be read are skipped.

    Examples:
        firmflash firmware list
        firmflash firmware list --root ./resources/firmware --format json
    """
    app_context = get_app_context(ctx)
    candidates = (
        [root]
        if root is not None
        else default_catalog_candidates(
            extra=app_context.user_config.data.firmware_dirs
        )
    )
    catalog_root = discover_catalog(candidates)
    entries = scan_catalog(catalog_root)

    if output_format.lower() == "json":
        print_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        print_list_item(f"No firmware found in {catalog_root}", indent=0)
        return
    print_firmware_table(entries)


@firmware_app.command(name="ports")
@handle_errors
def list_ports(output_format: OutputFormatOption = "text") -> None:
    """List serial ports that can be used as flash targets."""
    ports = list_serial_ports()

    if output_format.lower() == "json":
        print_json([port.to_dict() for port in ports])
        return

    if not ports:
        print_list_item("No serial ports found", indent=0)
        return
    print_ports_table(ports)


@firmware_app.command(name="flash")
@handle_errors
def flash(
    ctx: typer.Context,
    firmware_path: Annotated[
        Path,
        typer.Argument(help="Firmware version directory containing manifest.json"),
    ],
    port: Annotated[
        str, typer.Option("--port", "-p", help="Serial port of the device")
    ],
    baud: Annotated[
        int | None,
        typer.Option("--baud", "-b", min=1, help="Override the manifest baud rate"),
    ] = None,
    littlefs: Annotated[
        bool | None,
        typer.Option(
            "--littlefs/--no-littlefs",
            help="Include littlefs filesystem images (uses config default if not specified)",
        ),
    ] = None,
    tool: Annotated[
        str | None,
        typer.Option("--tool", help="Flashing executable (default from config)"),
    ] = None,
) -> None:
    """Flash a firmware version to a device over serial.

    Each file of the manifest is written with one invocation of the flashing
    tool, in manifest order. The run stops at the first failure.

    Examples:
        firmflash firmware flash resources/firmware/main/v1.2.0 --port /dev/ttyUSB0

        # Include the littlefs image and flash faster
        firmflash firmware flash ./fw --port COM3 --littlefs --baud 921600
    """
    user_config = get_app_context(ctx).user_config.data

    request = FlashRequest(
        port=port,
        firmware_path=firmware_path,
        include_littlefs=(
            littlefs if littlefs is not None else user_config.include_littlefs
        ),
        custom_baud=baud,
    )

    with RichFlashProgressDisplay() as display:
        service = create_flash_service(
            sink=display,
            tool_name=tool or user_config.flash_tool,
            progress_pattern=user_config.progress_pattern,
        )
        service.flash(request)

    message = display.result["message"] if display.result else "Flash completed"
    print_success_message(message)


def register_commands(app: typer.Typer) -> None:
    """Register firmware commands with the main app.

    Args:
        app: The main Typer app
    """
    app.add_typer(firmware_app, name="firmware")

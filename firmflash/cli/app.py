"""Main CLI application for firmflash."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

import typer

from firmflash.cli.decorators.error_handling import print_stack_trace_if_verbose
from firmflash.cli.helpers.output import print_error_message
from firmflash.config.user_config import UserConfig, create_user_config
from firmflash.core.errors import ConfigError
from firmflash.core.logging import setup_logging


__all__ = ["app", "main", "AppContext", "get_app_context", "__version__"]

try:
    __version__ = version("firmflash")
except PackageNotFoundError:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            config_file: Path to configuration file
        """
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.user_config: UserConfig = create_user_config(cli_config_path=config_file)


def get_app_context(ctx: typer.Context) -> AppContext:
    """Return the AppContext stored by the main callback."""
    app_context = ctx.find_root().obj
    if not isinstance(app_context, AppContext):
        raise RuntimeError("CLI context was not initialized")
    return app_context


app = typer.Typer(
    name="firmflash",
    help=f"""firmflash serial firmware flasher v{__version__}

Flashes firmware images described by a manifest.json to a microcontroller
through an external flashing tool (espflash by default).

Common workflows:
  • List firmware:   firmflash firmware list
  • List ports:      firmflash firmware ports
  • Flash:           firmflash firmware flash resources/firmware/main/v1.2.0 --port /dev/ttyUSB0""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    show_version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """firmflash serial firmware flasher."""
    if show_version:
        print(f"firmflash v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        app_context = AppContext(
            verbose=verbose, log_file=log_file, config_file=config_file
        )
    except ConfigError as e:
        print_error_message(f"Configuration error: {e}")
        raise typer.Exit(1) from e
    ctx.obj = app_context

    # Set log level based on verbosity, debug flag, or config
    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = app_context.user_config.data.log_level

    setup_logging(log_level_name=log_level_name, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    try:
        app()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print_stack_trace_if_verbose()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

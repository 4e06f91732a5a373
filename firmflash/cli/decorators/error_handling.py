"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

from firmflash.cli.helpers.output import print_error_message
from firmflash.core.errors import (
    CatalogNotFoundError,
    ConfigError,
    FlashError,
    ManifestParseError,
    ToolExecutionError,
)
from firmflash.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Known errors are reported to the user and turned into exit code 1.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigError as e:
            logger.error("configuration_error", error=str(e))
            print_error_message(f"Configuration error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except CatalogNotFoundError as e:
            logger.error("catalog_not_found", error=str(e))
            print_error_message(str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ManifestParseError as e:
            logger.error("manifest_error", path=str(e.path), error=e.reason)
            print_error_message(f"Manifest error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ToolExecutionError as e:
            logger.error("flash_tool_failed", returncode=e.returncode)
            print_error_message(f"Flash error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except FlashError as e:
            logger.error("flash_error", error=str(e))
            print_error_message(f"Flash error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except Exception as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_error_message(f"Unexpected error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-v", "-vv", "--verbose", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)

"""Structured logger helpers shared by the firmflash services."""

import logging
from typing import Any

import structlog


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return the structlog logger for a module.

    Events are named with snake_case keys and carry their data as keyword
    context, e.g. ``logger.info("flash_file_started", index=1, total=3)``.
    Stack traces are attached only when DEBUG is enabled:

        exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
        logger.error("catalog_failed", error=str(e), exc_info=exc_info)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]


class StructlogMixin:
    """Gives a service a ``logger`` bound to its identity.

    The bound context is ``service`` (class name) plus ``service_name`` and
    ``service_version`` for classes that declare them.
    """

    _logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if self._logger is None:
            identity: dict[str, Any] = {"service": type(self).__name__}
            for attr in ("service_name", "service_version"):
                value = getattr(self, attr, None)
                if value is not None:
                    identity[attr] = value
            self._logger = get_struct_logger(type(self).__module__).bind(**identity)
        return self._logger

    def log_operation(
        self, operation: str, **context: Any
    ) -> structlog.stdlib.BoundLogger:
        """Logger for one operation, e.g. a single flash run."""
        return self.logger.bind(operation=operation, **context)

    def log_error_with_context(
        self,
        message: str,
        error: Exception,
        **context: Any,
    ) -> None:
        """Log a failure with its type, plus the traceback at DEBUG level.

        Args:
            message: Event name
            error: The exception that ended the operation
            **context: Extra key/value pairs for the event
        """
        self.logger.error(
            message,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=logging.getLogger().isEnabledFor(logging.DEBUG),
            **context,
        )

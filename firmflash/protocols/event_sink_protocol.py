"""Protocol for receivers of flash run events."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FlashEventSinkProtocol(Protocol):
    """Receiver of the events a flash run produces.

    A sink receives ``"flash-progress"`` payloads while the run advances and
    exactly one ``"flash-complete"`` payload at the end. Events may arrive from
    worker threads, so implementations must be thread-safe. Raising from
    ``emit`` signals a delivery failure; whether that aborts the run depends
    on the emission mode chosen by the caller.
    """

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        """Deliver one event.

        Args:
            event: Event name, e.g. "flash-progress" or "flash-complete"
            payload: JSON-compatible event body
        """
        ...

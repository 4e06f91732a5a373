"""Event emission with explicit delivery modes."""

import asyncio
import logging
import threading
from concurrent.futures import Future
from enum import Enum
from typing import Any

from firmflash.core.errors import EventDeliveryError
from firmflash.core.structlog_logger import get_struct_logger
from firmflash.firmware.models import FlashComplete, FlashProgress
from firmflash.protocols import FlashEventSinkProtocol


logger = get_struct_logger(__name__)

PROGRESS_EVENT = "flash-progress"
COMPLETE_EVENT = "flash-complete"


class EmissionMode(str, Enum):
    """How a delivery failure is treated."""

    REQUIRED = "required"
    BEST_EFFORT = "best_effort"


class FlashEventEmitter:
    """Typed front of an event sink.

    ``REQUIRED`` emissions raise EventDeliveryError when the sink fails;
    ``BEST_EFFORT`` emissions log the failure and carry on.
    """

    def __init__(self, sink: FlashEventSinkProtocol) -> None:
        self.sink = sink

    def progress(
        self,
        progress: FlashProgress,
        mode: EmissionMode = EmissionMode.REQUIRED,
    ) -> None:
        self._emit(PROGRESS_EVENT, progress.to_dict(), mode)

    def complete(
        self,
        complete: FlashComplete,
        mode: EmissionMode = EmissionMode.REQUIRED,
    ) -> None:
        self._emit(COMPLETE_EVENT, complete.to_dict(), mode)

    def _emit(self, event: str, payload: dict[str, Any], mode: EmissionMode) -> None:
        try:
            self.sink.emit(event, payload)
        except Exception as e:
            if mode is EmissionMode.REQUIRED:
                raise EventDeliveryError(event, e) from e
            logger.debug(
                "event_dropped",
                flash_event=event,
                error=str(e),
                exc_info=logging.getLogger().isEnabledFor(logging.DEBUG),
            )


class NoopEventSink:
    """Sink that discards every event."""

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        pass


class RecordingEventSink:
    """Sink that keeps every event in memory, in arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self.events.append((event, payload))

    def payloads(self, event: str) -> list[dict[str, Any]]:
        """Payloads of all recorded events named ``event``."""
        with self._lock:
            return [payload for name, payload in self.events if name == event]


class LoopEventSink:
    """Delivers events to ``sink`` on the thread running ``loop``.

    ``emit`` blocks the calling thread until the wrapped sink has returned,
    and re-raises its exception, so delivery modes keep working. It must not
    be called from the loop's own thread.
    """

    def __init__(
        self, sink: FlashEventSinkProtocol, loop: asyncio.AbstractEventLoop
    ) -> None:
        self.sink = sink
        self.loop = loop

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        delivered: Future[None] = Future()

        def deliver() -> None:
            if not delivered.set_running_or_notify_cancel():
                return
            try:
                self.sink.emit(event, payload)
            except Exception as e:
                delivered.set_exception(e)
            else:
                delivered.set_result(None)

        self.loop.call_soon_threadsafe(deliver)
        delivered.result()

"""Protocol definitions for firmflash.

This module contains Protocol classes that define interfaces used to decouple
the flash orchestration from whoever consumes its events.
"""

from .event_sink_protocol import FlashEventSinkProtocol


__all__ = ["FlashEventSinkProtocol"]

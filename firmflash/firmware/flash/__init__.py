"""Flash domain for serial firmware flashing.

This package contains:
- The flash service orchestrating a staged run
- The external tool driver and its progress scraping
- Event emission and the optional integrity check
"""

from .events import (
    COMPLETE_EVENT,
    PROGRESS_EVENT,
    EmissionMode,
    FlashEventEmitter,
    LoopEventSink,
    NoopEventSink,
    RecordingEventSink,
)
from .progress import ProgressLineParser, overall_percentage, parse_progress_line
from .service import FlashService, create_flash_service
from .tool import DEFAULT_FLASH_TOOL, FlashTool


__all__ = [
    # Service classes and factories
    "FlashService",
    "create_flash_service",
    # Tool driver
    "DEFAULT_FLASH_TOOL",
    "FlashTool",
    "ProgressLineParser",
    "overall_percentage",
    "parse_progress_line",
    # Events
    "COMPLETE_EVENT",
    "PROGRESS_EVENT",
    "EmissionMode",
    "FlashEventEmitter",
    "LoopEventSink",
    "NoopEventSink",
    "RecordingEventSink",
]

"""Flash orchestration service.

A run moves strictly forward through preparing, verifying, connecting,
flashing (one tool invocation per file) and completed. Any error ends the run
in the failed state: the terminal ``flash-complete`` event is sent and the
error is re-raised to the caller.
"""

import asyncio
from pathlib import Path

from firmflash.core.errors import FirmwareFileNotFoundError
from firmflash.core.structlog_logger import StructlogMixin
from firmflash.firmware.flash.events import (
    EmissionMode,
    FlashEventEmitter,
    LoopEventSink,
    NoopEventSink,
)
from firmflash.firmware.flash.integrity import verify_file_integrity
from firmflash.firmware.flash.progress import (
    ProgressLineParser,
    file_start_percentage,
    overall_percentage,
)
from firmflash.firmware.flash.tool import DEFAULT_FLASH_TOOL, FlashTool
from firmflash.firmware.manifest import MANIFEST_FILENAME, load_manifest
from firmflash.firmware.models import (
    FlashComplete,
    FlashFile,
    FlashProgress,
    FlashRequest,
    FlashStage,
)
from firmflash.protocols import FlashEventSinkProtocol


class FlashService(StructlogMixin):
    """Serial firmware flash orchestrator.

    Runs are independent: the manifest is loaded afresh every time and no
    state survives a run. Concurrent runs against the same port are not
    guarded and must be prevented by the caller.
    """

    service_name = "FlashService"
    service_version = "1.0.0"

    def __init__(
        self,
        sink: FlashEventSinkProtocol | None = None,
        tool: FlashTool | None = None,
    ) -> None:
        """Initialize flash service with dependencies.

        Args:
            sink: Receiver of progress and completion events
            tool: Flashing tool driver
        """
        self.emitter = FlashEventEmitter(sink or NoopEventSink())
        self.tool = tool or FlashTool()
        self.logger.debug(
            "flash_service_initialized",
            sink=type(self.emitter.sink).__name__,
            tool=self.tool.executable,
        )

    def flash(self, request: FlashRequest) -> None:
        """Flash every selected file of a firmware directory.

        Blocks for the whole run, including the tool subprocesses.

        Args:
            request: Port, firmware directory and options for this run

        Raises:
            FlashError: For any failure; the failed terminal event has been
                emitted by the time it propagates
            ManifestParseError: If the manifest is invalid
        """
        log = self.log_operation("flash", port=request.port)
        log.info("flash_started", firmware_path=str(request.firmware_path))

        try:
            total = self._run(request)
        except Exception as e:
            self.log_error_with_context("flash_failed", e, port=request.port)
            self.emitter.complete(
                FlashComplete(success=False, message=f"Flash failed: {e}"),
                mode=EmissionMode.BEST_EFFORT,
            )
            raise

        log.info("flash_completed", files=total)

    async def flash_async(self, request: FlashRequest) -> None:
        """Run ``flash`` on a worker thread without blocking the event loop.

        Events are handed back to the calling loop, so the sink only ever
        sees the loop's thread, as it would for native async code.
        """
        loop = asyncio.get_running_loop()
        runner = FlashService(
            sink=LoopEventSink(self.emitter.sink, loop), tool=self.tool
        )
        await asyncio.to_thread(runner.flash, request)

    def _run(self, request: FlashRequest) -> int:
        firmware_path = request.firmware_path

        # Preparing
        manifest_path = firmware_path / MANIFEST_FILENAME
        if not manifest_path.is_file():
            raise FirmwareFileNotFoundError(manifest_path, kind="Manifest file")
        manifest = load_manifest(manifest_path)
        baud = request.custom_baud if request.custom_baud is not None else manifest.baud
        # The file count is fixed here so every event of the run carries it.
        files = manifest.select_files(request.include_littlefs)
        total = len(files)
        self._progress(
            FlashStage.PREPARING, 0, total, 0.0, "Preparing to flash..."
        )

        # Verifying
        self._progress(
            FlashStage.VERIFYING, 0, total, 5.0, "Verifying firmware files..."
        )
        self._verify_files(firmware_path, files)

        # Connecting
        self._progress(
            FlashStage.CONNECTING,
            0,
            total,
            10.0,
            f"Connecting to {request.port} ({baud})",
        )

        # Flashing
        if files:
            executable = self.tool.locate()
            for index, flash_file in enumerate(files, start=1):
                self._flash_file(
                    executable,
                    request.port,
                    baud,
                    firmware_path,
                    flash_file,
                    index,
                    total,
                )

        # Completed
        self._progress(
            FlashStage.COMPLETED, total, total, 100.0, "Flashing complete"
        )
        self.emitter.complete(
            FlashComplete(success=True, message="Firmware flashed successfully")
        )
        return total

    def _verify_files(self, firmware_path: Path, files: list[FlashFile]) -> None:
        for flash_file in files:
            file_path = firmware_path / flash_file.path
            if not file_path.is_file():
                raise FirmwareFileNotFoundError(file_path)

    def _flash_file(
        self,
        executable: Path,
        port: str,
        baud: int,
        firmware_path: Path,
        flash_file: FlashFile,
        index: int,
        total: int,
    ) -> None:
        file_path = (firmware_path / flash_file.path).resolve()
        offset = flash_file.normalized_offset

        self._progress(
            FlashStage.FLASHING,
            index,
            total,
            file_start_percentage(index, total),
            f"Flashing {flash_file.path} ({index}/{total})",
        )
        verify_file_integrity(file_path, flash_file.sha256)

        self.logger.info(
            "flash_file_started",
            file=flash_file.path,
            offset=offset,
            index=index,
            total=total,
        )

        def on_percent(percent: int) -> None:
            self.emitter.progress(
                FlashProgress(
                    stage=FlashStage.FLASHING,
                    current=index,
                    total=total,
                    percentage=overall_percentage(index, total, percent),
                    message=f"{flash_file.path}: {percent}%",
                ),
                mode=EmissionMode.BEST_EFFORT,
            )

        self.tool.write_file(executable, port, baud, offset, file_path, on_percent)
        self.logger.info("flash_file_finished", file=flash_file.path, index=index)

    def _progress(
        self,
        stage: FlashStage,
        current: int,
        total: int,
        percentage: float,
        message: str,
    ) -> None:
        self.emitter.progress(
            FlashProgress(
                stage=stage,
                current=current,
                total=total,
                percentage=percentage,
                message=message,
            )
        )


def create_flash_service(
    sink: FlashEventSinkProtocol | None = None,
    tool_name: str = DEFAULT_FLASH_TOOL,
    progress_pattern: str | None = None,
) -> FlashService:
    """Create a FlashService for serial firmware flashing.

    Args:
        sink: Receiver of progress and completion events
        tool_name: Name or path of the flashing executable
        progress_pattern: Regex overriding the ``<digits>%`` progress token

    Returns:
        Configured FlashService instance
    """
    parser = ProgressLineParser(progress_pattern) if progress_pattern else None
    return FlashService(sink=sink, tool=FlashTool(tool_name, parser=parser))

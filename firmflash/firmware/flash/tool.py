"""Driver for the external flashing executable."""

import shutil
import threading
from collections.abc import Callable
from pathlib import Path

from firmflash.core.errors import ToolExecutionError, ToolNotFoundError
from firmflash.core.structlog_logger import get_struct_logger
from firmflash.firmware.flash.progress import ProgressLineParser
from firmflash.utils.stream_process import OutputMiddleware, ProcessResult, run_command


logger = get_struct_logger(__name__)

DEFAULT_FLASH_TOOL = "espflash"
WRITE_BINARY_ACTION = "write-bin"

PercentCallback = Callable[[int], None]


class ProgressMiddleware(OutputMiddleware[str]):
    """Feeds parsed percentages from both streams into one callback.

    Consecutive duplicates are suppressed across the merged streams. The
    callback runs under the lock so deliveries keep the order in which the
    values were accepted.
    """

    def __init__(self, parser: ProgressLineParser, on_percent: PercentCallback) -> None:
        self.parser = parser
        self.on_percent = on_percent
        self.last_percent: int | None = None
        self._lock = threading.Lock()

    def process(self, line: str, stream_type: str) -> str:
        percent = self.parser.parse(line)
        if percent is not None:
            with self._lock:
                if percent != self.last_percent:
                    self.last_percent = percent
                    self.on_percent(percent)
        return line


class FlashTool:
    """Runs one ``write-bin`` invocation of the flashing tool per file.

    Args:
        executable: Name or path of the tool, resolved through PATH
        parser: Line parser used to scrape progress from its output
    """

    def __init__(
        self,
        executable: str = DEFAULT_FLASH_TOOL,
        parser: ProgressLineParser | None = None,
    ) -> None:
        self.executable = executable
        self.parser = parser or ProgressLineParser()

    def locate(self) -> Path:
        """Resolve the executable on the search path.

        Raises:
            ToolNotFoundError: If it cannot be found
        """
        found = shutil.which(self.executable)
        if found is None:
            raise ToolNotFoundError(self.executable)
        logger.debug("flash_tool_located", tool=self.executable, path=found)
        return Path(found)

    def build_command(
        self,
        executable: Path,
        port: str,
        baud: int,
        offset: str,
        file_path: Path,
    ) -> list[str | Path]:
        """Command line writing one binary at ``offset``."""
        return [
            executable,
            WRITE_BINARY_ACTION,
            "--port",
            port,
            "--baud",
            str(baud),
            offset,
            file_path,
        ]

    def write_file(
        self,
        executable: Path,
        port: str,
        baud: int,
        offset: str,
        file_path: Path,
        on_percent: PercentCallback,
    ) -> ProcessResult[str]:
        """Flash one binary and block until the tool exits.

        Args:
            executable: Resolved tool path from ``locate``
            port: Serial port identifier
            baud: Baud rate
            offset: Normalized hex offset
            file_path: Absolute path of the binary
            on_percent: Called with each new percentage scraped from output

        Returns:
            The process result of a successful run

        Raises:
            ToolExecutionError: If the tool cannot be started or exits non-zero
        """
        command = self.build_command(executable, port, baud, offset, file_path)
        middleware = ProgressMiddleware(self.parser, on_percent)

        try:
            result = run_command(command, middleware=middleware)
        except OSError as e:
            raise ToolExecutionError(self.executable, -1, "", str(e)) from e

        if result.return_code != 0:
            raise ToolExecutionError(
                self.executable, result.return_code, result.stdout, result.stderr
            )
        return result

"""Process execution and streaming output handling.

Runs a subprocess with both output streams drained by their own reader
thread, so a chatty stream can never fill its pipe buffer and stall the child
while the other is being read. Every line is handed to an output middleware
as it arrives.

Example:
    ```python
    from firmflash.utils.stream_process import run_command, OutputMiddleware

    class Upper(OutputMiddleware[str]):
        def process(self, line: str, stream_type: str) -> str:
            return line.upper()

    result = run_command(["espflash", "--version"], middleware=Upper())
    print(result.return_code, result.stdout_lines)
    ```
"""

import subprocess
from pathlib import Path
from threading import Thread
from typing import IO, Generic, NamedTuple, TypeVar

from firmflash.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)

T = TypeVar("T")  # Type of processed output


class ProcessResult(NamedTuple, Generic[T]):
    """Outcome of ``run_command``."""

    return_code: int
    stdout_lines: list[T]
    stderr_lines: list[T]
    stdout: str
    stderr: str


class OutputMiddleware(Generic[T]):
    """Base class for processing command output streams.

    Implementations are called from two reader threads at once and must be
    thread-safe.
    """

    def process(self, line: str, stream_type: str) -> T:
        """Process a line of output from a subprocess stream.

        Args:
            line: A line of text from the process output, without line ending
            stream_type: Either "stdout" or "stderr"

        Returns:
            Processed output of type T
        """
        raise NotImplementedError()


class PassthroughMiddleware(OutputMiddleware[str]):
    """Middleware that returns every line unchanged."""

    def process(self, line: str, stream_type: str) -> str:
        return line


class _StreamReader(Generic[T]):
    def __init__(
        self,
        stream: IO[str],
        stream_type: str,
        middleware: OutputMiddleware[T],
    ) -> None:
        self.stream = stream
        self.stream_type = stream_type
        self.middleware = middleware
        self.raw: list[str] = []
        self.processed: list[T] = []
        self.thread = Thread(
            target=self._run, name=f"stream-{stream_type}", daemon=True
        )

    def _run(self) -> None:
        try:
            for line in iter(self.stream.readline, ""):
                self.raw.append(line)
                try:
                    processed = self.middleware.process(
                        line.rstrip("\r\n"), self.stream_type
                    )
                except Exception as e:
                    # Keep draining: a failing middleware must not stall the child
                    logger.warning(
                        "output_middleware_failed",
                        stream=self.stream_type,
                        error=str(e),
                    )
                    continue
                if processed is not None:
                    self.processed.append(processed)
        finally:
            self.stream.close()


def run_command(
    cmd: list[str | Path],
    middleware: OutputMiddleware[T],
    cwd: Path | None = None,
) -> ProcessResult[T]:
    """Run a command and process its output through middleware.

    Both readers run concurrently; the process is waited on only after both
    streams have reached end of input.

    Args:
        cmd: Command and arguments
        middleware: Middleware receiving every output line
        cwd: Working directory for the child process

    Returns:
        ProcessResult with the exit status, processed lines and the raw
        captured text of both streams

    Raises:
        OSError: If the process cannot be started
    """
    args = [str(part) for part in cmd]
    logger.debug("process_starting", command=args)

    process = subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
        cwd=cwd,
    )
    assert process.stdout is not None and process.stderr is not None

    readers = [
        _StreamReader(process.stdout, "stdout", middleware),
        _StreamReader(process.stderr, "stderr", middleware),
    ]
    for reader in readers:
        reader.thread.start()
    for reader in readers:
        reader.thread.join()

    return_code = process.wait()
    out_reader, err_reader = readers
    logger.debug("process_finished", command=args[0], return_code=return_code)

    return ProcessResult(
        return_code=return_code,
        stdout_lines=out_reader.processed,
        stderr_lines=err_reader.processed,
        stdout="".join(out_reader.raw),
        stderr="".join(err_reader.raw),
    )

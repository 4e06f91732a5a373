"""Rich progress display acting as a flash event sink."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from firmflash.firmware.flash.events import COMPLETE_EVENT, PROGRESS_EVENT


class RichFlashProgressDisplay:
    """Flash event sink rendering a single overall progress bar.

    Used as a context manager around a flash run. Rich's Progress is safe to
    update from the tool's reader threads.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._task_id: TaskID | None = None
        self.result: dict[str, Any] | None = None

    def __enter__(self) -> "RichFlashProgressDisplay":
        self.progress.start()
        self._task_id = self.progress.add_task("Starting", total=100.0)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.progress.stop()

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        if event == PROGRESS_EVENT and self._task_id is not None:
            self.progress.update(
                self._task_id,
                completed=payload["percentage"],
                description=escape(f"[{payload['stage']}] {payload['message']}"),
            )
        elif event == COMPLETE_EVENT:
            self.result = payload

"""Core test fixtures for the firmflash project."""

import json
import logging
import os
import stat
import sys
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from typer.testing import CliRunner

from firmflash.firmware.flash.events import RecordingEventSink


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def recording_sink() -> RecordingEventSink:
    """Event sink that records every emitted event."""
    return RecordingEventSink()


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo logging configuration done by CLI invocations."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_user_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Keep user config files and FIRMFLASH_ variables out of tests."""
    config_home = tmp_path / "xdg-config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for key in list(os.environ):
        if key.startswith("FIRMFLASH_"):
            monkeypatch.delenv(key)
    return config_home


# ---- Firmware Fixtures ----


def make_manifest(files: list[dict[str, Any]], **overrides: Any) -> dict[str, Any]:
    """Build a valid manifest dictionary."""
    manifest: dict[str, Any] = {
        "name": "Test Firmware",
        "version": "1.0.0",
        "env": "main",
        "chip": "esp32s3",
        "flash_size": "8MB",
        "baud": 460800,
        "flash_mode": "dio",
        "flash_freq": "80m",
        "erase_flash": False,
        "files": files,
    }
    manifest.update(overrides)
    return manifest


@pytest.fixture
def manifest_data() -> Callable[..., dict[str, Any]]:
    """Factory building valid manifest dictionaries."""
    return make_manifest


DEFAULT_FILES = [
    {"offset": "0x0", "path": "bootloader.bin"},
    {"offset": "8000", "path": "partitions.bin"},
    {"offset": "0x10000", "path": "firmware.bin"},
]


@pytest.fixture
def write_firmware_dir() -> Callable[..., Path]:
    """Factory writing a firmware version directory.

    Every file named in the manifest is created with some content unless it
    is listed in ``missing``.
    """

    def _write(
        directory: Path,
        files: list[dict[str, Any]] | None = None,
        missing: tuple[str, ...] = (),
        **overrides: Any,
    ) -> Path:
        files = DEFAULT_FILES if files is None else files
        directory.mkdir(parents=True, exist_ok=True)
        manifest = make_manifest(files, **overrides)
        (directory / "manifest.json").write_text(json.dumps(manifest))
        for entry in files:
            if entry["path"] in missing:
                continue
            binary = directory / entry["path"]
            binary.parent.mkdir(parents=True, exist_ok=True)
            binary.write_bytes(f"payload:{entry['path']}".encode())
        return directory

    return _write


@pytest.fixture
def firmware_dir(tmp_path: Path, write_firmware_dir: Callable[..., Path]) -> Path:
    """A firmware directory with three files."""
    return write_firmware_dir(tmp_path / "firmware" / "main" / "v1.0.0")


# ---- Fake flashing tool ----

FAKE_TOOL_SOURCE = textwrap.dedent(
    """
    import json
    import os
    import sys

    args = sys.argv[1:]
    log_path = os.environ.get("FAKE_FLASH_LOG")
    if log_path:
        with open(log_path, "a", encoding="utf-8") as log:
            log.write(json.dumps(args) + "\\n")

    file_path = args[-1] if args else ""
    fail_on = os.environ.get("FAKE_FLASH_FAIL_ON")

    for pct in (0, 25, 25, 50):
        print(f"Writing {pct}%", flush=True)
    print(f"Writing 75%", file=sys.stderr, flush=True)
    print("noise without a number", file=sys.stderr, flush=True)

    if fail_on and os.path.basename(file_path) == fail_on:
        print("connection lost", flush=True)
        print("Error: serial port timed out", file=sys.stderr, flush=True)
        sys.exit(2)

    print("Writing 100%", flush=True)
    """
)


class FakeFlashTool:
    """Handle on the fake flashing tool installed on PATH."""

    def __init__(self, name: str, log_path: Path, monkeypatch: pytest.MonkeyPatch):
        self.name = name
        self.log_path = log_path
        self._monkeypatch = monkeypatch

    def fail_on(self, file_name: str) -> None:
        self._monkeypatch.setenv("FAKE_FLASH_FAIL_ON", file_name)

    @property
    def invocations(self) -> list[list[str]]:
        if not self.log_path.exists():
            return []
        return [
            json.loads(line)
            for line in self.log_path.read_text(encoding="utf-8").splitlines()
        ]


@pytest.fixture
def fake_flash_tool(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> FakeFlashTool:
    """Install an executable ``fake-espflash`` script at the front of PATH."""
    if sys.platform == "win32":
        pytest.skip("fake tool relies on a POSIX shebang")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "fake-espflash"
    script.write_text(f"#!{sys.executable}\n{FAKE_TOOL_SOURCE}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log_path = tmp_path / "fake-espflash.log"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("FAKE_FLASH_LOG", str(log_path))
    monkeypatch.delenv("FAKE_FLASH_FAIL_ON", raising=False)
    return FakeFlashTool("fake-espflash", log_path, monkeypatch)

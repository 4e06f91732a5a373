"""Tests for firmware domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from firmflash.firmware.models import (
    FirmwareInfo,
    FirmwareManifest,
    FlashFile,
    FlashProgress,
    FlashRequest,
    FlashStage,
    normalize_offset,
)


class TestNormalizeOffset:
    """Tests for hex offset normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1000", "0x1000"),
            ("0x1000", "0x1000"),
            ("0X1000", "0x1000"),
            ("  0x8000 ", "0x8000"),
            ("10000", "0x10000"),
            ("0xABcd", "0xABcd"),
            ("abcd", "0xabcd"),
        ],
    )
    def test_canonical_form(self, raw, expected):
        assert normalize_offset(raw) == expected

    def test_prefixed_and_bare_forms_match(self):
        assert normalize_offset("1000") == normalize_offset("0x1000")

    @pytest.mark.parametrize("raw", ["0x0", "1000", "0xdeadBEEF", "10000"])
    def test_idempotent(self, raw):
        once = normalize_offset(raw)
        assert normalize_offset(once) == once

    def test_preserves_numeric_ordering(self):
        raw = ["0x10000", "8000", "0x0", "1000"]
        by_raw = sorted(raw, key=lambda o: int(o, 16))
        by_normalized = sorted(raw, key=lambda o: int(normalize_offset(o), 16))
        assert by_raw == by_normalized

    @pytest.mark.parametrize("raw", ["", "0x", "0xZZ", "12g4", "-100", "0x 10"])
    def test_rejects_invalid(self, raw):
        with pytest.raises(ValueError, match="Invalid hex offset"):
            normalize_offset(raw)


class TestFlashFile:
    """Tests for FlashFile entries."""

    def test_normalized_offset_keeps_original(self):
        entry = FlashFile(offset="8000", path="partitions.bin")
        assert entry.offset == "8000"
        assert entry.normalized_offset == "0x8000"

    def test_invalid_offset_rejected(self):
        with pytest.raises(ValidationError):
            FlashFile(offset="nothex", path="a.bin")

    def test_is_littlefs(self):
        assert FlashFile(offset="0", path="fs.bin", fs="littlefs").is_littlefs
        assert not FlashFile(offset="0", path="fs.bin", fs="spiffs").is_littlefs
        assert not FlashFile(offset="0", path="app.bin").is_littlefs


class TestFirmwareManifest:
    """Tests for manifest validation and file selection."""

    @pytest.fixture(autouse=True)
    def _setup(self, manifest_data):
        self.make_manifest = manifest_data

    def _manifest(self, files):
        return FirmwareManifest.model_validate(self.make_manifest(files))

    def test_valid_manifest(self):
        manifest = self._manifest([{"offset": "0x0", "path": "app.bin"}])
        assert manifest.baud == 460800
        assert manifest.files[0].path == "app.bin"

    @pytest.mark.parametrize("field", ["name", "chip", "baud", "files"])
    def test_required_fields_not_defaulted(self, field):
        data = self.make_manifest([{"offset": "0x0", "path": "app.bin"}])
        del data[field]
        with pytest.raises(ValidationError):
            FirmwareManifest.model_validate(data)

    @pytest.mark.parametrize("baud", [0, -9600, "115200", True, 1.5])
    def test_baud_must_be_positive_integer(self, baud):
        data = self.make_manifest([{"offset": "0x0", "path": "app.bin"}], baud=baud)
        with pytest.raises(ValidationError):
            FirmwareManifest.model_validate(data)

    def test_file_entry_requires_offset_and_path(self):
        with pytest.raises(ValidationError):
            self._manifest([{"path": "app.bin"}])
        with pytest.raises(ValidationError):
            self._manifest([{"offset": "0x0"}])

    @pytest.mark.parametrize("include_littlefs", [True, False])
    def test_select_files_littlefs_filtering(self, include_littlefs):
        files = [
            {"offset": "0x0", "path": "boot.bin"},
            {"offset": "0x290000", "path": "fs.bin", "fs": "littlefs"},
            {"offset": "0x10000", "path": "app.bin", "fs": "other"},
            {"offset": "0x390000", "path": "fs2.bin", "fs": "littlefs"},
        ]
        manifest = self._manifest(files)

        selected = [f.path for f in manifest.select_files(include_littlefs)]

        if include_littlefs:
            assert selected == ["boot.bin", "fs.bin", "app.bin", "fs2.bin"]
        else:
            assert selected == ["boot.bin", "app.bin"]


class TestFlashProgress:
    """Tests for progress event values."""

    def test_current_cannot_exceed_total(self):
        with pytest.raises(ValidationError):
            FlashProgress(
                stage=FlashStage.FLASHING, current=3, total=2, percentage=50.0
            )

    def test_percentage_bounds(self):
        with pytest.raises(ValidationError):
            FlashProgress(
                stage=FlashStage.FLASHING, current=1, total=2, percentage=100.5
            )

    def test_immutable_and_serializable(self):
        progress = FlashProgress(
            stage=FlashStage.CONNECTING,
            current=0,
            total=2,
            percentage=10.0,
            message="Connecting",
        )
        with pytest.raises(ValidationError):
            progress.current = 1  # type: ignore[misc]
        assert progress.to_dict() == {
            "stage": "connecting",
            "current": 0,
            "total": 2,
            "percentage": 10.0,
            "message": "Connecting",
        }


class TestFlashRequest:
    """Tests for flash requests."""

    def test_defaults(self):
        request = FlashRequest(port="/dev/ttyUSB0", firmware_path=Path("fw"))
        assert request.include_littlefs is False
        assert request.custom_baud is None

    def test_custom_baud_must_be_positive(self):
        with pytest.raises(ValidationError):
            FlashRequest(port="COM3", firmware_path=Path("fw"), custom_baud=0)

    def test_port_required(self):
        with pytest.raises(ValidationError):
            FlashRequest(port="", firmware_path=Path("fw"))


def test_firmware_info_is_frozen(tmp_path):
    info = FirmwareInfo(
        env="main",
        version="v1",
        name="Test",
        chip="esp32",
        flash_size="4MB",
        path=tmp_path,
    )
    with pytest.raises(ValidationError):
        info.name = "changed"  # type: ignore[misc]

"""Serial port enumeration."""

from serial.tools import list_ports
from serial.tools.list_ports_common import ListPortInfo

from firmflash.core.structlog_logger import get_struct_logger
from firmflash.models.base import FrozenModel


logger = get_struct_logger(__name__)


class SerialPortInfo(FrozenModel):
    """A serial port that could be passed as a flash target."""

    port_name: str
    port_type: str
    description: str | None = None
    manufacturer: str | None = None
    vid: int | None = None
    pid: int | None = None


def _port_info(port: ListPortInfo) -> SerialPortInfo:
    is_usb = port.vid is not None
    return SerialPortInfo(
        port_name=port.device,
        port_type="USB" if is_usb else "Unknown",
        description=port.product if is_usb else None,
        manufacturer=port.manufacturer if is_usb else None,
        vid=port.vid,
        pid=port.pid,
    )


def list_serial_ports() -> list[SerialPortInfo]:
    """List serial ports reported by the operating system, sorted by name."""
    ports = [_port_info(p) for p in list_ports.comports()]
    logger.debug("serial_ports_listed", count=len(ports))
    return sorted(ports, key=lambda p: p.port_name)

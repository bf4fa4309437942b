"""Serial session with the datalogger: connection, data requests and console log."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Protocol

import serial
from serial.tools import list_ports

LIVE_MODE_COMMAND = b"\x01"
GET_FROM_EEPROM_COMMAND = b"\x01"
STOP_LIVE_MODE_COMMAND = b"\x04"

TIMEOUT_MS = 100

CONNECT_ERROR_TEXT = "Error connecting to Serial Port!"
DISCONNECTED_TEXT = "Disconnected"
WAITING_TEXT = "Waiting Data"


class Parity(enum.Enum):
    """Parity choices, in the order the selector lists them."""

    NONE = serial.PARITY_NONE
    EVEN = serial.PARITY_EVEN
    ODD = serial.PARITY_ODD
    SPACE = serial.PARITY_SPACE
    MARK = serial.PARITY_MARK
    UNKNOWN = None


class StopBits(enum.Enum):
    """Stop-bit choices, in the order the selector lists them."""

    ONE = serial.STOPBITS_ONE
    ONE_AND_HALF = serial.STOPBITS_ONE_POINT_FIVE
    TWO = serial.STOPBITS_TWO
    UNKNOWN = None


_PARITY_ORDER = (Parity.NONE, Parity.EVEN, Parity.ODD, Parity.SPACE, Parity.MARK)
_STOP_BITS_ORDER = (StopBits.ONE, StopBits.ONE_AND_HALF, StopBits.TWO)


def parity_from_index(index: int) -> Parity:
    """Map a selector index to a parity; anything out of range is UNKNOWN."""
    if 0 <= index < len(_PARITY_ORDER):
        return _PARITY_ORDER[index]
    return Parity.UNKNOWN


def stop_bits_from_index(index: int) -> StopBits:
    """Map a selector index to stop bits; anything out of range is UNKNOWN."""
    if 0 <= index < len(_STOP_BITS_ORDER):
        return _STOP_BITS_ORDER[index]
    return StopBits.UNKNOWN


@dataclass(frozen=True)
class SerialSettings:
    """Port parameters chosen by the user."""

    port: str
    baud_rate: int
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE


def _serial_kwargs(settings: SerialSettings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "port": settings.port,
        "baudrate": settings.baud_rate,
        "timeout": 0,
    }
    # An unknown choice leaves the port's own default in place.
    if settings.parity is not Parity.UNKNOWN:
        kwargs["parity"] = settings.parity.value
    if settings.stop_bits is not StopBits.UNKNOWN:
        kwargs["stopbits"] = settings.stop_bits.value
    return kwargs


def list_serial_ports() -> list[str]:
    """Return the names of the serial ports available on this machine."""
    return [info.device for info in list_ports.comports()]


def format_reading(value: int) -> str:
    """Text shown for a temperature reading."""
    return f"{value}°C"


def _signed_byte(raw: int) -> int:
    return raw - 256 if raw > 127 else raw


class _Port(Protocol):
    is_open: bool

    def read(self, size: int) -> bytes: ...

    def write(self, data: bytes) -> Any: ...

    def close(self) -> None: ...


def _open_serial(**kwargs: Any) -> _Port:
    return serial.Serial(**kwargs)


class DataloggerSession:
    """Talks to the datalogger and keeps the console text and status label."""

    def __init__(
        self,
        port_factory: Callable[..., _Port] | None = None,
        live_mode: bool = False,
    ) -> None:
        self._port_factory = port_factory or _open_serial
        self._port: _Port | None = None
        self.live_mode = live_mode
        self.connected = False
        self.console = ""
        self.status = ""
        self.timer_running = False
        self.timeout_ms = TIMEOUT_MS

    def is_open(self) -> bool:
        """Whether the serial port is currently open."""
        return self._port is not None and bool(self._port.is_open)

    def open(self, settings: SerialSettings) -> None:
        """Open the port; raise ConnectionError if it cannot be opened."""
        self.connected = True
        try:
            self._port = self._port_factory(**_serial_kwargs(settings))
        except (serial.SerialException, OSError, ValueError) as exc:
            self._port = None
            self.console = CONNECT_ERROR_TEXT
            self.connected = False
            raise ConnectionError(CONNECT_ERROR_TEXT) from exc

    def close(self) -> None:
        """Close the port if it is open."""
        if self.is_open():
            assert self._port is not None
            self._port.close()
            self._port = None
            self.connected = False

    def write(self, data: bytes) -> None:
        """Send raw bytes to the datalogger."""
        if not self.is_open():
            raise ConnectionError("serial port is not open")
        assert self._port is not None
        self._port.write(bytes(data))

    def request_data(self) -> None:
        """Ask for live readings or for the stored log, by the current mode."""
        self.write(LIVE_MODE_COMMAND if self.live_mode else GET_FROM_EEPROM_COMMAND)

    def toggle_connection(self, settings: SerialSettings) -> bool:
        """Disconnect if connected, otherwise connect and request data.

        Returns whether the session is connected afterwards.
        """
        if self.is_open():
            self.timer_running = False
            self.write(STOP_LIVE_MODE_COMMAND)
            self.close()
            self.status = DISCONNECTED_TEXT
            return False
        self.open(settings)
        self.request_data()
        self.timer_running = True
        return True

    def handle_incoming(self) -> int | None:
        """Read one reading from the port and log it.

        Returns the reading, or None when no byte was waiting.
        """
        if not self.is_open():
            raise ConnectionError("serial port is not open")
        assert self._port is not None
        self.timer_running = False
        raw = self._port.read(1)
        value: int | None = None
        if raw:
            value = _signed_byte(raw[0])
            self.console += f"{value}\n"
            self.status = format_reading(value)
        self.timer_running = True
        return value

    def handle_timeout(self) -> bool:
        """React to no data arriving in time: ask again. Returns whether it did."""
        if not self.is_open():
            return False
        self.status = WAITING_TEXT
        self.request_data()
        self.timer_running = True
        return True

    def clear_console(self) -> None:
        """Empty the console text."""
        self.console = ""

    def save_console(self, path: str | Path) -> None:
        """Write the console text to a file as UTF-8."""
        Path(path).write_bytes(self.console.encode("utf-8"))

    def load_console(self, path: str | Path) -> None:
        """Replace the console text with the contents of a file."""
        self.console = Path(path).read_bytes().decode("utf-8", errors="replace")
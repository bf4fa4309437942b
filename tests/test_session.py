from types import SimpleNamespace
from unittest import mock

import pytest
import serial

from trdatalogger.session import (
    DataloggerSession,
    Parity,
    SerialSettings,
    StopBits,
    format_reading,
    list_serial_ports,
    parity_from_index,
    stop_bits_from_index,
)


class FakePort:
    def __init__(self, incoming=b""):
        self.is_open = True
        self.incoming = bytearray(incoming)
        self.written = bytearray()

    def read(self, size):
        chunk = bytes(self.incoming[:size])
        del self.incoming[:size]
        return chunk

    def write(self, data):
        self.written += data
        return len(data)

    def close(self):
        self.is_open = False


class Factory:
    def __init__(self, port=None, error=None):
        self.port = port or FakePort()
        self.error = error
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.port


SETTINGS = SerialSettings("COM-TEST", 9600, Parity.EVEN, StopBits.TWO)


@pytest.mark.parametrize(
    "index, expected",
    [(0, Parity.NONE), (1, Parity.EVEN), (2, Parity.ODD), (3, Parity.SPACE),
     (4, Parity.MARK), (5, Parity.UNKNOWN), (-1, Parity.UNKNOWN)],
)
def test_parity_from_index(index, expected):
    assert parity_from_index(index) is expected


@pytest.mark.parametrize(
    "index, expected",
    [(0, StopBits.ONE), (1, StopBits.ONE_AND_HALF), (2, StopBits.TWO),
     (3, StopBits.UNKNOWN)],
)
def test_stop_bits_from_index(index, expected):
    assert stop_bits_from_index(index) is expected


def test_format_reading_appends_unit():
    assert format_reading(23) == "23°C"


def test_list_serial_ports_uses_device_names():
    infos = [SimpleNamespace(device="/dev/ttyFAKE0"), SimpleNamespace(device="/dev/ttyFAKE1")]
    with mock.patch("serial.tools.list_ports.comports", return_value=infos):
        assert list_serial_ports() == ["/dev/ttyFAKE0", "/dev/ttyFAKE1"]


def test_open_passes_settings_to_factory():
    factory = Factory()
    session = DataloggerSession(factory)
    session.open(SETTINGS)
    kwargs = factory.calls[0]
    assert kwargs["port"] == "COM-TEST"
    assert kwargs["baudrate"] == 9600
    assert kwargs["parity"] == serial.PARITY_EVEN
    assert kwargs["stopbits"] == serial.STOPBITS_TWO
    assert session.is_open() and session.connected


def test_unknown_choices_are_left_out():
    factory = Factory()
    session = DataloggerSession(factory)
    session.open(SerialSettings("COM-TEST", 9600, Parity.UNKNOWN, StopBits.UNKNOWN))
    assert "parity" not in factory.calls[0]
    assert "stopbits" not in factory.calls[0]


def test_open_failure_raises_and_reports():
    factory = Factory(error=serial.SerialException("busy"))
    session = DataloggerSession(factory)
    with pytest.raises(ConnectionError):
        session.open(SETTINGS)
    assert session.console == "Error connecting to Serial Port!"
    assert session.connected is False
    assert session.is_open() is False


def test_toggle_connects_and_requests_eeprom():
    factory = Factory()
    session = DataloggerSession(factory, live_mode=False)
    assert session.toggle_connection(SETTINGS) is True
    assert bytes(factory.port.written) == b"\x01"
    assert session.timer_running is True


def test_toggle_live_mode_request():
    factory = Factory()
    session = DataloggerSession(factory, live_mode=True)
    session.toggle_connection(SETTINGS)
    assert bytes(factory.port.written) == b"\x01"


def test_toggle_disconnects_with_stop_command():
    factory = Factory()
    session = DataloggerSession(factory)
    session.toggle_connection(SETTINGS)
    assert session.toggle_connection(SETTINGS) is False
    assert bytes(factory.port.written) == b"\x01\x04"
    assert session.status == "Disconnected"
    assert session.timer_running is False
    assert factory.port.is_open is False
    assert session.connected is False


def test_toggle_failure_propagates():
    session = DataloggerSession(Factory(error=OSError("no port")))
    with pytest.raises(ConnectionError):
        session.toggle_connection(SETTINGS)
    assert session.timer_running is False


def test_handle_incoming_logs_readings():
    factory = Factory(FakePort(bytes([21, 22])))
    session = DataloggerSession(factory)
    session.open(SETTINGS)
    assert session.handle_incoming() == 21
    assert session.handle_incoming() == 22
    assert session.console == "21\n22\n"
    assert session.status == format_reading(22)
    assert session.timer_running is True


def test_handle_incoming_bytes_are_signed():
    factory = Factory(FakePort(bytes([0xFF])))
    session = DataloggerSession(factory)
    session.open(SETTINGS)
    assert session.handle_incoming() == -1
    assert session.console == "-1\n"


def test_handle_incoming_without_data():
    session = DataloggerSession(Factory())
    session.open(SETTINGS)
    assert session.handle_incoming() is None
    assert session.console == ""


def test_handle_incoming_when_closed_raises():
    with pytest.raises(ConnectionError):
        DataloggerSession(Factory()).handle_incoming()


def test_timeout_requests_again():
    factory = Factory()
    session = DataloggerSession(factory)
    session.open(SETTINGS)
    assert session.handle_timeout() is True
    assert session.status == "Waiting Data"
    assert bytes(factory.port.written) == b"\x01"


def test_timeout_when_closed_does_nothing():
    session = DataloggerSession(Factory())
    assert session.handle_timeout() is False
    assert session.status == ""


def test_write_when_closed_raises():
    with pytest.raises(ConnectionError):
        DataloggerSession(Factory()).write(b"\x01")


def test_close_when_not_open_keeps_state():
    session = DataloggerSession(Factory())
    session.close()
    assert session.is_open() is False


def test_clear_console():
    session = DataloggerSession(Factory(FakePort(bytes([5]))))
    session.open(SETTINGS)
    session.handle_incoming()
    session.clear_console()
    assert session.console == ""


def test_save_and_load_round_trip(tmp_path):
    session = DataloggerSession(Factory(FakePort(bytes([30, 31]))))
    session.open(SETTINGS)
    session.handle_incoming()
    session.handle_incoming()
    target = tmp_path / "log.txt"
    session.save_console(target)
    other = DataloggerSession(Factory())
    other.load_console(target)
    assert other.console == session.console
    assert target.read_text(encoding="utf-8") == "30\n31\n"


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        DataloggerSession(Factory()).load_console(tmp_path / "missing.txt")
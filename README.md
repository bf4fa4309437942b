# trdatalogger

A small desktop client for a temperature datalogger connected over a serial
port. With it you can:

- pick a serial port, baud rate, parity and stop bits;
- connect to the logger and request readings, either in *Live Mode* or from
  the log stored on the device;
- watch each reading arrive in a console, with the latest value shown as a
  temperature in °C;
- save the console to a file, load an earlier log back in, or clear it;
- look up the description of the selected serial port.

While connected, the window polls the port every 10 ms. If no data has
arrived for 100 ms, the data request is sent again and the status shows
"Waiting Data". Disconnecting sends the stop-live-mode command (byte `0x04`)
before the port is closed. Each reading is one byte, shown as a signed
number (-128 to 127).

## Installation

```
pip install .
```

The only runtime dependency is `pyserial`. The window uses Tkinter, which
ships with most Python installations.

## Running

```
trdatalogger
```

This opens the main window. `trdatalogger --version` prints the version.
Choose a port (use *Refresh* if the device was plugged in after start-up),
set the line parameters, tick *Live Mode* if you want a continuous stream,
and press *Connect Serial Port*. While connected, the line settings and the
console are locked.

## Using it from Python

The window is a layer over `trdatalogger.session.DataloggerSession`, which
can be driven on its own:

```python
from trdatalogger.session import DataloggerSession, SerialSettings, list_serial_ports

session = DataloggerSession(live_mode=True)
settings = SerialSettings(port=list_serial_ports()[0], baud_rate=9600)
session.toggle_connection(settings)   # opens the port and requests data
session.handle_incoming()             # reads one byte; returns the reading or None
print(session.status, session.console)
session.save_console("readings.txt")
session.toggle_connection(settings)   # sends the stop command and closes the port
```

- `open` raises `ConnectionError` when the port cannot be opened, and puts
  "Error connecting to Serial Port!" in the console.
- `write` and `handle_incoming` raise `ConnectionError` when the port is not
  open.
- `handle_timeout` re-sends the data request and returns `True` if the port
  is open, `False` otherwise.
- `DataloggerSession(port_factory=...)` takes any callable that accepts the
  `serial.Serial` keyword arguments, which is handy for testing without a
  device.

`parity_from_index` and `stop_bits_from_index` map the option positions used
in the window to `Parity` and `StopBits` values (out-of-range positions give
`UNKNOWN`, which leaves the port's default in place), and `format_reading`
turns a reading into the `"<n>°C"` text shown in the status label.

`trdatalogger.about.AppInfo` holds the application name, version and author
used for the window title and the About dialog.

## What it does not do

The session keeps readings only as console text; it does not timestamp them,
store them in a database or plot them. It has no command-line mode for
logging without the window.

## Tests

```
pip install .[test]
pytest
```
"""Main window of the datalogger application."""

from __future__ import annotations

import argparse
import time
import tkinter as tk
from dataclasses import dataclass
from tkinter import filedialog, messagebox, ttk
from typing import NamedTuple, Optional, Sequence

import serial
from serial.tools import list_ports

from trdatalogger.about import AboutWindow, AppInfo
from trdatalogger.session import (
    DataloggerSession,
    SerialSettings,
    list_serial_ports,
    parity_from_index,
    stop_bits_from_index,
)

BAUD_RATES = ("1200", "2400", "4800", "9600", "19200", "38400", "57600", "115200")
DEFAULT_BAUD_RATE = "9600"
PARITY_LABELS = ("None", "Even", "Odd", "Space", "Mark")
STOP_BITS_LABELS = ("1", "1.5", "2")

POLL_MS = 10


class ConnectionLabels(NamedTuple):
    """Texts and input state that depend on whether the port is connected."""

    button: str
    icon: str
    inputs_enabled: bool


def connection_labels(connected: bool) -> ConnectionLabels:
    """Labels for the connect button and status icon in the given state."""
    if connected:
        return ConnectionLabels("Disconnect Serial Port", "connected", False)
    return ConnectionLabels("Connect Serial Port", "disconnected", True)


def _to_int(text: str) -> int:
    try:
        return int(str(text).strip())
    except ValueError:
        return 0


@dataclass
class _Widgets:
    port_combo: ttk.Combobox
    baud_combo: ttk.Combobox
    parity_combo: ttk.Combobox
    stop_bits_combo: ttk.Combobox
    live_var: tk.BooleanVar
    connected_var: tk.BooleanVar
    connect_button: ttk.Button
    icon_label: ttk.Label
    status_label: ttk.Label
    console: tk.Text


class MainWindow:
    """Main window; with root None it keeps its state without building widgets."""

    def __init__(
        self,
        root: Optional[tk.Tk] = None,
        info: Optional[AppInfo] = None,
        session: Optional[DataloggerSession] = None,
    ) -> None:
        self.root = root
        self.info = info or AppInfo()
        self.session = session or DataloggerSession()
        self.about = AboutWindow(root, self.info)
        self.title = self.info.window_title()

        self.ports: list[str] = []
        self.port = ""
        self.baud_rate = DEFAULT_BAUD_RATE
        self.parity_index = 0
        self.stop_bits_index = 0

        self.button_text = ""
        self.icon_text = ""
        self.inputs_enabled = True
        self.console_read_only = False

        self._polling = False
        self._last_activity = time.monotonic()
        self._shown_console: Optional[str] = None
        self._widgets: Optional[_Widgets] = None

        if root is not None:
            root.title(self.title)
            self._widgets = self._build(root)
            root.protocol("WM_DELETE_WINDOW", self._exit)

        self.refresh_serial_ports()
        self.refresh_ui()
        self._show_console()

    # ---------------------------------------------------------------- building

    def _build(self, root: tk.Tk) -> _Widgets:
        live_var = tk.BooleanVar(master=root, value=self.session.live_mode)
        connected_var = tk.BooleanVar(master=root, value=False)

        menubar = tk.Menu(root)
        file_menu = tk.Menu(menubar, tearoff=False)
        file_menu.add_command(label="Save", command=self.save_to_file)
        file_menu.add_command(label="Load", command=self.load_from_file)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self._exit)
        menubar.add_cascade(label="File", menu=file_menu)

        serial_menu = tk.Menu(menubar, tearoff=False)
        serial_menu.add_checkbutton(
            label="Connect / Disconnect Serial",
            variable=connected_var,
            command=self.connect_or_disconnect,
        )
        serial_menu.add_checkbutton(label="Live Mode", variable=live_var)
        serial_menu.add_command(label="Serial Port Info", command=self.show_port_info)
        serial_menu.add_command(label="Clear Console", command=self.clear_console)
        menubar.add_cascade(label="Serial", menu=serial_menu)

        help_menu = tk.Menu(menubar, tearoff=False)
        help_menu.add_command(label="About", command=self.show_about)
        menubar.add_cascade(label="Help", menu=help_menu)
        root.config(menu=menubar)

        settings = ttk.Frame(root, padding=8)
        settings.grid(row=0, column=0, sticky="ew")

        ttk.Label(settings, text="Port").grid(row=0, column=0, sticky="w")
        port_combo = ttk.Combobox(settings, state="readonly", width=16)
        port_combo.grid(row=0, column=1, padx=4)
        ttk.Button(settings, text="Refresh", command=self.refresh_serial_ports).grid(
            row=0, column=2, padx=4
        )

        ttk.Label(settings, text="Baud rate").grid(row=1, column=0, sticky="w")
        baud_combo = ttk.Combobox(settings, values=BAUD_RATES, width=16)
        baud_combo.set(self.baud_rate)
        baud_combo.grid(row=1, column=1, padx=4)

        ttk.Label(settings, text="Parity").grid(row=2, column=0, sticky="w")
        parity_combo = ttk.Combobox(settings, values=PARITY_LABELS, state="readonly", width=16)
        parity_combo.current(self.parity_index)
        parity_combo.grid(row=2, column=1, padx=4)

        ttk.Label(settings, text="Stop bits").grid(row=3, column=0, sticky="w")
        stop_bits_combo = ttk.Combobox(
            settings, values=STOP_BITS_LABELS, state="readonly", width=16
        )
        stop_bits_combo.current(self.stop_bits_index)
        stop_bits_combo.grid(row=3, column=1, padx=4)

        ttk.Checkbutton(settings, text="Live Mode", variable=live_var).grid(
            row=4, column=0, columnspan=2, sticky="w"
        )

        controls = ttk.Frame(root, padding=8)
        controls.grid(row=1, column=0, sticky="ew")
        connect_button = ttk.Button(controls, command=self.connect_or_disconnect)
        connect_button.grid(row=0, column=0, padx=4)
        icon_label = ttk.Label(controls)
        icon_label.grid(row=0, column=1, padx=4)
        status_label = ttk.Label(controls, text="", font=("TkDefaultFont", 14, "bold"))
        status_label.grid(row=0, column=2, padx=12)

        console_frame = ttk.Frame(root, padding=8)
        console_frame.grid(row=2, column=0, sticky="nsew")
        console = tk.Text(console_frame, width=40, height=16)
        scroll = ttk.Scrollbar(console_frame, command=console.yview)
        console.configure(yscrollcommand=scroll.set)
        console.grid(row=0, column=0, sticky="nsew")
        scroll.grid(row=0, column=1, sticky="ns")
        console_frame.rowconfigure(0, weight=1)
        console_frame.columnconfigure(0, weight=1)

        buttons = ttk.Frame(root, padding=8)
        buttons.grid(row=3, column=0, sticky="ew")
        ttk.Button(buttons, text="Write to File", command=self.save_to_file).grid(
            row=0, column=0, padx=4
        )
        ttk.Button(buttons, text="Load File", command=self.load_from_file).grid(
            row=0, column=1, padx=4
        )
        ttk.Button(buttons, text="Clear Console", command=self.clear_console).grid(
            row=0, column=2, padx=4
        )

        root.rowconfigure(2, weight=1)
        root.columnconfigure(0, weight=1)

        return _Widgets(
            port_combo=port_combo,
            baud_combo=baud_combo,
            parity_combo=parity_combo,
            stop_bits_combo=stop_bits_combo,
            live_var=live_var,
            connected_var=connected_var,
            connect_button=connect_button,
            icon_label=icon_label,
            status_label=status_label,
            console=console,
        )

    # ------------------------------------------------------------- view sync

    def _sync_from_widgets(self) -> None:
        w = self._widgets
        if w is None:
            return
        self.port = w.port_combo.get()
        self.baud_rate = w.baud_combo.get()
        self.parity_index = w.parity_combo.current()
        self.stop_bits_index = w.stop_bits_combo.current()
        self.session.live_mode = bool(w.live_var.get())
        if not self.console_read_only:
            text = w.console.get("1.0", "end-1c")
            self.session.console = text
            self._shown_console = text

    def _show_console(self) -> None:
        w = self._widgets
        if w is None:
            return
        if self.session.console != self._shown_console:
            w.console.configure(state="normal")
            w.console.delete("1.0", "end")
            w.console.insert("1.0", self.session.console)
            w.console.see("end")
            self._shown_console = self.session.console
        w.console.configure(state="disabled" if self.console_read_only else "normal")
        w.status_label.configure(text=self.session.status)

    def _settings(self) -> SerialSettings:
        return SerialSettings(
            port=self.port,
            baud_rate=_to_int(self.baud_rate),
            parity=parity_from_index(self.parity_index),
            stop_bits=stop_bits_from_index(self.stop_bits_index),
        )

    # ---------------------------------------------------------------- actions

    def refresh_ui(self) -> None:
        """Update the controls to match the connection state."""
        labels = connection_labels(self.session.connected)
        self.button_text = labels.button
        self.icon_text = labels.icon
        self.inputs_enabled = labels.inputs_enabled
        self.console_read_only = not labels.inputs_enabled

        w = self._widgets
        if w is None:
            return
        w.connect_button.configure(text=labels.button)
        w.icon_label.configure(text=labels.icon)
        w.connected_var.set(self.session.connected)
        w.port_combo.configure(state="readonly" if labels.inputs_enabled else "disabled")
        w.baud_combo.configure(state="normal" if labels.inputs_enabled else "disabled")
        for combo in (w.parity_combo, w.stop_bits_combo):
            combo.configure(state="readonly" if labels.inputs_enabled else "disabled")
        w.console.configure(state="disabled" if self.console_read_only else "normal")

    def refresh_serial_ports(self) -> None:
        """Reload the list of available serial ports."""
        self.ports = list_serial_ports()
        self.port = self.ports[0] if self.ports else ""
        w = self._widgets
        if w is not None:
            w.port_combo.configure(values=self.ports)
            w.port_combo.set(self.port)

    def connect_or_disconnect(self) -> None:
        """Disconnect if connected, otherwise connect with the chosen settings."""
        self._sync_from_widgets()
        try:
            connected = self.session.toggle_connection(self._settings())
        except (ConnectionError, serial.SerialException, OSError):
            connected = False
        self.refresh_ui()
        self._show_console()
        if connected:
            self._last_activity = time.monotonic()
            self._schedule_poll()

    def save_to_file(self) -> None:
        """Ask for a file name and write the console text to it."""
        self._sync_from_widgets()
        path = filedialog.asksaveasfilename(
            title="Save File", initialdir="/home", initialfile="untitled", **self._parent()
        )
        if not path:
            return
        try:
            self.session.save_console(path)
        except OSError:
            return

    def load_from_file(self) -> None:
        """Ask for a file name and show its contents in the console."""
        path = filedialog.askopenfilename(title="Open File", initialdir="/home", **self._parent())
        if not path:
            return
        try:
            self.session.load_console(path)
        except OSError:
            return
        self._show_console()

    def clear_console(self) -> None:
        """Empty the console."""
        self.session.clear_console()
        self._show_console()

    def show_about(self) -> Optional[tk.Toplevel]:
        """Open the About dialog."""
        if self.root is None:
            return None
        return self.about.show()

    def show_port_info(self) -> str:
        """Show the description of the selected port and return it."""
        self._sync_from_widgets()
        description = next(
            (info.description for info in list_ports.comports() if info.device == self.port),
            "",
        )
        messagebox.showinfo(
            title=f"Infos about {self.port}", message=description, **self._parent()
        )
        return description

    # ---------------------------------------------------------------- helpers

    def _parent(self) -> dict:
        return {"parent": self.root} if self.root is not None else {}

    def _schedule_poll(self) -> None:
        if self.root is not None and not self._polling:
            self._polling = True
            self.root.after(POLL_MS, self._poll)

    def _poll(self) -> None:
        self._polling = False
        if not self.session.is_open():
            return
        try:
            received = False
            while self.session.handle_incoming() is not None:
                received = True
            now = time.monotonic()
            if received:
                self._last_activity = now
            elif now - self._last_activity >= self.session.timeout_ms / 1000:
                self.session.handle_timeout()
                self._last_activity = now
        except (serial.SerialException, OSError):
            self.session.close()
            self.refresh_ui()
            self._show_console()
            return
        self._show_console()
        self._schedule_poll()

    def _exit(self) -> None:
        self.session.close()
        if self.root is not None:
            self.root.destroy()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the application."""
    info = AppInfo()
    parser = argparse.ArgumentParser(prog="trdatalogger", description=info.name)
    parser.add_argument("--version", action="version", version=f"%(prog)s {info.version}")
    parser.parse_args(argv)
    root = tk.Tk()
    MainWindow(root, info, DataloggerSession())
    root.mainloop()
    return 0
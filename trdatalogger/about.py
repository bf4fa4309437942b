"""Application identity and the About dialog."""

from __future__ import annotations

import tkinter as tk
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AppInfo:
    """Name, version and author shown in titles and the About dialog."""

    name: str = "TR Datalogger"
    version: str = "1.0-5"
    author: str = ""

    def window_title(self) -> str:
        """Title of the main window."""
        return f"{self.name}   v{self.version}   by {self.author}"

    def about_label(self) -> str:
        """Application line of the About dialog."""
        return f"{self.name}  v{self.version}"


class AboutWindow:
    """Modal dialog showing the application name, version and author."""

    def __init__(self, parent: Optional[tk.Misc] = None, info: Optional[AppInfo] = None) -> None:
        self.parent = parent
        self.info = info or AppInfo(name="", version="", author="")
        self.application_text = self.info.about_label()
        self.author_text = self.info.author
        self._window: Optional[tk.Toplevel] = None

    def show(self) -> tk.Toplevel:
        """Show the dialog modally, reusing it if it is already open."""
        if self._window is not None and self._window.winfo_exists():
            self._window.deiconify()
            self._window.lift()
            return self._window
        window = tk.Toplevel(self.parent)
        window.title("About")
        window.resizable(False, False)
        tk.Label(window, text=self.application_text, font=("TkDefaultFont", 12, "bold")).pack(
            padx=20, pady=(20, 5)
        )
        tk.Label(window, text=self.author_text).pack(padx=20, pady=5)
        tk.Button(window, text="Close", command=window.destroy).pack(pady=(5, 15))
        if self.parent is not None:
            window.transient(self.parent)
        window.grab_set()
        self._window = window
        return window
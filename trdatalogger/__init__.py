"""Client for a serial-port temperature datalogger: session, About dialog and Tkinter window."""

__version__ = "1.0.5"
__all__ = ["__version__"]
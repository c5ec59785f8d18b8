"""Mead batch tracker: SQLite records behind a full-screen terminal UI."""

__version__ = "0.1.0"

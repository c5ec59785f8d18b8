"""prompt_toolkit TUI for tracking mead batches.

This package provides a Terminal User Interface for recording batches,
their ingredients and a running brewing log.

Usage:
    mead-tracker
    python -m meadtracker.tui --config settings.yaml
"""

from __future__ import annotations

__all__ = [
    "MeadTrackerApp",
    "main",
]


def __getattr__(name: str):
    """Lazy import of TUI components."""
    if name == "MeadTrackerApp":
        from meadtracker.tui.app import MeadTrackerApp
        return MeadTrackerApp
    if name == "main":
        from meadtracker.tui.__main__ import main
        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

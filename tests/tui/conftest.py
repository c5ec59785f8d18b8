"""Shared fixtures for TUI tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator, Union

import pytest

from meadtracker.lib.store import BatchStore
from meadtracker.tui.dispatcher import EventDispatcher
from meadtracker.tui.keys import KeyCode, KeyEvent
from meadtracker.tui.models.view_state import ViewStateMachine

Key = Union[str, KeyCode, KeyEvent]


def to_event(key: Key) -> KeyEvent:
    """Build a KeyEvent from a character, a KeyCode or an event."""
    if isinstance(key, KeyEvent):
        return key
    if isinstance(key, KeyCode):
        return KeyEvent.of(key)
    return KeyEvent.typed(key)


@pytest.fixture
def machine(store: BatchStore) -> ViewStateMachine:
    """A state machine on the main menu over an empty in-memory store."""
    return ViewStateMachine(store)


@pytest.fixture
def press(machine: ViewStateMachine) -> Callable[..., None]:
    """Send keys through the dispatcher, redrawing after each like the UI does.

    Strings longer than one character are typed one character at a time.
    """
    dispatcher = EventDispatcher(machine)

    def _press(*keys: Key) -> None:
        for key in keys:
            if isinstance(key, str) and not isinstance(key, KeyCode) and len(key) > 1:
                for char in key:
                    dispatcher.dispatch(KeyEvent.typed(char))
                    machine.refresh_if_stale()
                continue
            dispatcher.dispatch(to_event(key))
            machine.refresh_if_stale()

    return _press


@pytest.fixture
def settings_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary settings file."""
    config = tmp_path / ".mead-tracker.yaml"
    config.write_text(
        f"""
tui:
  db_path: {tmp_path / "custom.db"}
  log_file: {tmp_path / "logs" / "custom.log"}
  verbose: true
  json_logs: true
""",
        encoding="utf-8",
    )
    yield config

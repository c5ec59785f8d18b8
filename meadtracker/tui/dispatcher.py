"""Routes key events into the view state machine."""

from __future__ import annotations

import logging

from meadtracker.tui.keys import KeyEvent, KeyKind
from meadtracker.tui.models.view_state import ViewStateMachine

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Feeds one key event at a time to the active view.

    Repeat and release events are dropped. Every accepted press clears the
    previous status message before the view handles it, so a message lives
    for exactly one keystroke.
    """

    def __init__(self, machine: ViewStateMachine) -> None:
        self.machine = machine

    def dispatch(self, event: KeyEvent) -> bool:
        """Handle one event. Returns False if the event was ignored."""
        if event.kind is not KeyKind.PRESS:
            return False
        self.machine.status_message = None
        logger.debug("Key %s %r in %s", event.code.value, event.char, self.machine.view.kind.value)
        self.machine.handle_key(event)
        return True

    @property
    def should_exit(self) -> bool:
        return self.machine.should_exit

"""Full-screen prompt_toolkit application for the mead tracker.

prompt_toolkit owns the terminal and the input loop. A single catch-all key
binding translates each ``KeyPress`` into a ``KeyEvent`` and hands it to the
dispatcher; ``ScreenControl`` repaints the whole screen from the state
machine on every redraw.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from prompt_toolkit import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import UIContent, UIControl

from meadtracker.lib.store import BatchStore
from meadtracker.tui.dispatcher import EventDispatcher
from meadtracker.tui.keys import KeyCode, KeyEvent, Modifier
from meadtracker.tui.models.view_state import ViewStateMachine
from meadtracker.tui.render import STYLE, Region, draw

logger = logging.getLogger(__name__)

# prompt_toolkit key -> (logical key, modifiers)
_SPECIAL_KEYS: Dict[str, Tuple[KeyCode, Tuple[Modifier, ...]]] = {
    Keys.Enter: (KeyCode.ENTER, ()),
    Keys.ControlJ: (KeyCode.ENTER, ()),
    Keys.Escape: (KeyCode.ESCAPE, ()),
    Keys.Tab: (KeyCode.TAB, ()),
    Keys.BackTab: (KeyCode.TAB, (Modifier.SHIFT,)),
    Keys.Backspace: (KeyCode.BACKSPACE, ()),
    Keys.Delete: (KeyCode.DELETE, ()),
    Keys.Left: (KeyCode.LEFT, ()),
    Keys.Right: (KeyCode.RIGHT, ()),
    Keys.Up: (KeyCode.UP, ()),
    Keys.Down: (KeyCode.DOWN, ()),
    Keys.Home: (KeyCode.HOME, ()),
    Keys.End: (KeyCode.END, ()),
}


def key_press_to_event(key_press: KeyPress) -> KeyEvent:
    """Translate a prompt_toolkit key press into a terminal-independent event.

    Printable characters arrive as themselves; everything else is a
    ``Keys`` member. Keys without a logical meaning become ``OTHER``.
    """
    key = key_press.key
    if key in _SPECIAL_KEYS:
        code, modifiers = _SPECIAL_KEYS[key]
        return KeyEvent.of(code, *modifiers)

    if isinstance(key, Keys):
        if key.value.startswith("c-"):
            return KeyEvent.of(KeyCode.OTHER, Modifier.CTRL)
        if key.value.startswith("s-"):
            return KeyEvent.of(KeyCode.OTHER, Modifier.SHIFT)
        return KeyEvent.of(KeyCode.OTHER)

    if len(key) == 1:
        return KeyEvent.typed(key)
    return KeyEvent.of(KeyCode.OTHER)


class ScreenControl(UIControl):
    """Paints the active view, reloading stale snapshots first."""

    def __init__(self, machine: ViewStateMachine) -> None:
        self.machine = machine

    def create_content(self, width: int, height: int) -> UIContent:
        self.machine.refresh_if_stale()
        lines = draw(self.machine, Region(width, height))

        def get_line(i: int) -> list[tuple[str, str]]:
            if i < len(lines):
                return lines[i]
            return []

        return UIContent(get_line=get_line, line_count=len(lines))

    def is_focusable(self) -> bool:
        return True


class MeadTrackerApp:
    """Full-screen mead tracker.

    Starts on the main menu. ``q`` on the main menu is the only way out.
    """

    def __init__(self, store: BatchStore) -> None:
        self.store = store
        self.machine = ViewStateMachine(store)
        self.dispatcher = EventDispatcher(self.machine)
        self.control = ScreenControl(self.machine)
        self.app: Application | None = None

    def run(self) -> None:
        """Run the full-screen application until the user quits."""
        self.app = Application(
            layout=Layout(Window(content=self.control, always_hide_cursor=True)),
            key_bindings=self._create_bindings(),
            style=STYLE,
            full_screen=True,
        )
        # Escape should act immediately, not wait for a possible sequence
        self.app.ttimeoutlen = 0.05
        logger.info("Starting mead tracker UI")
        self.app.run()
        logger.info("Mead tracker UI closed")

    def _create_bindings(self) -> KeyBindings:
        """Create key bindings."""
        kb = KeyBindings()

        @kb.add(Keys.Any)
        def any_key_(event: Any) -> None:
            for key_press in event.key_sequence:
                self.dispatcher.dispatch(key_press_to_event(key_press))
            if self.dispatcher.should_exit:
                event.app.exit()

        return kb

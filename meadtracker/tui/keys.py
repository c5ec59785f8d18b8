"""Terminal-independent key events.

The dispatcher and screen handlers only see ``KeyEvent`` values; the
prompt_toolkit adapter in ``app.py`` is the one place that knows how the
terminal encodes keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyCode(str, Enum):
    """Logical key identity."""

    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    OTHER = "other"


class Modifier(str, Enum):
    """Modifier held with a key."""

    SHIFT = "shift"
    CTRL = "ctrl"
    ALT = "alt"


class KeyKind(str, Enum):
    """Phase of a key event. Only presses are acted on."""

    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    """A single key event.

    Attributes:
        code: Which key
        char: The typed character for ``KeyCode.CHAR`` events
        modifiers: Modifiers held with the key
        kind: Press, repeat or release
    """

    code: KeyCode
    char: str = ""
    modifiers: frozenset[Modifier] = frozenset()
    kind: KeyKind = KeyKind.PRESS

    @classmethod
    def of(cls, code: KeyCode, *modifiers: Modifier) -> "KeyEvent":
        """Build a non-character key event."""
        return cls(code=code, modifiers=frozenset(modifiers))

    @classmethod
    def typed(cls, char: str) -> "KeyEvent":
        """Build a printable character event."""
        return cls(code=KeyCode.CHAR, char=char)

    @property
    def shift(self) -> bool:
        return Modifier.SHIFT in self.modifiers

    def is_char(self, char: str) -> bool:
        """True for a plain press of exactly this character."""
        return self.code is KeyCode.CHAR and self.char == char and Modifier.CTRL not in self.modifiers

    @property
    def is_printable(self) -> bool:
        return (
            self.code is KeyCode.CHAR
            and len(self.char) == 1
            and self.char.isprintable()
            and Modifier.CTRL not in self.modifiers
        )

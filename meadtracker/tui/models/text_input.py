"""Single-line text field backed by a prompt_toolkit Buffer."""

from __future__ import annotations

from typing import Callable, Optional

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document


class TextInput:
    """An editable text field.

    Text and cursor live in a ``Buffer``, which keeps the cursor within
    ``0 <= cursor <= len(text)``. Focus is not stored here: the owning
    screen binds a focus check with ``bind_focus()`` and ``focused`` asks
    it, so two editors on a screen can never both report focus.

    Attributes:
        label: Field label shown next to or above the value
        placeholder: Hint shown while the field is empty and unfocused
        buffer: The underlying prompt_toolkit buffer
    """

    def __init__(self, label: str, *, value: str = "", placeholder: str = "") -> None:
        self.label = label
        self.placeholder = placeholder
        self.buffer = Buffer(name=label, multiline=False)
        self._focus_check: Optional[Callable[[], bool]] = None
        if value:
            self.set_value(value)

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def cursor(self) -> int:
        return self.buffer.cursor_position

    @property
    def focused(self) -> bool:
        return self._focus_check is not None and self._focus_check()

    def bind_focus(self, check: Callable[[], bool]) -> None:
        """Attach the callable that decides whether this field has focus."""
        self._focus_check = check

    def insert(self, char: str) -> None:
        """Insert at the cursor and advance past the inserted text."""
        self.buffer.insert_text(char, fire_event=False)

    def delete_before(self) -> None:
        """Backspace: remove the character before the cursor."""
        self.buffer.delete_before_cursor(1)

    def delete_at(self) -> None:
        """Forward delete: remove the character under the cursor."""
        self.buffer.delete(1)

    def move_left(self) -> None:
        self.buffer.cursor_left()

    def move_right(self) -> None:
        self.buffer.cursor_right()

    def move_start(self) -> None:
        self.buffer.cursor_position = 0

    def move_end(self) -> None:
        self.buffer.cursor_position = len(self.buffer.text)

    def clear(self) -> None:
        self.set_value("")

    def set_value(self, value: str) -> None:
        """Replace the text and put the cursor at the end."""
        self.buffer.set_document(Document(value, len(value)), bypass_readonly=True)

    def numeric_value(self) -> Optional[float]:
        """The text parsed as a decimal number, or None if it is not one."""
        try:
            value = float(self.text.strip())
        except ValueError:
            return None
        # nan/inf parse but are not usable readings
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return value

    def __repr__(self) -> str:
        return f"TextInput({self.label!r}, text={self.text!r}, cursor={self.cursor})"

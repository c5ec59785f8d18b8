"""UI-agnostic state management for the TUI.

This package provides testable state classes that can be used without a
terminal. Screen states own their text editors and field navigators; the
view state machine owns the screen states and talks to the store.
"""

from __future__ import annotations

from meadtracker.tui.models.navigation import (
    DETAIL_FIELDS,
    INGREDIENT_FIELDS,
    NEW_BATCH_FIELDS,
    FieldNavigator,
    FormField,
)
from meadtracker.tui.models.text_input import TextInput

__all__ = [
    "DETAIL_FIELDS",
    "INGREDIENT_FIELDS",
    "NEW_BATCH_FIELDS",
    "BatchDetailState",
    "BatchListState",
    "FieldNavigator",
    "FormField",
    "MenuState",
    "Mode",
    "NewBatchForm",
    "TextInput",
    "View",
    "ViewKind",
    "ViewStateMachine",
]


def __getattr__(name: str):
    """Lazy import of screen and view state (they depend on tui.constants)."""
    if name in ("BatchDetailState", "BatchListState", "MenuState", "Mode", "NewBatchForm"):
        from meadtracker.tui.models import screens
        return getattr(screens, name)
    if name in ("View", "ViewKind", "ViewStateMachine"):
        from meadtracker.tui.models import view_state
        return getattr(view_state, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

"""The active view and the rules for moving between views.

``ViewStateMachine`` is the one object that owns the screen states and the
store handle. A key event is routed to the handler of the active view,
which mutates at most one screen. Before each frame ``refresh_if_stale()``
reloads the active screen from the store when its snapshot is marked stale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from meadtracker.lib.errors import StoreError
from meadtracker.lib.store import BatchStore
from meadtracker.tui.constants import (
    MENU_LIST,
    MENU_NEW,
    MSG_CREATED,
    MSG_DELETED,
    MSG_ERROR,
    MSG_UPDATED,
)
from meadtracker.tui.keys import KeyCode, KeyEvent
from meadtracker.tui.models.screens import (
    BatchDetailState,
    BatchListState,
    MenuState,
    Mode,
    NewBatchForm,
)
from meadtracker.tui.models.text_input import TextInput

logger = logging.getLogger(__name__)


class ViewKind(str, Enum):
    MENU = "menu"
    LIST = "list"
    NEW_BATCH = "new_batch"
    DETAIL = "detail"


@dataclass(frozen=True)
class View:
    """The active view. ``batch_id`` is set only for the detail view."""

    kind: ViewKind
    batch_id: Optional[int] = None

    @classmethod
    def menu(cls) -> "View":
        return cls(ViewKind.MENU)

    @classmethod
    def batch_list(cls) -> "View":
        return cls(ViewKind.LIST)

    @classmethod
    def new_batch(cls) -> "View":
        return cls(ViewKind.NEW_BATCH)

    @classmethod
    def detail(cls, batch_id: int) -> "View":
        return cls(ViewKind.DETAIL, batch_id)


def _edit_buffer(text_input: Optional[TextInput], event: KeyEvent) -> bool:
    """Apply a cursor or editing key to a buffer. Returns True if handled."""
    if text_input is None:
        return False
    if event.is_printable:
        text_input.insert(event.char)
    elif event.code is KeyCode.BACKSPACE:
        text_input.delete_before()
    elif event.code is KeyCode.DELETE:
        text_input.delete_at()
    elif event.code is KeyCode.LEFT:
        text_input.move_left()
    elif event.code is KeyCode.RIGHT:
        text_input.move_right()
    elif event.code is KeyCode.HOME:
        text_input.move_start()
    elif event.code is KeyCode.END:
        text_input.move_end()
    else:
        return False
    return True


class ViewStateMachine:
    """Active view, screen states and transitions.

    Attributes:
        view: The active view
        status_message: One-shot message for the status line, or None
        should_exit: Set when the user quits from the main menu
    """

    def __init__(self, store: BatchStore) -> None:
        self.store = store
        self.view = View.menu()
        self.status_message: Optional[str] = None
        self.should_exit = False

        self.menu = MenuState()
        self.batch_list = BatchListState()
        self.new_batch = NewBatchForm()
        self.detail = BatchDetailState()

    # ==================== TRANSITIONS ====================

    def go_menu(self) -> None:
        self.view = View.menu()

    def go_list(self) -> None:
        self.batch_list.needs_refresh = True
        self.view = View.batch_list()

    def go_new_batch(self) -> None:
        self.new_batch = NewBatchForm()
        self.view = View.new_batch()

    def go_detail(self, batch_id: int) -> None:
        self.detail.enter(batch_id)
        self.view = View.detail(batch_id)

    def _report(self, error: StoreError) -> None:
        self.status_message = MSG_ERROR.format(error=error)

    # ==================== RELOAD ====================

    def refresh_if_stale(self) -> None:
        """Reload the active screen's snapshot when it is marked stale.

        A failed reload keeps the previous snapshot and the stale flag, so
        the next frame tries again.
        """
        if self.view.kind is ViewKind.LIST and self.batch_list.needs_refresh:
            try:
                batches = self.store.get_all_batches()
            except StoreError as e:
                logger.warning("Could not reload mead list: %s", e)
                return
            self.batch_list.set_batches(batches)

        elif self.view.kind is ViewKind.DETAIL and self.detail.needs_refresh:
            batch_id = self.view.batch_id
            if batch_id is None:
                self.detail.mark_missing()
                return
            try:
                batch = self.store.get_batch(batch_id)
                if batch is None:
                    logger.info("Mead %d no longer exists", batch_id)
                    self.detail.mark_missing()
                    return
                ingredients = self.store.get_ingredients(batch_id)
                log_entries = self.store.get_log_entries(batch_id)
            except StoreError as e:
                logger.warning("Could not reload mead %d: %s", batch_id, e)
                return
            self.detail.set_batch(batch, ingredients, log_entries)

    # ==================== KEY HANDLING ====================

    def handle_key(self, event: KeyEvent) -> None:
        """Route one key press to the active view's handler."""
        kind = self.view.kind
        if kind is ViewKind.MENU:
            self._handle_menu(event)
        elif kind is ViewKind.LIST:
            self._handle_list(event)
        elif kind is ViewKind.NEW_BATCH:
            self._handle_new_batch(event)
        elif kind is ViewKind.DETAIL:
            self._handle_detail(event)

    def _handle_menu(self, event: KeyEvent) -> None:
        menu = self.menu
        if event.is_char("q"):
            self.should_exit = True
        elif event.code is KeyCode.UP or event.is_char("k"):
            menu.previous()
        elif event.code is KeyCode.DOWN or event.is_char("j"):
            menu.next()
        elif event.code is KeyCode.TAB:
            if event.shift:
                menu.previous()
            else:
                menu.next()
        elif event.code is KeyCode.ENTER:
            if menu.selected == MENU_LIST:
                self.go_list()
            elif menu.selected == MENU_NEW:
                self.go_new_batch()

    def _handle_list(self, event: KeyEvent) -> None:
        batch_list = self.batch_list
        if event.code is KeyCode.ESCAPE:
            self.go_menu()
        elif event.code is KeyCode.UP or event.is_char("k"):
            batch_list.previous()
        elif event.code is KeyCode.DOWN or event.is_char("j"):
            batch_list.next()
        elif event.code is KeyCode.TAB:
            if event.shift:
                batch_list.previous()
            else:
                batch_list.next()
        elif event.code is KeyCode.ENTER:
            selected = batch_list.selected_batch
            if selected is not None:
                self.go_detail(selected.id)
        elif event.is_char("d"):
            selected = batch_list.selected_batch
            if selected is None:
                return
            try:
                self.store.delete_batch(selected.id)
            except StoreError as e:
                self._report(e)
                return
            batch_list.needs_refresh = True
            self.status_message = MSG_DELETED.format(name=selected.name)

    def _handle_new_batch(self, event: KeyEvent) -> None:
        form = self.new_batch
        code = event.code

        if code is KeyCode.ESCAPE:
            if form.is_editing:
                form.cancel_edit()
            else:
                self.go_menu()
        elif code is KeyCode.TAB:
            if event.shift:
                form.previous_field()
            else:
                form.next_field()
        elif code in (KeyCode.UP, KeyCode.DOWN):
            if not form.is_editing:
                if code is KeyCode.UP:
                    form.previous_field()
                else:
                    form.next_field()
        elif code is KeyCode.ENTER:
            if form.on_submit:
                self._create_batch(form)
            else:
                form.next_field()
        elif event.is_printable or code is KeyCode.BACKSPACE:
            # Typing on a text slot starts editing it
            if form.is_editing or form.begin_edit():
                _edit_buffer(form.current_input, event)
        elif form.is_editing:
            _edit_buffer(form.current_input, event)

    def _create_batch(self, form: NewBatchForm) -> None:
        batch = form.build_batch()
        try:
            self.store.create_batch(batch)
        except StoreError as e:
            self._report(e)
            return
        self.status_message = MSG_CREATED.format(name=batch.name)
        self.go_menu()

    def _handle_detail(self, event: KeyEvent) -> None:
        detail = self.detail
        code = event.code

        if code is KeyCode.ESCAPE:
            if detail.is_editing:
                detail.cancel_edit()
            elif detail.in_sub_form:
                detail.close_sub_form()
            else:
                self.go_list()
        elif code is KeyCode.TAB:
            if event.shift:
                detail.previous_field()
            else:
                detail.next_field()
        elif code in (KeyCode.UP, KeyCode.DOWN):
            if not detail.in_input_mode:
                if code is KeyCode.UP:
                    detail.previous_field()
                else:
                    detail.next_field()
        elif code is KeyCode.ENTER:
            self._detail_enter()
        elif code in (KeyCode.LEFT, KeyCode.RIGHT) and detail.on_status:
            detail.cycle_status(forward=code is KeyCode.RIGHT)
        elif code in (KeyCode.LEFT, KeyCode.RIGHT) and detail.on_ingredient_type:
            detail.cycle_ingredient_type(forward=code is KeyCode.RIGHT)
        elif not detail.in_input_mode and event.is_char("l"):
            detail.open_log_form()
        elif not detail.in_input_mode and event.is_char("i"):
            detail.open_ingredient_form()
        elif not detail.in_input_mode and event.is_char("s"):
            self._save_batch()
        elif event.is_printable or code is KeyCode.BACKSPACE:
            if detail.in_input_mode or detail.begin_edit():
                _edit_buffer(detail.current_input, event)
        elif detail.in_input_mode:
            _edit_buffer(detail.current_input, event)

    def _detail_enter(self) -> None:
        detail = self.detail
        if detail.mode is Mode.LOG_ENTRY:
            entry = detail.build_log_entry()
            if entry is None:
                return
            try:
                self.store.create_log_entry(entry)
            except StoreError as e:
                self._report(e)
                return
            detail.clear_log_input()
            detail.close_sub_form()
            detail.needs_refresh = True
        elif detail.mode is Mode.INGREDIENT_ENTRY:
            ingredient = detail.build_ingredient()
            if ingredient is None:
                return
            try:
                self.store.create_ingredient(ingredient)
            except StoreError as e:
                self._report(e)
                return
            detail.clear_ingredient_inputs()
            detail.close_sub_form()
            detail.needs_refresh = True
        else:
            detail.toggle_edit()

    def _save_batch(self) -> None:
        updated = self.detail.updated_batch()
        if updated is None:
            return
        try:
            self.store.update_batch(updated)
        except StoreError as e:
            self._report(e)
            return
        self.status_message = MSG_UPDATED
        self.detail.needs_refresh = True

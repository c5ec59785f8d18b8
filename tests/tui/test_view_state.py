"""Tests for view transitions, key handling and the reload protocol.

Keys go through the dispatcher and each key is followed by a reload, the
same order the running application uses.
"""

from __future__ import annotations

import pytest

from meadtracker.lib.errors import StoreError
from meadtracker.lib.models import Batch, BatchStatus, IngredientType
from meadtracker.lib.store import BatchStore
from meadtracker.tui.keys import KeyCode, KeyEvent, Modifier
from meadtracker.tui.models import FormField, Mode, View, ViewKind, ViewStateMachine

ENTER = KeyCode.ENTER
ESC = KeyCode.ESCAPE
TAB = KeyCode.TAB
UP = KeyCode.UP
DOWN = KeyCode.DOWN
LEFT = KeyCode.LEFT
RIGHT = KeyCode.RIGHT
BACKSPACE = KeyCode.BACKSPACE
SHIFT_TAB = KeyEvent.of(KeyCode.TAB, Modifier.SHIFT)


def _fail(operation: str):
    def raiser(*args, **kwargs):
        raise StoreError(operation, cause=RuntimeError("disk I/O error"))

    return raiser


@pytest.fixture
def seeded(store: BatchStore) -> int:
    """Store one batch and return its id."""
    return store.create_batch(
        Batch(name="Blueberry Melomel", current_gravity=1.050, yan_added=100.0)
    )


class TestMenu:
    """Tests for the main menu."""

    def test_quit(self, machine: ViewStateMachine, press) -> None:
        """q on the main menu asks to exit."""
        press("q")
        assert machine.should_exit is True

    def test_navigation_wraps_with_all_keys(self, machine: ViewStateMachine, press) -> None:
        """Arrows, j/k and Tab all move the menu selection with wraparound."""
        press(DOWN)
        assert machine.menu.selected == 1
        press(DOWN)
        assert machine.menu.selected == 0
        press("k")
        assert machine.menu.selected == 1
        press("j", TAB)
        assert machine.menu.selected == 1
        press(SHIFT_TAB, UP)
        assert machine.menu.selected == 1

    def test_enter_opens_list_or_form(self, machine: ViewStateMachine, press) -> None:
        """Enter opens the selected menu entry."""
        press(ENTER)
        assert machine.view.kind is ViewKind.LIST
        press(ESC, DOWN, ENTER)
        assert machine.view.kind is ViewKind.NEW_BATCH

    def test_other_keys_ignored(self, machine: ViewStateMachine, press) -> None:
        """Unbound keys leave the menu as it is."""
        press("x", ESC, LEFT)
        assert machine.view.kind is ViewKind.MENU
        assert machine.should_exit is False


class TestEmptyList:
    """The list screen with no batches stored."""

    def test_empty_list_commands_are_noops(self, machine: ViewStateMachine, press) -> None:
        """Delete and open do nothing on an empty list."""
        press(ENTER)
        assert machine.batch_list.is_empty

        press("d", ENTER, DOWN)

        assert machine.view.kind is ViewKind.LIST
        assert machine.status_message is None

        press(ESC)
        assert machine.view.kind is ViewKind.MENU


class TestNewBatchForm:
    """Tests for the new mead form."""

    def test_typing_auto_enters_edit_mode(self, machine: ViewStateMachine, press) -> None:
        """A printable key while browsing a text slot starts editing it."""
        press(DOWN, ENTER)
        form = machine.new_batch
        assert form.mode is Mode.BROWSING

        press("M")

        assert form.mode is Mode.EDITING_FIELD
        assert form.inputs[FormField.NAME].text == "M"

    def test_backspace_auto_enters_edit_mode(self, machine: ViewStateMachine, press) -> None:
        """Backspace while browsing a text slot starts editing it."""
        press(DOWN, ENTER, TAB, TAB, TAB)
        form = machine.new_batch
        assert form.current_field is FormField.HONEY_AMOUNT

        press(BACKSPACE)

        assert form.is_editing
        assert form.inputs[FormField.HONEY_AMOUNT].text == "3."

    def test_up_down_only_while_browsing(self, machine: ViewStateMachine, press) -> None:
        """Up and Down move between fields only when not editing."""
        press(DOWN, ENTER, "abc")
        form = machine.new_batch
        press(DOWN)
        assert form.current_field is FormField.NAME

        press(TAB)
        assert form.current_field is FormField.START_DATE
        assert form.mode is Mode.BROWSING
        press(DOWN)
        assert form.current_field is FormField.HONEY_TYPE

    def test_cursor_keys_only_while_editing(self, machine: ViewStateMachine, press) -> None:
        """Left and Right move the cursor only when editing."""
        press(DOWN, ENTER, "ab")
        name = machine.new_batch.inputs[FormField.NAME]
        press(LEFT, "X")
        assert name.text == "aXb"

        press(ESC)
        assert machine.new_batch.mode is Mode.BROWSING
        press(LEFT)
        assert name.cursor == 2

    def test_escape_leaves_edit_then_form(self, machine: ViewStateMachine, press) -> None:
        """Escape stops editing first, then leaves the form."""
        press(DOWN, ENTER, "a", ESC)
        assert machine.view.kind is ViewKind.NEW_BATCH
        press(ESC)
        assert machine.view.kind is ViewKind.MENU

    def test_enter_moves_to_next_field(self, machine: ViewStateMachine, press) -> None:
        """Enter on a text slot moves to the next field."""
        press(DOWN, ENTER, ENTER)
        assert machine.new_batch.current_field is FormField.START_DATE
        press("x", ENTER)
        assert machine.new_batch.current_field is FormField.HONEY_TYPE
        assert machine.new_batch.mode is Mode.BROWSING

    def test_typing_on_submit_is_ignored(self, machine: ViewStateMachine, press) -> None:
        """Typing on the submit slot does not start editing."""
        press(DOWN, ENTER, SHIFT_TAB)
        assert machine.new_batch.on_submit
        press("z", BACKSPACE)
        assert machine.new_batch.mode is Mode.BROWSING

    def test_form_is_fresh_on_each_visit(self, machine: ViewStateMachine, press) -> None:
        """Leaving and reopening the form discards what was typed."""
        press(DOWN, ENTER, "draft", ESC, ESC, ENTER)
        assert machine.new_batch.inputs[FormField.NAME].text == ""
        assert machine.new_batch.current_field is FormField.NAME

    def test_unparsable_numbers_fall_back_on_submit(
        self, machine: ViewStateMachine, store: BatchStore, press
    ) -> None:
        """Unparsable numeric fields are stored as their fallback values."""
        press(DOWN, ENTER, "Odd")
        press(TAB, TAB, TAB)
        assert machine.new_batch.current_field is FormField.HONEY_AMOUNT
        press(KeyCode.END, BACKSPACE, BACKSPACE, BACKSPACE, "lots")
        press(TAB, TAB, TAB, KeyCode.END, BACKSPACE, BACKSPACE, BACKSPACE, BACKSPACE, BACKSPACE, "??")
        assert machine.new_batch.current_field is FormField.STARTING_GRAVITY
        press(SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB)
        assert machine.new_batch.on_submit
        press(ENTER)

        (batch,) = store.get_all_batches()
        assert batch.name == "Odd"
        assert batch.honey_amount_lbs == 0.0
        assert batch.starting_gravity == 1.100
        assert batch.current_gravity == 1.100
        assert batch.yan_required == 200.0

    def test_store_error_keeps_form(
        self, machine: ViewStateMachine, store: BatchStore, press, monkeypatch
    ) -> None:
        """A failed create keeps the form and its text and reports the error."""
        monkeypatch.setattr(store, "create_batch", _fail("create mead"))
        press(DOWN, ENTER, "Doomed", SHIFT_TAB, ENTER)

        assert machine.view.kind is ViewKind.NEW_BATCH
        assert machine.status_message == "Error: create mead failed: disk I/O error"
        assert machine.new_batch.inputs[FormField.NAME].text == "Doomed"


class TestRoundTrip:
    """Create through the form, then find the batch in the list and detail."""

    def test_create_list_detail(self, machine: ViewStateMachine, press) -> None:
        """A batch created in the form is listed and opens in detail unchanged."""
        press(DOWN, ENTER, "Traditional")
        press(TAB, TAB, "Clover", TAB, TAB, "D47")
        press(SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB, SHIFT_TAB)
        assert machine.new_batch.on_submit
        press(ENTER)

        assert machine.view.kind is ViewKind.MENU
        assert machine.status_message == "Created mead: Traditional"

        press(UP, ENTER)
        assert machine.view.kind is ViewKind.LIST
        (listed,) = machine.batch_list.batches
        assert listed.name == "Traditional"
        assert listed.honey_type == "Clover"
        assert listed.yeast_strain == "D47"
        assert listed.status is BatchStatus.PRIMARY

        assert listed.honey_amount_lbs == 3.0
        assert listed.target_abv == 14.0
        assert listed.starting_gravity == 1.100
        assert listed.current_gravity == listed.starting_gravity
        assert listed.volume_gallons == 1.0
        assert listed.yan_required == 200.0
        assert listed.yan_added == 0.0

        press(ENTER)
        assert machine.view == machine.view.detail(listed.id)
        assert machine.detail.batch == listed
        assert machine.detail.inputs[FormField.NAME].text == "Traditional"
        assert machine.detail.inputs[FormField.CURRENT_GRAVITY].text == "1.100"
        assert machine.detail.inputs[FormField.YAN_ADDED].text == "0"
        assert machine.detail.status is BatchStatus.PRIMARY

    def test_status_message_clears_on_next_key(self, machine: ViewStateMachine, press) -> None:
        """The status message lasts for one keystroke."""
        press(DOWN, ENTER, "X", SHIFT_TAB, ENTER)
        assert machine.status_message is not None
        press(DOWN)
        assert machine.status_message is None


class TestList:
    """Tests for the list screen with data."""

    def test_delete_selected(
        self, machine: ViewStateMachine, store: BatchStore, seeded: int, press
    ) -> None:
        """d deletes the highlighted batch and reloads the list."""
        press(ENTER, "d")
        assert machine.status_message == "Deleted mead: Blueberry Melomel"
        assert machine.batch_list.is_empty
        assert store.get_batch(seeded) is None

    def test_delete_error_shows_status(
        self, machine: ViewStateMachine, store: BatchStore, seeded: int, press, monkeypatch
    ) -> None:
        """A failed delete reports the error and keeps the row."""
        monkeypatch.setattr(store, "delete_batch", _fail("delete mead"))
        press(ENTER, "d")
        assert machine.status_message == "Error: delete mead failed: disk I/O error"
        assert len(machine.batch_list.batches) == 1

    def test_selection_persists_between_visits(
        self, machine: ViewStateMachine, store: BatchStore, press
    ) -> None:
        """The highlighted row is remembered when returning to the list."""
        for name in ("a", "b", "c"):
            store.create_batch(Batch(name=name))
        press(ENTER, DOWN, DOWN)
        assert machine.batch_list.selected == 2
        press(ESC, ENTER)
        assert machine.batch_list.selected == 2

    def test_reload_failure_keeps_snapshot(
        self, machine: ViewStateMachine, store: BatchStore, seeded: int, press, monkeypatch
    ) -> None:
        """A failed list reload keeps the old rows and retries next frame."""
        press(ENTER)
        assert len(machine.batch_list.batches) == 1

        monkeypatch.setattr(store, "get_all_batches", _fail("load meads"))
        press(ESC, ENTER)

        assert machine.batch_list.needs_refresh is True
        assert len(machine.batch_list.batches) == 1

        monkeypatch.undo()
        machine.refresh_if_stale()
        assert machine.batch_list.needs_refresh is False


class TestDetail:
    """Tests for the detail screen."""

    @pytest.fixture
    def on_detail(self, machine: ViewStateMachine, seeded: int, press) -> ViewStateMachine:
        press(ENTER, ENTER)
        assert machine.view.kind is ViewKind.DETAIL
        return machine

    def test_edit_and_save(self, on_detail: ViewStateMachine, store: BatchStore, seeded: int, press) -> None:
        """Edited readings and status are saved with s."""
        detail = on_detail.detail
        press(DOWN, DOWN)
        assert detail.current_field is FormField.CURRENT_GRAVITY
        press(BACKSPACE, BACKSPACE, BACKSPACE, BACKSPACE, BACKSPACE, "1.010", ENTER)
        assert detail.mode is Mode.BROWSING
        press(UP, RIGHT, RIGHT)
        assert detail.status is BatchStatus.SECONDARY

        press("s")

        assert on_detail.status_message == "Mead updated!"
        saved = store.get_batch(seeded)
        assert saved is not None
        assert saved.current_gravity == 1.010
        assert saved.status is BatchStatus.SECONDARY
        assert detail.inputs[FormField.CURRENT_GRAVITY].text == "1.010"

    def test_enter_on_status_cycles(self, on_detail: ViewStateMachine, press) -> None:
        """Enter and the arrow keys cycle the status in both directions."""
        press(DOWN, ENTER)
        assert on_detail.detail.status is BatchStatus.PRIMARY
        press(LEFT, LEFT)
        assert on_detail.detail.status is BatchStatus.FINISHED

    def test_typing_on_status_is_noop(self, on_detail: ViewStateMachine, press) -> None:
        """Typing on the status slot changes nothing."""
        press(DOWN, "x", BACKSPACE)
        assert on_detail.detail.mode is Mode.BROWSING
        assert on_detail.detail.status is BatchStatus.PLANNING

    def test_command_letters_while_editing_are_text(self, on_detail: ViewStateMachine, press) -> None:
        """Command letters are typed as text while editing."""
        press(DOWN, DOWN, DOWN, DOWN)
        assert on_detail.detail.current_field is FormField.NOTES
        press("x", "l", "i", "s")
        assert on_detail.detail.inputs[FormField.NOTES].text == "xlis"
        assert on_detail.detail.mode is Mode.EDITING_FIELD

    def test_add_log_entry(self, on_detail: ViewStateMachine, store: BatchStore, seeded: int, press) -> None:
        """An empty log entry is refused; a written one is stored."""
        press("l")
        assert on_detail.detail.mode is Mode.LOG_ENTRY
        press(ENTER)
        assert on_detail.detail.mode is Mode.LOG_ENTRY

        press("Pitched yeast", ENTER)

        assert on_detail.detail.mode is Mode.BROWSING
        (entry,) = on_detail.detail.log_entries
        assert entry.entry_text == "Pitched yeast"
        assert on_detail.detail.log_input.text == ""
        assert len(store.get_log_entries(seeded)) == 1

    def test_add_ingredient(self, on_detail: ViewStateMachine, store: BatchStore, seeded: int, press) -> None:
        """The ingredient sub-form stores name, amount, unit and type."""
        press("i", "Blueberries", TAB, "2.5", TAB, BACKSPACE, BACKSPACE, "lbs", TAB)
        assert on_detail.detail.on_ingredient_type
        press(RIGHT, "q")
        press(ENTER)

        (ingredient,) = store.get_ingredients(seeded)
        assert ingredient.name == "Blueberries"
        assert ingredient.amount == 2.5
        assert ingredient.unit == "lbs"
        assert ingredient.ingredient_type is IngredientType.SPICE
        assert on_detail.detail.mode is Mode.BROWSING
        assert len(on_detail.detail.ingredients) == 1

    def test_ingredient_without_name_stays_open(self, on_detail: ViewStateMachine, press) -> None:
        """An ingredient without a name is not saved."""
        press("i", TAB, "3", ENTER)
        assert on_detail.detail.mode is Mode.INGREDIENT_ENTRY

    def test_sub_form_error_keeps_form_open(
        self, on_detail: ViewStateMachine, store: BatchStore, press, monkeypatch
    ) -> None:
        """A failed save keeps the sub-form and its text."""
        monkeypatch.setattr(store, "create_log_entry", _fail("add log entry"))
        press("l", "note", ENTER)
        assert on_detail.detail.mode is Mode.LOG_ENTRY
        assert on_detail.detail.log_input.text == "note"
        assert on_detail.status_message == "Error: add log entry failed: disk I/O error"

    def test_escape_closes_sub_form_then_screen(self, on_detail: ViewStateMachine, press) -> None:
        """Escape closes the sub-form, then returns to the list."""
        press(DOWN, DOWN, "i")
        assert on_detail.detail.mode is Mode.INGREDIENT_ENTRY
        press(ESC)
        assert on_detail.detail.mode is Mode.BROWSING
        assert on_detail.detail.current_field is FormField.CURRENT_GRAVITY
        press(ESC)
        assert on_detail.view.kind is ViewKind.LIST
        assert on_detail.batch_list.needs_refresh is False

    def test_escape_leaves_edit_mode_first(self, on_detail: ViewStateMachine, press) -> None:
        """Escape while editing only stops editing."""
        press("a")
        assert on_detail.detail.is_editing
        press(ESC)
        assert on_detail.view.kind is ViewKind.DETAIL
        assert on_detail.detail.mode is Mode.BROWSING

    def test_missing_batch_shows_not_found(
        self, on_detail: ViewStateMachine, store: BatchStore, seeded: int
    ) -> None:
        """A batch deleted elsewhere reloads to the not-found state."""
        store.delete_batch(seeded)
        on_detail.detail.needs_refresh = True
        on_detail.refresh_if_stale()

        assert on_detail.detail.batch is None
        assert on_detail.detail.needs_refresh is False

    def test_partial_reload_failure_is_atomic(
        self, on_detail: ViewStateMachine, store: BatchStore, press, monkeypatch
    ) -> None:
        """If any detail query fails, nothing in the snapshot changes."""
        before = on_detail.detail.batch
        monkeypatch.setattr(store, "get_log_entries", _fail("load log entries"))
        press("s")

        assert on_detail.detail.needs_refresh is True
        assert on_detail.detail.batch is before

    def test_status_only_save_keeps_precise_readings(
        self, machine: ViewStateMachine, store: BatchStore, press
    ) -> None:
        """Readings shown rounded in the editors are stored unchanged when not edited."""
        batch_id = store.create_batch(Batch(name="Session", current_gravity=1.0125, yan_added=12.5))
        press(ENTER, ENTER)
        assert machine.detail.inputs[FormField.YAN_ADDED].text == "12"

        press(DOWN, RIGHT, "s")

        saved = store.get_batch(batch_id)
        assert saved is not None
        assert saved.status is BatchStatus.PRIMARY
        assert saved.current_gravity == 1.0125
        assert saved.yan_added == 12.5

    def test_detail_view_without_id_shows_not_found(self, machine: ViewStateMachine) -> None:
        """A detail view with no batch id reloads to the not-found state."""
        machine.view = View(ViewKind.DETAIL)

        machine.refresh_if_stale()

        assert machine.detail.batch is None
        assert machine.detail.needs_refresh is False

"""Per-screen state: selections, editors, navigators and interaction mode.

Nothing here touches the store or the terminal. The view state machine
decides what a key means and calls into these objects; the renderer only
reads them.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from meadtracker.lib.models import (
    Batch,
    BatchStatus,
    Ingredient,
    IngredientType,
    LogEntry,
    today_str,
)
from meadtracker.tui.constants import (
    DEFAULT_INGREDIENT_TYPE,
    DEFAULT_INGREDIENT_UNIT,
    FIELD_LABELS,
    FIELD_PLACEHOLDERS,
    LOG_ENTRY_LABEL,
    MENU_OPTIONS,
    NEW_BATCH_SEEDS,
    NUMERIC_FALLBACKS,
)
from meadtracker.tui.models.navigation import (
    DETAIL_FIELDS,
    INGREDIENT_FIELDS,
    NEW_BATCH_FIELDS,
    FieldNavigator,
    FormField,
)
from meadtracker.tui.models.text_input import TextInput


class Mode(str, Enum):
    """What keystrokes on a form screen currently act on."""

    BROWSING = "browsing"
    EDITING_FIELD = "editing_field"
    LOG_ENTRY = "log_entry"
    INGREDIENT_ENTRY = "ingredient_entry"


def _make_input(field: FormField, value: str = "") -> TextInput:
    return TextInput(
        FIELD_LABELS[field],
        value=value,
        placeholder=FIELD_PLACEHOLDERS.get(field, ""),
    )


class MenuState:
    """Selection on the main menu."""

    def __init__(self, options: Sequence[str] = MENU_OPTIONS) -> None:
        self.options = tuple(options)
        self.selected = 0

    def next(self) -> None:
        self.selected = (self.selected + 1) % len(self.options)

    def previous(self) -> None:
        self.selected = (self.selected - 1) % len(self.options)


class BatchListState:
    """Snapshot of all batches plus the highlighted row."""

    def __init__(self) -> None:
        self.batches: Tuple[Batch, ...] = ()
        self.selected = 0
        self.needs_refresh = True

    def set_batches(self, batches: Sequence[Batch]) -> None:
        """Replace the snapshot and keep the selection in range."""
        self.batches = tuple(batches)
        if not self.batches:
            self.selected = 0
        else:
            self.selected = min(self.selected, len(self.batches) - 1)
        self.needs_refresh = False

    @property
    def is_empty(self) -> bool:
        return not self.batches

    @property
    def selected_batch(self) -> Optional[Batch]:
        if not self.batches:
            return None
        return self.batches[self.selected]

    def next(self) -> None:
        if self.batches:
            self.selected = (self.selected + 1) % len(self.batches)

    def previous(self) -> None:
        if self.batches:
            self.selected = (self.selected - 1) % len(self.batches)


class NewBatchForm:
    """The new mead form. A fresh instance is created on every visit.

    Focus follows the navigator: the text editor in the current slot is
    the focused one, whether or not it is being edited.
    """

    def __init__(self) -> None:
        self.navigator = FieldNavigator(NEW_BATCH_FIELDS)
        self.mode = Mode.BROWSING
        self.inputs: Dict[FormField, TextInput] = {}
        for field in NEW_BATCH_FIELDS:
            if not field.is_text:
                continue
            seed = today_str() if field is FormField.START_DATE else NEW_BATCH_SEEDS.get(field, "")
            text_input = _make_input(field, seed)
            text_input.bind_focus(lambda f=field: self.navigator.current is f)
            self.inputs[field] = text_input

    @property
    def current_field(self) -> FormField:
        return self.navigator.current

    @property
    def is_editing(self) -> bool:
        return self.mode is Mode.EDITING_FIELD

    @property
    def on_submit(self) -> bool:
        return self.navigator.current is FormField.SUBMIT

    @property
    def current_input(self) -> Optional[TextInput]:
        return self.inputs.get(self.navigator.current)

    def next_field(self) -> None:
        self.mode = Mode.BROWSING
        self.navigator.next()

    def previous_field(self) -> None:
        self.mode = Mode.BROWSING
        self.navigator.previous()

    def begin_edit(self) -> bool:
        """Enter edit mode if the current slot holds a text editor."""
        if self.current_input is None:
            return False
        self.mode = Mode.EDITING_FIELD
        return True

    def cancel_edit(self) -> None:
        self.mode = Mode.BROWSING

    def _number(self, field: FormField) -> float:
        value = self.inputs[field].numeric_value()
        return NUMERIC_FALLBACKS[field] if value is None else value

    def build_batch(self) -> Batch:
        """Collect the form into a new, unsaved batch.

        Unparsable numbers take their fallback; current gravity starts
        equal to starting gravity.
        """
        starting_gravity = self._number(FormField.STARTING_GRAVITY)
        return Batch(
            name=self.inputs[FormField.NAME].text,
            start_date=self.inputs[FormField.START_DATE].text,
            honey_type=self.inputs[FormField.HONEY_TYPE].text,
            honey_amount_lbs=self._number(FormField.HONEY_AMOUNT),
            yeast_strain=self.inputs[FormField.YEAST_STRAIN].text,
            target_abv=self._number(FormField.TARGET_ABV),
            starting_gravity=starting_gravity,
            current_gravity=starting_gravity,
            yan_required=self._number(FormField.YAN_REQUIRED),
            yan_added=0.0,
            volume_gallons=self._number(FormField.VOLUME),
            status=BatchStatus.PRIMARY,
            notes=self.inputs[FormField.NOTES].text,
        )


class BatchDetailState:
    """Detail screen for one batch, with its log and ingredient sub-forms.

    The batch, ingredient and log snapshots are replaced together by
    ``set_batch()``. While a sub-form is open the parent navigator is
    left alone, so closing the sub-form brings back the previous focus.
    """

    def __init__(self) -> None:
        self.batch_id: Optional[int] = None
        self.batch: Optional[Batch] = None
        self.ingredients: Tuple[Ingredient, ...] = ()
        self.log_entries: Tuple[LogEntry, ...] = ()
        self.needs_refresh = True

        self.navigator = FieldNavigator(DETAIL_FIELDS)
        self.mode = Mode.BROWSING
        self.status = BatchStatus.PLANNING
        # Editor text as seeded from the record, for detecting untouched numbers
        self._seeded: Dict[FormField, str] = {}
        self.inputs: Dict[FormField, TextInput] = {}
        for field in DETAIL_FIELDS:
            if field.is_text:
                text_input = _make_input(field)
                text_input.bind_focus(lambda f=field: self._parent_focus(f))
                self.inputs[field] = text_input

        self.log_input = TextInput(LOG_ENTRY_LABEL)
        self.log_input.bind_focus(lambda: self.mode is Mode.LOG_ENTRY)

        self.ingredient_navigator = FieldNavigator(INGREDIENT_FIELDS)
        self.ingredient_type = DEFAULT_INGREDIENT_TYPE
        self.ingredient_inputs: Dict[FormField, TextInput] = {}
        for field in INGREDIENT_FIELDS:
            if field.is_text:
                text_input = _make_input(field)
                text_input.bind_focus(lambda f=field: self._ingredient_focus(f))
                self.ingredient_inputs[field] = text_input
        self.ingredient_inputs[FormField.INGREDIENT_UNIT].set_value(DEFAULT_INGREDIENT_UNIT)

    def _parent_focus(self, field: FormField) -> bool:
        return self.mode in (Mode.BROWSING, Mode.EDITING_FIELD) and self.navigator.current is field

    def _ingredient_focus(self, field: FormField) -> bool:
        return self.mode is Mode.INGREDIENT_ENTRY and self.ingredient_navigator.current is field

    # ==================== LIFECYCLE ====================

    def enter(self, batch_id: int) -> None:
        """Prepare for showing ``batch_id``; the next draw reloads it."""
        if batch_id != self.batch_id:
            self.batch = None
            self.ingredients = ()
            self.log_entries = ()
        self.batch_id = batch_id
        self.mode = Mode.BROWSING
        self.navigator.reset()
        self.clear_log_input()
        self.clear_ingredient_inputs()
        self.needs_refresh = True

    def set_batch(
        self,
        batch: Batch,
        ingredients: Sequence[Ingredient],
        log_entries: Sequence[LogEntry],
    ) -> None:
        """Replace all snapshots and re-seed the editors from the record."""
        self.batch = batch
        self.ingredients = tuple(ingredients)
        self.log_entries = tuple(log_entries)
        self._seeded = {
            FormField.NAME: batch.name,
            FormField.CURRENT_GRAVITY: f"{batch.current_gravity:.3f}",
            FormField.YAN_ADDED: f"{batch.yan_added:.0f}",
            FormField.NOTES: batch.notes,
        }
        for field, text in self._seeded.items():
            self.inputs[field].set_value(text)
        self.status = batch.status
        self.needs_refresh = False

    def mark_missing(self) -> None:
        """The batch no longer exists in the store."""
        self.batch = None
        self.ingredients = ()
        self.log_entries = ()
        self.needs_refresh = False

    # ==================== MODE ====================

    @property
    def current_field(self) -> FormField:
        return self.navigator.current

    @property
    def is_editing(self) -> bool:
        return self.mode is Mode.EDITING_FIELD

    @property
    def in_sub_form(self) -> bool:
        return self.mode in (Mode.LOG_ENTRY, Mode.INGREDIENT_ENTRY)

    @property
    def in_input_mode(self) -> bool:
        """True when keystrokes go to a text buffer rather than commands."""
        return self.mode is not Mode.BROWSING

    @property
    def on_status(self) -> bool:
        return not self.in_sub_form and self.navigator.current is FormField.STATUS

    @property
    def on_ingredient_type(self) -> bool:
        return (
            self.mode is Mode.INGREDIENT_ENTRY
            and self.ingredient_navigator.current is FormField.INGREDIENT_TYPE
        )

    @property
    def current_input(self) -> Optional[TextInput]:
        """The editor keystrokes apply to, or None on an enum slot."""
        if self.mode is Mode.LOG_ENTRY:
            return self.log_input
        if self.mode is Mode.INGREDIENT_ENTRY:
            return self.ingredient_inputs.get(self.ingredient_navigator.current)
        return self.inputs.get(self.navigator.current)

    def next_field(self) -> None:
        if self.mode is Mode.LOG_ENTRY:
            return
        if self.mode is Mode.INGREDIENT_ENTRY:
            self.ingredient_navigator.next()
            return
        self.mode = Mode.BROWSING
        self.navigator.next()

    def previous_field(self) -> None:
        if self.mode is Mode.LOG_ENTRY:
            return
        if self.mode is Mode.INGREDIENT_ENTRY:
            self.ingredient_navigator.previous()
            return
        self.mode = Mode.BROWSING
        self.navigator.previous()

    def begin_edit(self) -> bool:
        """Enter edit mode if browsing on a text slot."""
        if self.mode is not Mode.BROWSING or self.current_input is None:
            return False
        self.mode = Mode.EDITING_FIELD
        return True

    def toggle_edit(self) -> None:
        """Enter on a parent slot: cycle the status or flip edit mode."""
        if self.on_status:
            self.status = self.status.next()
        elif self.mode is Mode.EDITING_FIELD:
            self.mode = Mode.BROWSING
        else:
            self.begin_edit()

    def cancel_edit(self) -> None:
        if self.mode is Mode.EDITING_FIELD:
            self.mode = Mode.BROWSING

    def cycle_status(self, forward: bool = True) -> None:
        self.status = self.status.next() if forward else self.status.previous()

    def cycle_ingredient_type(self, forward: bool = True) -> None:
        current: IngredientType = self.ingredient_type
        self.ingredient_type = current.next() if forward else current.previous()

    # ==================== SUB-FORMS ====================

    def open_log_form(self) -> None:
        self.mode = Mode.LOG_ENTRY

    def open_ingredient_form(self) -> None:
        self.mode = Mode.INGREDIENT_ENTRY

    def close_sub_form(self) -> None:
        """Return to browsing; typed sub-form text is kept."""
        if self.in_sub_form:
            self.mode = Mode.BROWSING

    def clear_log_input(self) -> None:
        self.log_input.clear()

    def clear_ingredient_inputs(self) -> None:
        self.ingredient_inputs[FormField.INGREDIENT_NAME].clear()
        self.ingredient_inputs[FormField.INGREDIENT_AMOUNT].clear()
        self.ingredient_inputs[FormField.INGREDIENT_UNIT].set_value(DEFAULT_INGREDIENT_UNIT)
        self.ingredient_type = DEFAULT_INGREDIENT_TYPE
        self.ingredient_navigator.reset()

    # ==================== RECORD BUILDERS ====================

    def updated_batch(self) -> Optional[Batch]:
        """The loaded batch with the edited values applied.

        Gravity or YAN text that is unparsable, or still exactly as seeded
        (the seed is rounded for display), keeps the record's value.
        """
        if self.batch is None:
            return None
        gravity = self._edited_number(FormField.CURRENT_GRAVITY)
        yan_added = self._edited_number(FormField.YAN_ADDED)
        return dataclasses.replace(
            self.batch,
            name=self.inputs[FormField.NAME].text,
            current_gravity=self.batch.current_gravity if gravity is None else gravity,
            yan_added=self.batch.yan_added if yan_added is None else yan_added,
            notes=self.inputs[FormField.NOTES].text,
            status=self.status,
        )

    def _edited_number(self, field: FormField) -> Optional[float]:
        text_input = self.inputs[field]
        if text_input.text == self._seeded.get(field):
            return None
        return text_input.numeric_value()

    def build_log_entry(self) -> Optional[LogEntry]:
        """A new log entry from the sub-form, or None if there is no text."""
        if self.batch is None or not self.log_input.text:
            return None
        return LogEntry(batch_id=self.batch.id, entry_text=self.log_input.text)

    def build_ingredient(self) -> Optional[Ingredient]:
        """A new ingredient from the sub-form, or None if it has no name."""
        name = self.ingredient_inputs[FormField.INGREDIENT_NAME].text
        if self.batch is None or not name:
            return None
        amount = self.ingredient_inputs[FormField.INGREDIENT_AMOUNT].numeric_value()
        return Ingredient(
            batch_id=self.batch.id,
            ingredient_type=self.ingredient_type,
            name=name,
            amount=NUMERIC_FALLBACKS[FormField.INGREDIENT_AMOUNT] if amount is None else amount,
            unit=self.ingredient_inputs[FormField.INGREDIENT_UNIT].text,
        )

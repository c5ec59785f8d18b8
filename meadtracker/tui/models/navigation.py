"""Field slots and the cursor that walks them.

Each screen declares its fields as an ordered tuple of ``FormField``
members. ``FieldNavigator`` keeps an index into that tuple and wraps at
both ends.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class FormField(str, Enum):
    """Every navigable field slot across all screens."""

    # New mead form
    NAME = "name"
    START_DATE = "start_date"
    HONEY_TYPE = "honey_type"
    HONEY_AMOUNT = "honey_amount"
    YEAST_STRAIN = "yeast_strain"
    TARGET_ABV = "target_abv"
    STARTING_GRAVITY = "starting_gravity"
    VOLUME = "volume"
    YAN_REQUIRED = "yan_required"
    NOTES = "notes"
    SUBMIT = "submit"

    # Detail screen
    STATUS = "status"
    CURRENT_GRAVITY = "current_gravity"
    YAN_ADDED = "yan_added"

    # Ingredient sub-form
    INGREDIENT_NAME = "ingredient_name"
    INGREDIENT_AMOUNT = "ingredient_amount"
    INGREDIENT_UNIT = "ingredient_unit"
    INGREDIENT_TYPE = "ingredient_type"

    @property
    def is_enum(self) -> bool:
        """Enum slots are cycled, never edited as text."""
        return self in ENUM_FIELDS

    @property
    def is_text(self) -> bool:
        return self not in ENUM_FIELDS and self is not FormField.SUBMIT


ENUM_FIELDS = frozenset({FormField.STATUS, FormField.INGREDIENT_TYPE})

NEW_BATCH_FIELDS: tuple[FormField, ...] = (
    FormField.NAME,
    FormField.START_DATE,
    FormField.HONEY_TYPE,
    FormField.HONEY_AMOUNT,
    FormField.YEAST_STRAIN,
    FormField.TARGET_ABV,
    FormField.STARTING_GRAVITY,
    FormField.VOLUME,
    FormField.YAN_REQUIRED,
    FormField.NOTES,
    FormField.SUBMIT,
)

DETAIL_FIELDS: tuple[FormField, ...] = (
    FormField.NAME,
    FormField.STATUS,
    FormField.CURRENT_GRAVITY,
    FormField.YAN_ADDED,
    FormField.NOTES,
)

INGREDIENT_FIELDS: tuple[FormField, ...] = (
    FormField.INGREDIENT_NAME,
    FormField.INGREDIENT_AMOUNT,
    FormField.INGREDIENT_UNIT,
    FormField.INGREDIENT_TYPE,
)


class FieldNavigator:
    """Current position within an ordered, non-empty list of field slots."""

    def __init__(self, slots: Sequence[FormField]) -> None:
        if not slots:
            raise ValueError("FieldNavigator needs at least one slot")
        self._slots = tuple(slots)
        self._index = 0

    @property
    def slots(self) -> tuple[FormField, ...]:
        return self._slots

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> FormField:
        return self._slots[self._index]

    def next(self) -> FormField:
        self._index = (self._index + 1) % len(self._slots)
        return self.current

    def previous(self) -> FormField:
        self._index = (self._index - 1) % len(self._slots)
        return self.current

    def move_to(self, field: FormField) -> None:
        """Jump to a slot. Raises ValueError if this screen has no such slot."""
        self._index = self._slots.index(field)

    def reset(self) -> None:
        self._index = 0

    def __len__(self) -> int:
        return len(self._slots)

"""Shared constants for TUI modules.

Centralizes labels, seed values and messages used across the screen
states and the renderer.
"""

from __future__ import annotations

from meadtracker.lib.models import IngredientType
from meadtracker.tui.models.navigation import FormField

APP_TITLE = "MEAD TRACKER"
APP_TAGLINE = "Track your mead brewing journey"

# Main menu entries, in display order
MENU_OPTIONS: tuple[str, ...] = ("Current Meads", "New Mead")
MENU_LIST = 0
MENU_NEW = 1

# Field labels, shared by the new mead form and the detail screen
FIELD_LABELS: dict[FormField, str] = {
    FormField.NAME: "Name",
    FormField.START_DATE: "Start Date",
    FormField.HONEY_TYPE: "Honey Type",
    FormField.HONEY_AMOUNT: "Honey (lbs)",
    FormField.YEAST_STRAIN: "Yeast Strain",
    FormField.TARGET_ABV: "Target ABV %",
    FormField.STARTING_GRAVITY: "Starting Gravity",
    FormField.VOLUME: "Volume (gallons)",
    FormField.YAN_REQUIRED: "YAN Required (ppm)",
    FormField.NOTES: "Notes",
    FormField.SUBMIT: "[ Create Mead ]",
    FormField.STATUS: "Status",
    FormField.CURRENT_GRAVITY: "Current Gravity",
    FormField.YAN_ADDED: "YAN Added",
    FormField.INGREDIENT_NAME: "Ingredient Name",
    FormField.INGREDIENT_AMOUNT: "Amount",
    FormField.INGREDIENT_UNIT: "Unit",
    FormField.INGREDIENT_TYPE: "Type",
}

FIELD_PLACEHOLDERS: dict[FormField, str] = {
    FormField.NAME: "My First Mead",
    FormField.HONEY_TYPE: "Wildflower, Clover, etc.",
    FormField.YEAST_STRAIN: "Lalvin 71B, D47, etc.",
    FormField.NOTES: "Any additional notes...",
}

# Initial text of the new mead form (start date is filled with today)
NEW_BATCH_SEEDS: dict[FormField, str] = {
    FormField.HONEY_AMOUNT: "3.0",
    FormField.TARGET_ABV: "14.0",
    FormField.STARTING_GRAVITY: "1.100",
    FormField.VOLUME: "1.0",
    FormField.YAN_REQUIRED: "200",
}

# Values used when a numeric field does not parse on submit
NUMERIC_FALLBACKS: dict[FormField, float] = {
    FormField.HONEY_AMOUNT: 0.0,
    FormField.TARGET_ABV: 14.0,
    FormField.STARTING_GRAVITY: 1.100,
    FormField.VOLUME: 1.0,
    FormField.YAN_REQUIRED: 0.0,
    FormField.INGREDIENT_AMOUNT: 0.0,
}

LOG_ENTRY_LABEL = "Log Entry"
DEFAULT_INGREDIENT_UNIT = "oz"
DEFAULT_INGREDIENT_TYPE = IngredientType.FRUIT

# Status line messages
MSG_CREATED = "Created mead: {name}"
MSG_DELETED = "Deleted mead: {name}"
MSG_UPDATED = "Mead updated!"
MSG_ERROR = "Error: {error}"

EMPTY_LIST_MESSAGE = "No meads yet! Press Esc to go back and create one."
NOT_FOUND_MESSAGE = "Mead not found"

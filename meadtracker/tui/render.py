"""Frame painting for the active view.

``draw()`` is a pure function of the state machine and the target region:
it returns one list of ``(style, text)`` fragments per screen row, which
``ScreenControl`` in ``app.py`` hands to prompt_toolkit unchanged. Nothing
is cached between frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from prompt_toolkit.styles import Style

from meadtracker.lib.models import Batch
from meadtracker.tui.constants import (
    APP_TAGLINE,
    APP_TITLE,
    EMPTY_LIST_MESSAGE,
    FIELD_LABELS,
    NOT_FOUND_MESSAGE,
)
from meadtracker.tui.models.navigation import NEW_BATCH_FIELDS, FormField
from meadtracker.tui.models.screens import Mode
from meadtracker.tui.models.text_input import TextInput
from meadtracker.tui.models.view_state import ViewKind, ViewStateMachine

Fragment = Tuple[str, str]
Line = List[Fragment]

# Application style
STYLE = Style.from_dict({
    "title": "bold bg:#005f87 #ffffff",
    "tagline": "#808080 italic",
    "section": "bold #00af00",
    "field-label": "#d7d700",
    "field-label.focused": "#d7d700 bold",
    "field-input": "bg:#1e1e1e #ffffff",
    "field-input.focused": "bg:#2a2a2a #ffffff",
    "field-input.editing": "bg:#303030 #ffffff bold",
    "field-input.placeholder": "bg:#1e1e1e #6a6a6a italic",
    "cursor": "reverse",
    "enum": "#00d7ff",
    "enum.focused": "bold #00ff00",
    "menu-item": "#d0d0d0",
    "menu-item.selected": "bg:#005f87 #ffffff bold",
    "table-header": "bold underline #00af00",
    "row": "#d0d0d0",
    "row.selected": "bg:#005f87 #ffffff bold",
    "info-label": "#808080",
    "info-value": "#ffffff",
    "badge": "#6699ff",
    "empty": "#808080 italic",
    "error": "bold #ff0000",
    "status": "bold #00ff00",
    "status.error": "bold #ff6666",
    "help-key": "bold #00d7ff",
    "help": "#a0a0a0",
    "button": "bg:#404040 #ffffff",
    "button.focused": "bg:#0087af #ffffff bold",
})

MENU_HELP = (("Up/Down", "Navigate"), ("Enter", "Select"), ("q", "Quit"))
LIST_HELP = (("Up/Down", "Navigate"), ("Enter", "View Details"), ("d", "Delete"), ("Esc", "Back"))
FORM_HELP = (("Tab/Arrows", "Navigate"), ("Type", "to edit"), ("Enter", "Submit"), ("Esc", "Back"))
DETAIL_HELP = (
    ("Tab/Arrows", "Navigate"),
    ("Type", "Edit"),
    ("l", "Log"),
    ("i", "Ingredient"),
    ("s", "Save"),
    ("Esc", "Back"),
)
LOG_HELP = (("Type", "log entry"), ("Enter", "Save"), ("Esc", "Cancel"))
INGREDIENT_HELP = (("Tab", "Next field"), ("Enter", "Save"), ("Esc", "Cancel"))


@dataclass(frozen=True)
class Region:
    """Size of the area being painted, in character cells."""

    width: int
    height: int


def _fit(line: Line, width: int) -> Line:
    """Cut a line's fragments so their combined text fits ``width``."""
    fitted: Line = []
    remaining = max(width, 0)
    for style, text in line:
        if remaining <= 0:
            break
        fitted.append((style, text[:remaining]))
        remaining -= len(text)
    return fitted


def _help_line(keys: Tuple[Tuple[str, str], ...]) -> Line:
    line: Line = [("", " ")]
    for key, action in keys:
        line.append(("class:help-key", key))
        line.append(("class:help", f" {action}  "))
    return line


def _status_line(message: Optional[str]) -> Line:
    if not message:
        return []
    style = "class:status.error" if message.startswith("Error") else "class:status"
    return [(style, f" {message}")]


def render_input(text_input: TextInput, *, editing: bool, width: int = 40) -> Line:
    """Fragments for one text editor's value box.

    An unfocused empty editor shows its placeholder. While editing, the
    character under the cursor is drawn reversed.
    """
    text = text_input.text
    if not text and not text_input.focused and text_input.placeholder:
        return [("class:field-input.placeholder", f" {text_input.placeholder} ".ljust(width))]
    if not (editing and text_input.focused):
        style = "class:field-input.focused" if text_input.focused else "class:field-input"
        return [(style, f" {text} ".ljust(width))]

    cursor = text_input.cursor
    under = text[cursor] if cursor < len(text) else " "
    tail = text[cursor + 1:]
    pad = max(width - len(text) - 3, 0)
    return [
        ("class:field-input.editing", " " + text[:cursor]),
        ("class:cursor", under),
        ("class:field-input.editing", tail + " " * (pad + 1)),
    ]


def _field_row(text_input: TextInput, *, editing: bool, label_width: int = 20) -> Line:
    marker = "▸ " if text_input.focused else "  "
    label_style = "class:field-label.focused" if text_input.focused else "class:field-label"
    return [
        (label_style, f"{marker}{text_input.label}:".ljust(label_width + 3)),
        *render_input(text_input, editing=editing),
    ]


def _enum_row(label: str, value: str, *, focused: bool, hint: str, label_width: int = 20) -> Line:
    marker = "▸ " if focused else "  "
    label_style = "class:field-label.focused" if focused else "class:field-label"
    value_style = "class:enum.focused" if focused else "class:enum"
    return [
        (label_style, f"{marker}{label}:".ljust(label_width + 3)),
        (value_style, f"< {value} >"),
        ("class:help", f"  {hint}"),
    ]


def _title(text: str) -> Line:
    return [("class:title", f" {text} ")]


# ==================== SCREENS ====================


def _paint_menu(machine: ViewStateMachine) -> List[Line]:
    menu = machine.menu
    lines: List[Line] = [
        [],
        _title(APP_TITLE),
        [],
        [("class:tagline", APP_TAGLINE)],
        [],
        [("class:section", " Menu ")],
    ]
    for idx, option in enumerate(menu.options):
        if idx == menu.selected:
            lines.append([("class:menu-item.selected", f"> {option}")])
        else:
            lines.append([("class:menu-item", f"  {option}")])
    return lines


_LIST_COLUMNS = (("Name", 20), ("Status", 10), ("Start Date", 11), ("Honey", 14), ("Yeast", 14), ("OG", 6), ("Current", 7))


def _list_row(batch: Batch) -> str:
    values = (
        batch.name,
        batch.status.value,
        batch.start_date,
        batch.honey_type,
        batch.yeast_strain,
        f"{batch.starting_gravity:.3f}",
        f"{batch.current_gravity:.3f}",
    )
    return " ".join(value[:w].ljust(w) for value, (_, w) in zip(values, _LIST_COLUMNS))


def _paint_list(machine: ViewStateMachine) -> List[Line]:
    batch_list = machine.batch_list
    count = len(batch_list.batches)
    lines: List[Line] = [[], _title("Current Meads") + [("class:badge", f"  {count} meads")], []]

    if batch_list.is_empty:
        lines.append([("class:empty", EMPTY_LIST_MESSAGE)])
        return lines

    header = " ".join(name.ljust(w) for name, w in _LIST_COLUMNS)
    lines.append([("class:table-header", f"  {header}")])
    for idx, batch in enumerate(batch_list.batches):
        if idx == batch_list.selected:
            lines.append([("class:row.selected", f"> {_list_row(batch)}")])
        else:
            lines.append([("class:row", f"  {_list_row(batch)}")])
    return lines


def _paint_new_batch(machine: ViewStateMachine) -> List[Line]:
    form = machine.new_batch
    lines: List[Line] = [[], _title("New Mead"), []]
    for field in NEW_BATCH_FIELDS:
        if field is FormField.SUBMIT:
            lines.append([])
            style = "class:button.focused" if form.on_submit else "class:button"
            lines.append([("", "  "), (style, FIELD_LABELS[FormField.SUBMIT])])
            continue
        lines.append(_field_row(form.inputs[field], editing=form.is_editing))
    return lines


def _paint_detail(machine: ViewStateMachine) -> List[Line]:
    detail = machine.detail
    batch = detail.batch
    if batch is None:
        message = "Loading..." if detail.needs_refresh else NOT_FOUND_MESSAGE
        return [[], _title("Mead Details"), [], [("class:error", message)]]

    lines: List[Line] = [[], _title(f"{batch.name} - {batch.status.value}"), []]
    editing = detail.is_editing
    for field in detail.navigator.slots:
        if field is FormField.STATUS:
            lines.append(_enum_row(
                FIELD_LABELS[FormField.STATUS],
                detail.status.value,
                focused=detail.on_status,
                hint="(Enter to cycle)",
            ))
        else:
            lines.append(_field_row(detail.inputs[field], editing=editing))
    lines.append([
        ("class:info-label", "  Estimated ABV: "),
        ("class:info-value", f"{batch.estimated_abv:.1f}%"),
    ])

    lines.extend([
        [],
        [("class:section", " Original Values ")],
        [("class:info-label", "  Start Date: "), ("class:info-value", batch.start_date)],
        [("class:info-label", "  Honey: "), ("class:info-value", f"{batch.honey_type} ({batch.honey_amount_lbs:.1f} lbs)")],
        [("class:info-label", "  Yeast: "), ("class:info-value", batch.yeast_strain)],
        [
            ("class:info-label", "  OG: "), ("class:info-value", f"{batch.starting_gravity:.3f}"),
            ("class:info-label", "  Target ABV: "), ("class:info-value", f"{batch.target_abv:.1f}%"),
        ],
        [
            ("class:info-label", "  Volume: "), ("class:info-value", f"{batch.volume_gallons:.1f} gal"),
            ("class:info-label", "  YAN Req: "), ("class:info-value", f"{batch.yan_required:.0f} ppm"),
        ],
    ])

    if detail.mode is Mode.LOG_ENTRY:
        lines.extend([[], [("class:section", " Add Log Entry ")]])
        lines.append(_field_row(detail.log_input, editing=True))
    elif detail.mode is Mode.INGREDIENT_ENTRY:
        lines.extend([[], [("class:section", " Add Ingredient ")]])
        for field in detail.ingredient_navigator.slots:
            if field is FormField.INGREDIENT_TYPE:
                lines.append(_enum_row(
                    FIELD_LABELS[FormField.INGREDIENT_TYPE],
                    detail.ingredient_type.value,
                    focused=detail.on_ingredient_type,
                    hint="(Left/Right to change)",
                ))
            else:
                lines.append(_field_row(detail.ingredient_inputs[field], editing=True))

    lines.extend([[], [("class:section", f" Ingredients ({len(detail.ingredients)}) ")]])
    for ingredient in detail.ingredients:
        lines.append([
            ("class:badge", f"  [{ingredient.ingredient_type.value}] "),
            ("class:info-value", f"{ingredient.name} - {ingredient.amount:.1f} {ingredient.unit}"),
        ])

    lines.extend([[], [("class:section", f" Log Entries ({len(detail.log_entries)}) ")]])
    for entry in detail.log_entries:
        lines.append([
            ("class:badge", f"  [{entry.timestamp.strftime('%Y-%m-%d %H:%M')}] "),
            ("class:info-value", entry.entry_text),
        ])
    return lines


def _help_for(machine: ViewStateMachine) -> Tuple[Tuple[str, str], ...]:
    kind = machine.view.kind
    if kind is ViewKind.MENU:
        return MENU_HELP
    if kind is ViewKind.LIST:
        return LIST_HELP
    if kind is ViewKind.NEW_BATCH:
        return FORM_HELP
    if machine.detail.mode is Mode.LOG_ENTRY:
        return LOG_HELP
    if machine.detail.mode is Mode.INGREDIENT_ENTRY:
        return INGREDIENT_HELP
    return DETAIL_HELP


_PAINTERS = {
    ViewKind.MENU: _paint_menu,
    ViewKind.LIST: _paint_list,
    ViewKind.NEW_BATCH: _paint_new_batch,
    ViewKind.DETAIL: _paint_detail,
}


def draw(machine: ViewStateMachine, region: Region) -> List[Line]:
    """Paint the active view into ``region``.

    The body is cut to fit above a two-row footer (status message, key
    help), and every row is clipped to the region width.
    """
    if region.height <= 0:
        return []
    footer = [_status_line(machine.status_message), _help_line(_help_for(machine))]
    body = _PAINTERS[machine.view.kind](machine)

    body_height = max(region.height - len(footer), 0)
    body = body[:body_height]
    body.extend([] for _ in range(body_height - len(body)))

    lines = body + footer
    return [_fit(line, region.width) for line in lines[: region.height]]

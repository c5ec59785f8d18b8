"""Record types for mead batches and their child collections.

Records are frozen snapshots. Screens never patch them in place; an edit
builds a new record with ``dataclasses.replace`` and hands it to the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

__all__ = [
    "BatchStatus",
    "IngredientType",
    "Batch",
    "Ingredient",
    "LogEntry",
    "calc_abv",
    "today_str",
    "utc_now",
]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def today_str() -> str:
    """Today's date in the YYYY-MM-DD form used by start and added dates."""
    return date.today().strftime("%Y-%m-%d")


class _CyclicEnum(str, Enum):
    """String enum whose members form a closed cycle in declaration order."""

    def next(self) -> "_CyclicEnum":
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "_CyclicEnum":
        members = list(type(self))
        return members[(members.index(self) - 1) % len(members)]


class BatchStatus(_CyclicEnum):
    """Lifecycle stage of a batch."""

    PLANNING = "Planning"
    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    AGING = "Aging"
    BOTTLED = "Bottled"
    FINISHED = "Finished"

    @classmethod
    def parse(cls, text: str) -> "BatchStatus":
        """Case-insensitive lookup, falling back to PLANNING."""
        lowered = (text or "").strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return cls.PLANNING


class IngredientType(_CyclicEnum):
    """Category of an ingredient added to a batch."""

    FRUIT = "Fruit"
    SPICE = "Spice"
    NUTRIENT = "Nutrient"
    ADJUNCT = "Adjunct"
    OTHER = "Other"

    @classmethod
    def parse(cls, text: str) -> "IngredientType":
        """Case-insensitive lookup, falling back to OTHER."""
        lowered = (text or "").strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return cls.OTHER


def calc_abv(og: float, fg: float) -> float:
    """Estimate alcohol by volume from original and current gravity.

    Formula: ABV = [76.08 * (OG - FG) / (1.775 - OG)] * (FG / 0.794)

    Returns 0.0 when OG <= FG or the inputs make the formula undefined.
    """
    if og <= fg:
        return 0.0
    try:
        abw = 76.08 * (og - fg) / (1.775 - og)
        return round(abw * (fg / 0.794), 2)
    except ZeroDivisionError:
        return 0.0


@dataclass(frozen=True)
class Batch:
    """A single mead batch.

    Attributes:
        id: Store-assigned identifier (0 until persisted)
        name: Display name
        start_date: Date the batch was started (YYYY-MM-DD)
        honey_type: Free-text honey variety
        honey_amount_lbs: Honey weight in pounds
        yeast_strain: Free-text yeast strain
        target_abv: Target alcohol by volume, percent
        starting_gravity: Original gravity reading
        current_gravity: Most recent gravity reading
        yan_required: Yeast assimilable nitrogen required (ppm)
        yan_added: Yeast assimilable nitrogen added so far (ppm)
        volume_gallons: Batch volume in gallons
        status: Lifecycle stage
        notes: Free-text notes
    """

    id: int = 0
    name: str = ""
    start_date: str = field(default_factory=today_str)
    honey_type: str = ""
    honey_amount_lbs: float = 0.0
    yeast_strain: str = ""
    target_abv: float = 14.0
    starting_gravity: float = 1.100
    current_gravity: float = 1.100
    yan_required: float = 0.0
    yan_added: float = 0.0
    volume_gallons: float = 1.0
    status: BatchStatus = BatchStatus.PLANNING
    notes: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def estimated_abv(self) -> float:
        """ABV estimate from the starting and current gravity readings."""
        return calc_abv(self.starting_gravity, self.current_gravity)


@dataclass(frozen=True)
class Ingredient:
    """An ingredient added to a batch."""

    id: int = 0
    batch_id: int = 0
    ingredient_type: IngredientType = IngredientType.OTHER
    name: str = ""
    amount: float = 0.0
    unit: str = "oz"
    added_date: str = field(default_factory=today_str)


@dataclass(frozen=True)
class LogEntry:
    """A timestamped free-text note on a batch."""

    id: int = 0
    batch_id: int = 0
    timestamp: datetime = field(default_factory=utc_now)
    entry_text: str = ""

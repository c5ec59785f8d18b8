"""Records, persistence and ambient utilities for the mead tracker."""

from __future__ import annotations

from meadtracker.lib.errors import ConfigurationError, MeadTrackerError, StoreError
from meadtracker.lib.models import Batch, BatchStatus, Ingredient, IngredientType, LogEntry
from meadtracker.lib.store import BatchStore, open_store

__all__ = [
    "Batch",
    "BatchStatus",
    "BatchStore",
    "ConfigurationError",
    "Ingredient",
    "IngredientType",
    "LogEntry",
    "MeadTrackerError",
    "StoreError",
    "open_store",
]

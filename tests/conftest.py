"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from meadtracker.lib.models import Batch, BatchStatus  # noqa: E402
from meadtracker.lib.store import BatchStore, open_store  # noqa: E402


@pytest.fixture
def store() -> Generator[BatchStore, None, None]:
    """An empty in-memory store."""
    batch_store = open_store(":memory:")
    yield batch_store
    batch_store.close()


@pytest.fixture
def file_store(tmp_path: Path) -> Generator[BatchStore, None, None]:
    """An empty store backed by a temporary SQLite file."""
    batch_store = open_store(tmp_path / "data" / "meads.db")
    yield batch_store
    batch_store.close()


@pytest.fixture
def sample_batch() -> Batch:
    """A typical unsaved batch."""
    return Batch(
        name="Orange Blossom Traditional",
        start_date="2024-03-01",
        honey_type="Orange Blossom",
        honey_amount_lbs=3.0,
        yeast_strain="Lalvin 71B",
        target_abv=13.5,
        starting_gravity=1.110,
        current_gravity=1.020,
        yan_required=200.0,
        yan_added=50.0,
        volume_gallons=1.0,
        status=BatchStatus.PRIMARY,
        notes="Staggered nutrient additions",
    )

"""SQLite-backed persistent store for batches, ingredients and log entries.

The store is the single source of truth: screens never patch their cached
snapshots after a write, they mark themselves stale and reload through
these calls. Every ``sqlite3.Error`` is wrapped in ``StoreError`` so callers
only deal with one failure type.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Tuple, TypeVar

from meadtracker.lib.errors import StoreError
from meadtracker.lib.models import (
    Batch,
    BatchStatus,
    Ingredient,
    IngredientType,
    LogEntry,
    utc_now,
)
from meadtracker.lib.resilience import with_retry

logger = logging.getLogger(__name__)

__all__ = ["BatchStore", "open_store"]

T = TypeVar("T")

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS meads (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        start_date TEXT NOT NULL,
        honey_type TEXT NOT NULL,
        honey_amount_lbs REAL NOT NULL,
        yeast_strain TEXT NOT NULL,
        target_abv REAL NOT NULL,
        starting_gravity REAL NOT NULL,
        current_gravity REAL NOT NULL,
        yan_required REAL NOT NULL,
        yan_added REAL NOT NULL,
        volume_gallons REAL NOT NULL,
        status TEXT NOT NULL,
        notes TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ingredients (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        mead_id INTEGER NOT NULL,
        ingredient_type TEXT NOT NULL,
        name TEXT NOT NULL,
        amount REAL NOT NULL,
        unit TEXT NOT NULL,
        added_date TEXT NOT NULL,
        FOREIGN KEY (mead_id) REFERENCES meads(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS log_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        mead_id INTEGER NOT NULL,
        timestamp TEXT NOT NULL,
        entry_text TEXT NOT NULL,
        FOREIGN KEY (mead_id) REFERENCES meads(id) ON DELETE CASCADE
    )
    """,
)

_BATCH_COLUMNS = (
    "id, name, start_date, honey_type, honey_amount_lbs, yeast_strain, "
    "target_abv, starting_gravity, current_gravity, yan_required, yan_added, "
    "volume_gallons, status, notes, created_at, updated_at"
)


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _from_iso(text: str) -> datetime:
    """Parse a stored timestamp, falling back to now for corrupt values."""
    try:
        parsed = datetime.fromisoformat(text)
    except (TypeError, ValueError):
        return utc_now()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _row_to_batch(row: sqlite3.Row) -> Batch:
    return Batch(
        id=row["id"],
        name=row["name"],
        start_date=row["start_date"],
        honey_type=row["honey_type"],
        honey_amount_lbs=row["honey_amount_lbs"],
        yeast_strain=row["yeast_strain"],
        target_abv=row["target_abv"],
        starting_gravity=row["starting_gravity"],
        current_gravity=row["current_gravity"],
        yan_required=row["yan_required"],
        yan_added=row["yan_added"],
        volume_gallons=row["volume_gallons"],
        status=BatchStatus.parse(row["status"]),
        notes=row["notes"],
        created_at=_from_iso(row["created_at"]),
        updated_at=_from_iso(row["updated_at"]),
    )


def _row_to_ingredient(row: sqlite3.Row) -> Ingredient:
    return Ingredient(
        id=row["id"],
        batch_id=row["mead_id"],
        ingredient_type=IngredientType.parse(row["ingredient_type"]),
        name=row["name"],
        amount=row["amount"],
        unit=row["unit"],
        added_date=row["added_date"],
    )


def _row_to_log_entry(row: sqlite3.Row) -> LogEntry:
    return LogEntry(
        id=row["id"],
        batch_id=row["mead_id"],
        timestamp=_from_iso(row["timestamp"]),
        entry_text=row["entry_text"],
    )


class BatchStore:
    """CRUD operations over the three record kinds.

    The connection is opened once and held for the lifetime of the
    process. Use ``open_store()`` to create one with schema initialization
    and a bounded retry on a locked database file.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def init_schema(self) -> None:
        """Create tables if they do not exist."""
        with self._guard("initialize schema"):
            self._conn.execute("PRAGMA foreign_keys = ON")
            for statement in _SCHEMA:
                self._conn.execute(statement)
            self._conn.commit()

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Translate sqlite errors into StoreError and roll back."""
        try:
            yield
        except sqlite3.Error as e:
            logger.error("Store operation '%s' failed: %s", operation, e)
            try:
                self._conn.rollback()
            except sqlite3.Error:
                logger.debug("Rollback after failed '%s' also failed", operation)
            raise StoreError(operation, cause=e) from e

    def _write(self, operation: str, sql: str, params: Tuple[Any, ...]) -> int:
        with self._guard(operation):
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor.lastrowid or 0

    def _read(
        self,
        operation: str,
        sql: str,
        params: Tuple[Any, ...],
        convert: Callable[[sqlite3.Row], T],
    ) -> Tuple[T, ...]:
        with self._guard(operation):
            rows = self._conn.execute(sql, params).fetchall()
        logger.debug("%s returned %d rows", operation, len(rows))
        return tuple(convert(row) for row in rows)

    # ==================== BATCHES ====================

    def create_batch(self, batch: Batch) -> int:
        """Insert a batch and return its new id."""
        batch_id = self._write(
            "create mead",
            """
            INSERT INTO meads (name, start_date, honey_type, honey_amount_lbs,
                yeast_strain, target_abv, starting_gravity, current_gravity,
                yan_required, yan_added, volume_gallons, status, notes,
                created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                batch.name,
                batch.start_date,
                batch.honey_type,
                batch.honey_amount_lbs,
                batch.yeast_strain,
                batch.target_abv,
                batch.starting_gravity,
                batch.current_gravity,
                batch.yan_required,
                batch.yan_added,
                batch.volume_gallons,
                batch.status.value,
                batch.notes,
                _to_iso(batch.created_at),
                _to_iso(batch.updated_at),
            ),
        )
        logger.info("Created mead %d (%s)", batch_id, batch.name)
        return batch_id

    def get_all_batches(self) -> Tuple[Batch, ...]:
        """All batches, newest first."""
        return self._read(
            "load meads",
            f"SELECT {_BATCH_COLUMNS} FROM meads ORDER BY created_at DESC, id DESC",
            (),
            _row_to_batch,
        )

    def get_batch(self, batch_id: int) -> Optional[Batch]:
        """A single batch, or None if it does not exist."""
        found = self._read(
            "load mead",
            f"SELECT {_BATCH_COLUMNS} FROM meads WHERE id = ?",
            (batch_id,),
            _row_to_batch,
        )
        return found[0] if found else None

    def update_batch(self, batch: Batch) -> None:
        """Overwrite a batch's fields and stamp ``updated_at``."""
        self._write(
            "update mead",
            """
            UPDATE meads SET
                name = ?, start_date = ?, honey_type = ?, honey_amount_lbs = ?,
                yeast_strain = ?, target_abv = ?, starting_gravity = ?,
                current_gravity = ?, yan_required = ?, yan_added = ?,
                volume_gallons = ?, status = ?, notes = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                batch.name,
                batch.start_date,
                batch.honey_type,
                batch.honey_amount_lbs,
                batch.yeast_strain,
                batch.target_abv,
                batch.starting_gravity,
                batch.current_gravity,
                batch.yan_required,
                batch.yan_added,
                batch.volume_gallons,
                batch.status.value,
                batch.notes,
                _to_iso(utc_now()),
                batch.id,
            ),
        )
        logger.info("Updated mead %d", batch.id)

    def delete_batch(self, batch_id: int) -> None:
        """Delete a batch together with its ingredients and log entries."""
        with self._guard("delete mead"):
            self._conn.execute("DELETE FROM ingredients WHERE mead_id = ?", (batch_id,))
            self._conn.execute("DELETE FROM log_entries WHERE mead_id = ?", (batch_id,))
            self._conn.execute("DELETE FROM meads WHERE id = ?", (batch_id,))
            self._conn.commit()
        logger.info("Deleted mead %d", batch_id)

    # ==================== INGREDIENTS ====================

    def create_ingredient(self, ingredient: Ingredient) -> int:
        """Attach an ingredient to its batch and return the new id."""
        ingredient_id = self._write(
            "add ingredient",
            """
            INSERT INTO ingredients (mead_id, ingredient_type, name, amount, unit, added_date)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                ingredient.batch_id,
                ingredient.ingredient_type.value,
                ingredient.name,
                ingredient.amount,
                ingredient.unit,
                ingredient.added_date,
            ),
        )
        logger.info("Added ingredient %d to mead %d", ingredient_id, ingredient.batch_id)
        return ingredient_id

    def get_ingredients(self, batch_id: int) -> Tuple[Ingredient, ...]:
        """Ingredients of a batch, most recently added first."""
        return self._read(
            "load ingredients",
            """
            SELECT id, mead_id, ingredient_type, name, amount, unit, added_date
            FROM ingredients WHERE mead_id = ? ORDER BY added_date DESC, id DESC
            """,
            (batch_id,),
            _row_to_ingredient,
        )

    def update_ingredient(self, ingredient: Ingredient) -> None:
        self._write(
            "update ingredient",
            """
            UPDATE ingredients SET ingredient_type = ?, name = ?, amount = ?,
                unit = ?, added_date = ?
            WHERE id = ? AND mead_id = ?
            """,
            (
                ingredient.ingredient_type.value,
                ingredient.name,
                ingredient.amount,
                ingredient.unit,
                ingredient.added_date,
                ingredient.id,
                ingredient.batch_id,
            ),
        )

    def delete_ingredient(self, ingredient_id: int) -> None:
        self._write("delete ingredient", "DELETE FROM ingredients WHERE id = ?", (ingredient_id,))

    # ==================== LOG ENTRIES ====================

    def create_log_entry(self, entry: LogEntry) -> int:
        """Attach a log entry to its batch and return the new id."""
        entry_id = self._write(
            "add log entry",
            "INSERT INTO log_entries (mead_id, timestamp, entry_text) VALUES (?, ?, ?)",
            (entry.batch_id, _to_iso(entry.timestamp), entry.entry_text),
        )
        logger.info("Added log entry %d to mead %d", entry_id, entry.batch_id)
        return entry_id

    def get_log_entries(self, batch_id: int) -> Tuple[LogEntry, ...]:
        """Log entries of a batch, newest first."""
        return self._read(
            "load log entries",
            """
            SELECT id, mead_id, timestamp, entry_text
            FROM log_entries WHERE mead_id = ? ORDER BY timestamp DESC, id DESC
            """,
            (batch_id,),
            _row_to_log_entry,
        )

    def update_log_entry(self, entry: LogEntry) -> None:
        self._write(
            "update log entry",
            "UPDATE log_entries SET timestamp = ?, entry_text = ? WHERE id = ? AND mead_id = ?",
            (_to_iso(entry.timestamp), entry.entry_text, entry.id, entry.batch_id),
        )

    def delete_log_entry(self, entry_id: int) -> None:
        self._write("delete log entry", "DELETE FROM log_entries WHERE id = ?", (entry_id,))


@with_retry(max_attempts=3, retry_exceptions=(sqlite3.OperationalError,))
def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    # Touch the file so a locked database fails here, inside the retry
    conn.execute("PRAGMA schema_version").fetchone()
    return conn


def open_store(db_path: str | Path) -> BatchStore:
    """Open (creating if needed) the database and initialize its schema.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``

    Raises:
        StoreError: If the database cannot be opened.
    """
    path = str(db_path)
    try:
        if path != ":memory:":
            path = str(Path(path).expanduser())
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = _connect(path)
    except (sqlite3.Error, OSError) as e:
        logger.error("Could not open database %s: %s", path, e)
        raise StoreError(f"open database {path}", cause=e) from e

    store = BatchStore(conn)
    try:
        store.init_schema()
    except StoreError:
        store.close()
        raise
    logger.info("Opened mead database at %s", path)
    return store

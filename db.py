import sqlite3
import os
import datetime
import logging
from contextlib import contextmanager
from typing import List, Tuple, Optional, Iterable

from config import APP_VERSION, YamlConfig
from models import WorkoutEntry, local_naive
from settings_schema import DebugSettings, validate_settings

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "workout_entries": (
            """CREATE TABLE workout_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    duration_minutes INTEGER NOT NULL DEFAULT 0,
                    body_weight_kg REAL NOT NULL DEFAULT 0,
                    notes TEXT NOT NULL DEFAULT '',
                    is_synthetic INTEGER NOT NULL DEFAULT 0
                );""",
            [
                "id",
                "date",
                "duration_minutes",
                "body_weight_kg",
                "notes",
                "is_synthetic",
            ],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        except Exception:
            connection.rollback()
            raise
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info("migrating table %s", table)
        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(
                f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
            )
        conn.execute(f"DROP TABLE {table}_old;")

    def _init_settings(self) -> None:
        defaults = {
            "use_mock_data": "0",
            "mock_data_count": "30",
            "show_all_data": "0",
            "weeks_to_show": "26",
            "app_version": APP_VERSION,
        }
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()

    def _delete_all(self, table: str) -> int:
        with self._connection() as conn:
            cursor = conn.execute(f"DELETE FROM {table};")
            return cursor.rowcount


class WorkoutEntryRepository(BaseRepository):
    """Repository for workout entry table operations."""

    _COLUMNS = "id, date, duration_minutes, body_weight_kg, notes, is_synthetic"

    @staticmethod
    def _row_to_entry(row: Tuple) -> Optional[WorkoutEntry]:
        rid, date, minutes, weight, notes, synthetic = row
        try:
            ts = local_naive(datetime.datetime.fromisoformat(date))
        except (TypeError, ValueError, OverflowError):
            logger.warning("skipping workout entry %s with malformed date %r", rid, date)
            return None
        return WorkoutEntry(
            id=rid,
            date=ts,
            duration_minutes=int(minutes),
            body_weight_kg=float(weight),
            notes=notes or "",
            is_synthetic=bool(synthetic),
        )

    @staticmethod
    def _params(entry: WorkoutEntry) -> Tuple:
        return (
            entry.date.isoformat(),
            entry.duration_minutes,
            entry.body_weight_kg,
            entry.notes,
            1 if entry.is_synthetic else 0,
        )

    def add(self, entry: WorkoutEntry) -> int:
        return self.execute(
            "INSERT INTO workout_entries (date, duration_minutes, body_weight_kg, notes, is_synthetic) VALUES (?, ?, ?, ?, ?);",
            self._params(entry),
        )

    def bulk_add(self, entries: Iterable[WorkoutEntry]) -> List[int]:
        """Insert ``entries`` in a single transaction and return their ids."""
        ids: List[int] = []
        with self._connection() as conn:
            for entry in entries:
                cursor = conn.execute(
                    "INSERT INTO workout_entries (date, duration_minutes, body_weight_kg, notes, is_synthetic) VALUES (?, ?, ?, ?, ?);",
                    self._params(entry),
                )
                ids.append(cursor.lastrowid)
        return ids

    def fetch_all_entries(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        descending: bool = False,
    ) -> List[WorkoutEntry]:
        query = f"SELECT {self._COLUMNS} FROM workout_entries"
        params: list[str] = []
        where_clauses: list[str] = []
        if start_date:
            where_clauses.append("date >= ?")
            params.append(start_date)
        if end_date:
            where_clauses.append("date <= ?")
            params.append(end_date)
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        order = "DESC" if descending else "ASC"
        query += f" ORDER BY date {order}, id {order};"
        entries = []
        for row in self.fetch_all(query, tuple(params)):
            entry = self._row_to_entry(row)
            if entry is not None:
                entries.append(entry)
        return entries

    def fetch(self, entry_id: int) -> WorkoutEntry:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM workout_entries WHERE id = ?;",
            (entry_id,),
        )
        if not rows:
            raise ValueError("workout not found")
        entry = self._row_to_entry(rows[0])
        if entry is None:
            raise ValueError("workout has a malformed date")
        return entry

    def update(self, entry_id: int, entry: WorkoutEntry) -> None:
        """Overwrite every user-editable field; the synthetic flag is kept."""
        with self._connection() as conn:
            cursor = conn.execute(
                "UPDATE workout_entries SET date = ?, duration_minutes = ?, body_weight_kg = ?, notes = ? WHERE id = ?;",
                (
                    entry.date.isoformat(),
                    entry.duration_minutes,
                    entry.body_weight_kg,
                    entry.notes,
                    entry_id,
                ),
            )
            if cursor.rowcount == 0:
                raise ValueError("workout not found")

    def delete(self, entry_id: int) -> None:
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM workout_entries WHERE id = ?;", (entry_id,)
            )
            if cursor.rowcount == 0:
                raise ValueError("workout not found")

    def delete_synthetic(self) -> int:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM workout_entries WHERE is_synthetic = 1;")
            return cursor.rowcount

    def replace_synthetic(self, entries: Iterable[WorkoutEntry]) -> Tuple[int, List[int]]:
        """Swap all synthetic entries for ``entries`` in one transaction.

        Returns the number of removed entries and the ids of the new ones.
        """
        ids: List[int] = []
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM workout_entries WHERE is_synthetic = 1;")
            removed = cursor.rowcount
            for entry in entries:
                cursor = conn.execute(
                    "INSERT INTO workout_entries (date, duration_minutes, body_weight_kg, notes, is_synthetic) VALUES (?, ?, ?, ?, ?);",
                    self._params(entry),
                )
                ids.append(cursor.lastrowid)
        return removed, ids

    def delete_all(self) -> int:
        return self._delete_all("workout_entries")

    def counts(self) -> dict[str, int]:
        rows = self.fetch_all(
            "SELECT is_synthetic, COUNT(*) FROM workout_entries GROUP BY is_synthetic;"
        )
        result = {"real": 0, "synthetic": 0}
        for flag, count in rows:
            result["synthetic" if flag else "real"] = int(count)
        result["total"] = result["real"] + result["synthetic"]
        return result


class SettingsRepository(BaseRepository):
    """Repository for application settings synchronized with YAML."""

    BOOL_KEYS = {"use_mock_data", "show_all_data"}

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, float | str | bool] = {}
        for k, v in rows:
            if k in self.BOOL_KEYS:
                result[k] = v in {"1", "1.0", "true", "True"}
                continue
            try:
                result[k] = float(v) if "." in v else int(v)
            except ValueError:
                result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                val = str(value)
                if key in self.BOOL_KEYS:
                    val = "1" if val in {"1", "1.0", "true", "True"} else "0"
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, val),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def get_bool(self, key: str, default: bool) -> bool:
        return self.get_text(key, "1" if default else "0") in {
            "1",
            "true",
            "True",
            "1.0",
        }

    def set_bool(self, key: str, value: bool) -> None:
        self.set_text(key, "1" if value else "0")

    def debug_settings(self) -> DebugSettings:
        """Return the persisted visibility and sample data configuration."""
        return DebugSettings.from_raw(
            self.get_bool("use_mock_data", False),
            self.get_int("mock_data_count", 0),
            self.get_bool("show_all_data", False),
        )

    def save_debug_settings(self, settings: DebugSettings) -> None:
        with self._connection() as conn:
            for key, value in (
                ("use_mock_data", "1" if settings.use_mock_data else "0"),
                ("mock_data_count", str(settings.mock_data_count)),
                ("show_all_data", "1" if settings.show_all_data else "0"),
            ):
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, value),
                )
        self._sync_to_yaml()

    def reset_debug_settings(self) -> DebugSettings:
        settings = self.debug_settings().reset()
        self.save_debug_settings(settings)
        return settings

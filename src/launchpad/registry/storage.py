"""
Record Store - SQLite persistence for application records and settings.

Tables:
- apps (records keyed by id, ordered by sort_order then insertion)
- settings (key -> string value)
- launchpad_meta (schema version)
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from launchpad.core.exceptions import ConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)

# Record columns in table order; created_at/updated_at are bookkeeping only.
APP_COLUMNS = (
    "id",
    "name",
    "description",
    "icon_name",
    "status",
    "type",
    "url",
    "swarm_url",
    "owner",
    "source_url",
    "backend_port",
    "ai_model",
    "sort_order",
)

_SELECT_APPS = f"SELECT {', '.join(APP_COLUMNS)} FROM apps"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AppStore:
    """
    SQLite-backed record store.

    Connections are thread-local. Every public method wraps
    ``sqlite3.Error`` into StorageError so driver details never
    leave this module.
    """

    DEFAULT_DB_PATH = Path("var/launchpad.db")

    # Bump when the schema changes; v2 added apps.swarm_url
    SCHEMA_VERSION = 2

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize the store.

        Args:
            db_path: SQLite database file (parent directory is created)
        """
        self._db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self._local = threading.local()
        self._reorder_lock = threading.Lock()
        self._initialized = False

    @property
    def db_path(self) -> Path:
        """Path of the database file."""
        return self._db_path

    @property
    def _conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, "conn"):
            self._local.conn = self._get_connection()
        return self._local.conn

    def _get_connection(self) -> sqlite3.Connection:
        """Create a new database connection."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                isolation_level=None,  # explicit BEGIN/COMMIT below
                timeout=5.0,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
        except (sqlite3.Error, OSError) as e:
            raise StorageError(operation="connect", details={"db_path": str(self._db_path)}) from e
        return conn

    @contextmanager
    def _transaction(self, operation: str, *, immediate: bool = False) -> Iterator[sqlite3.Cursor]:
        """
        Run a block inside a single transaction.

        ``immediate`` takes the database write lock up front, so reads made
        inside the block cannot go stale before the writes land.
        Domain errors raised inside the block roll back and propagate as-is.
        """
        conn = self._conn
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        except sqlite3.Error as e:
            raise StorageError(operation=operation) from e

        cursor = conn.cursor()
        try:
            yield cursor
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback(conn)
            raise StorageError(operation=operation) from e
        except Exception:
            self._rollback(conn)
            raise
        finally:
            cursor.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error:
            logger.warning("Rollback failed", exc_info=True)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create tables if missing and upgrade older schemas in place."""
        with self._transaction("initialize", immediate=True) as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS launchpad_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS apps (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT,
                    icon_name TEXT,
                    status TEXT,
                    type TEXT,
                    url TEXT,
                    swarm_url TEXT,
                    owner TEXT,
                    source_url TEXT,
                    backend_port TEXT,
                    ai_model TEXT,
                    sort_order INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            cur.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_apps_sort_order
                ON apps(sort_order)
            """
            )

            # Tables created before swarm_url existed
            cur.execute("PRAGMA table_info(apps)")
            existing = {row["name"] for row in cur.fetchall()}
            if "swarm_url" not in existing:
                logger.info("Upgrading apps table: adding swarm_url column")
                cur.execute("ALTER TABLE apps ADD COLUMN swarm_url TEXT")

            # Older schemas allowed a NULL sort_order
            cur.execute("UPDATE apps SET sort_order = 0 WHERE sort_order IS NULL")
            if cur.rowcount:
                logger.info(f"Normalized {cur.rowcount} apps with no sort_order")

            cur.execute(
                """
                INSERT OR REPLACE INTO launchpad_meta (key, value, updated_at)
                VALUES ('schema_version', ?, ?)
            """,
                (str(self.SCHEMA_VERSION), _now()),
            )
        self._initialized = True
        logger.debug(f"Store initialized at {self._db_path}")

    def schema_version(self) -> int | None:
        """Return the recorded schema version, or None before initialize()."""
        try:
            row = self._conn.execute(
                "SELECT value FROM launchpad_meta WHERE key = 'schema_version'"
            ).fetchone()
        except sqlite3.OperationalError:
            return None
        except sqlite3.Error as e:
            raise StorageError(operation="schema_version") from e
        return int(row["value"]) if row else None

    def ping(self) -> bool:
        """Run a trivial query; raises StorageError when the file is unusable."""
        try:
            self._conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            raise StorageError(operation="ping") from e
        return True

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def list_rows(self) -> list[dict[str, Any]]:
        """All records in display order (sort_order, then insertion)."""
        self._ensure_initialized()
        try:
            rows = self._conn.execute(
                f"{_SELECT_APPS} ORDER BY sort_order ASC, rowid ASC"
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(operation="list") from e
        return [dict(row) for row in rows]

    def get_row(self, app_id: str) -> dict[str, Any] | None:
        """Load one record, or None if absent."""
        self._ensure_initialized()
        try:
            row = self._conn.execute(f"{_SELECT_APPS} WHERE id = ?", (app_id,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(operation="get") from e
        return dict(row) if row else None

    def list_ids(self) -> list[str]:
        """Ids in display order."""
        return [row["id"] for row in self.list_rows()]

    def insert_row(self, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new record.

        A ``sort_order`` of None appends the record (max + 1, or 0 when
        empty), computed under the write lock.

        Raises:
            ConflictError: If the id already exists
        """
        self._ensure_initialized()
        values = {col: row.get(col) for col in APP_COLUMNS}
        timestamp = _now()

        with self._transaction("create", immediate=True) as cur:
            cur.execute("SELECT 1 FROM apps WHERE id = ?", (values["id"],))
            if cur.fetchone():
                raise ConflictError(
                    f"Application '{values['id']}' already exists",
                    app_id=values["id"],
                )

            if values["sort_order"] is None:
                cur.execute("SELECT MAX(sort_order) AS max_order FROM apps")
                max_order = cur.fetchone()["max_order"]
                values["sort_order"] = 0 if max_order is None else max_order + 1

            placeholders = ", ".join("?" for _ in range(len(APP_COLUMNS) + 2))
            cur.execute(
                f"INSERT INTO apps ({', '.join(APP_COLUMNS)}, created_at, updated_at) "
                f"VALUES ({placeholders})",
                (*(values[col] for col in APP_COLUMNS), timestamp, timestamp),
            )
        return values

    def update_row(self, app_id: str, fields: dict[str, Any]) -> bool:
        """
        Overwrite the given columns of one record.

        ``id`` and ``sort_order`` are never written here.

        Returns:
            False if no record has this id
        """
        self._ensure_initialized()
        columns = [col for col in fields if col in APP_COLUMNS and col not in ("id", "sort_order")]

        with self._transaction("update") as cur:
            if not columns:
                cur.execute("SELECT 1 FROM apps WHERE id = ?", (app_id,))
                return cur.fetchone() is not None

            assignments = ", ".join(f"{col} = ?" for col in columns)
            cur.execute(
                f"UPDATE apps SET {assignments}, updated_at = ? WHERE id = ?",
                (*(fields[col] for col in columns), _now(), app_id),
            )
            return cur.rowcount > 0

    def delete_row(self, app_id: str) -> bool:
        """Delete one record. Returns False if it did not exist."""
        self._ensure_initialized()
        with self._transaction("delete") as cur:
            cur.execute("DELETE FROM apps WHERE id = ?", (app_id,))
            return cur.rowcount > 0

    def reorder(self, ordered_ids: list[str]) -> None:
        """
        Assign sort_order 0..n-1 following ``ordered_ids``, all or nothing.

        The id-set check runs inside the same write transaction as the
        updates, and the process-wide lock keeps two reorders from
        interleaving.

        Raises:
            ValidationError: If ordered_ids is not exactly the current id set
        """
        self._ensure_initialized()
        with self._reorder_lock:
            with self._transaction("reorder", immediate=True) as cur:
                cur.execute("SELECT id FROM apps")
                current = {row["id"] for row in cur.fetchall()}
                _check_exact_id_set(ordered_ids, current)

                timestamp = _now()
                cur.executemany(
                    "UPDATE apps SET sort_order = ?, updated_at = ? WHERE id = ?",
                    [(position, timestamp, app_id) for position, app_id in enumerate(ordered_ids)],
                )

    def replace_all(self, rows: list[dict[str, Any]]) -> None:
        """Delete every record and insert ``rows`` in one transaction."""
        self._ensure_initialized()
        timestamp = _now()
        placeholders = ", ".join("?" for _ in range(len(APP_COLUMNS) + 2))
        with self._reorder_lock:
            with self._transaction("replace_all", immediate=True) as cur:
                cur.execute("DELETE FROM apps")
                cur.executemany(
                    f"INSERT INTO apps ({', '.join(APP_COLUMNS)}, created_at, updated_at) "
                    f"VALUES ({placeholders})",
                    [
                        (*(row.get(col) for col in APP_COLUMNS), timestamp, timestamp)
                        for row in rows
                    ],
                )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self) -> dict[str, str]:
        """Return all settings as a plain mapping."""
        self._ensure_initialized()
        try:
            rows = self._conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError(operation="get_settings") from e
        return {row["key"]: row["value"] for row in rows}

    def put_settings(self, values: dict[str, str | None]) -> dict[str, str]:
        """
        Upsert settings in one transaction; a None value deletes the key.

        Returns:
            The full settings mapping after the write
        """
        self._ensure_initialized()
        timestamp = _now()
        with self._transaction("put_settings") as cur:
            for key, value in values.items():
                if value is None:
                    cur.execute("DELETE FROM settings WHERE key = ?", (key,))
                else:
                    cur.execute(
                        """
                        INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                            updated_at = excluded.updated_at
                    """,
                        (key, value, timestamp),
                    )
        return self.get_settings()

    def close(self) -> None:
        """Close the calling thread's connection."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            del self._local.conn


def _check_exact_id_set(ordered_ids: list[str], current: set[str]) -> None:
    """Raise ValidationError unless ordered_ids is a permutation of current."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for app_id in ordered_ids:
        if app_id in seen:
            duplicates.append(app_id)
        seen.add(app_id)

    missing = sorted(current - seen)
    unknown = sorted(seen - current)
    if missing or unknown or duplicates:
        raise ValidationError(
            "Reorder must list every current application exactly once",
            field="order",
            details={"missing": missing, "unknown": unknown, "duplicates": duplicates},
        )

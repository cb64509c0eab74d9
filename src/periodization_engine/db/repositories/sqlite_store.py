"""SQLite-backed record store.

Stores every entity in a flat table keyed by id, with parent-id references
for the Program -> Mesocycle -> Microcycle -> Session tree. Transactions use
``BEGIN IMMEDIATE`` so a uniqueness check followed by an insert cannot race
another writer, and multi-record operations (template instantiation, cascade
deletion) are all-or-nothing.
"""

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from .base import RecordStore
from ..schema import SCHEMA
from ...exceptions import ConflictError, DatabaseError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableDef:
    """Column layout for one entity type."""
    table: str
    columns: Tuple[str, ...]
    json_columns: FrozenSet[str] = frozenset()
    bool_columns: FrozenSet[str] = frozenset()


TABLES: Dict[str, TableDef] = {
    "volume_landmark": TableDef(
        "volume_landmarks",
        ("id", "user_id", "muscle_group", "mev", "mav", "mrv", "current_volume", "updated_at"),
    ),
    "volume_log": TableDef(
        "volume_logs",
        ("id", "user_id", "muscle_group", "volume", "logged_at"),
    ),
    "program": TableDef(
        "programs",
        (
            "id", "user_id", "name", "periodization_type", "start_date", "goal",
            "training_level", "frequency", "structure", "template_id", "created_at",
        ),
        json_columns=frozenset({"structure"}),
    ),
    "mesocycle": TableDef(
        "mesocycles",
        (
            "id", "program_id", "position", "phase", "length_in_weeks",
            "volume_target", "intensity_target", "name",
        ),
    ),
    "microcycle": TableDef(
        "microcycles",
        ("id", "mesocycle_id", "week_number", "is_deload", "phase", "start_date"),
        bool_columns=frozenset({"is_deload"}),
    ),
    "session": TableDef(
        "sessions",
        (
            "id", "microcycle_id", "day_of_week", "target_intensity",
            "target_volume_multiplier", "exercises", "name",
        ),
        json_columns=frozenset({"exercises"}),
    ),
    "objective": TableDef(
        "objectives",
        ("id", "user_id", "description", "metric", "target_value", "created_at"),
    ),
    "objective_association": TableDef(
        "objective_associations",
        ("id", "objective_id", "entity_type", "entity_id", "priority", "expected_progress"),
    ),
    "template": TableDef(
        "templates",
        ("id", "name", "periodization_type", "training_level", "goal", "structure", "description"),
        json_columns=frozenset({"structure"}),
    ),
}


class SQLiteRecordStore(RecordStore):
    """
    SQLite implementation of the record store.

    Connections are opened per outermost transaction and bound to the
    calling thread, so the store is safe to share across request threads.
    """

    def __init__(self, db_path: Optional[str] = None, timeout: float = 5.0):
        """
        Initialize the record store.

        Args:
            db_path: Path to SQLite database file. If None, uses
                    PERIODIZATION_DATABASE_PATH or periodization.db in the
                    working directory.
            timeout: Seconds to wait for a competing writer's lock
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            env_path = os.environ.get("PERIODIZATION_DATABASE_PATH")
            self.db_path = Path(env_path) if env_path else Path("periodization.db")

        self.timeout = timeout
        self._local = threading.local()
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.timeout,
            isolation_level=None,  # Autocommit mode, we manage transactions manually
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute(f"PRAGMA busy_timeout={int(self.timeout * 1000)}")
        return conn

    def _ensure_schema(self) -> None:
        """Create tables if they don't exist."""
        try:
            conn = self._connect()
            try:
                conn.executescript(SCHEMA)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}", operation="schema") from e

    @contextmanager
    def transaction(self, write: bool = True) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed operations in a single transaction.

        Nested calls on the same thread reuse the outer connection, so the
        outermost block decides commit or rollback. With ``write=False`` the
        transaction is deferred: a consistent snapshot that takes no write lock.
        """
        current = getattr(self._local, "conn", None)
        if current is not None:
            yield current
            return

        conn = self._connect()
        self._local.conn = conn
        try:
            try:
                conn.execute("BEGIN IMMEDIATE" if write else "BEGIN DEFERRED")
            except sqlite3.Error as e:
                raise DatabaseError(f"Could not start transaction: {e}", operation="begin") from e
            yield conn
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            self._local.conn = None
            conn.close()

    @contextmanager
    def _reader(self) -> Iterator[sqlite3.Connection]:
        """
        Connection for a read.

        Inside a transaction this is the transaction's connection. Otherwise
        a fresh autocommit connection, so reads never take the write lock.
        """
        current = getattr(self._local, "conn", None)
        if current is not None:
            yield current
            return

        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    def _execute(self, conn: sqlite3.Connection, sql: str, params: Tuple = ()) -> sqlite3.Cursor:
        """Execute a statement, translating sqlite errors into domain errors."""
        try:
            return conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            message = str(e)
            # sqlite names the failing columns after "failed: "
            columns = message.partition("failed: ")[2] or None
            if "UNIQUE" in message:
                raise ConflictError(
                    f"Uniqueness constraint violated: {message}",
                    details={"constraint": message, "field": columns},
                ) from e
            if "CHECK" in message:
                raise ValidationError(
                    f"Check constraint violated: {message}",
                    field=columns,
                    details={"constraint": message},
                ) from e
            raise DatabaseError(f"Integrity error: {message}", operation=sql.split()[0].lower()) from e
        except sqlite3.Error as e:
            raise DatabaseError(str(e), operation=sql.split()[0].lower()) from e

    # ------------------------------------------------------------------
    # Record mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _table_def(entity_type: str) -> TableDef:
        try:
            return TABLES[entity_type]
        except KeyError:
            raise ValueError(f"Unknown entity type for record store: {entity_type}") from None

    @staticmethod
    def _row_to_record(table_def: TableDef, row: sqlite3.Row) -> Dict[str, Any]:
        record = dict(row)
        for column in table_def.json_columns:
            if record.get(column) is not None:
                record[column] = json.loads(record[column])
        for column in table_def.bool_columns:
            record[column] = bool(record.get(column))
        return record

    @staticmethod
    def _to_param(table_def: TableDef, column: str, value: Any) -> Any:
        if column in table_def.json_columns and value is not None:
            return json.dumps(value)
        if column in table_def.bool_columns:
            return int(bool(value))
        return value

    # ------------------------------------------------------------------
    # RecordStore interface
    # ------------------------------------------------------------------

    def load(self, entity_type: str, entity_id: str) -> Optional[Dict[str, Any]]:
        table_def = self._table_def(entity_type)
        with self._reader() as conn:
            row = self._execute(
                conn, f"SELECT * FROM {table_def.table} WHERE id = ?", (entity_id,)
            ).fetchone()
        if row:
            return self._row_to_record(table_def, row)
        return None

    def save(self, entity_type: str, record: Dict[str, Any]) -> Dict[str, Any]:
        table_def = self._table_def(entity_type)
        if "id" not in record:
            raise ValueError(f"{entity_type} record has no id")

        columns = [c for c in table_def.columns if c in record]
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns if c != "id")
        sql = f"INSERT INTO {table_def.table} ({', '.join(columns)}) VALUES ({placeholders})"
        if updates:
            sql += f" ON CONFLICT(id) DO UPDATE SET {updates}"
        params = tuple(self._to_param(table_def, c, record[c]) for c in columns)

        with self.transaction() as conn:
            self._execute(conn, sql, params)
        return record

    def query(
        self,
        entity_type: str,
        /,
        order_by: Optional[str] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        table_def = self._table_def(entity_type)
        clauses = []
        params: List[Any] = []
        for column, value in filters.items():
            if column not in table_def.columns:
                raise ValueError(f"Unknown column '{column}' for {entity_type}")
            if isinstance(value, (list, tuple, set, frozenset)):
                values = list(value)
                if not values:
                    return []
                clauses.append(f"{column} IN ({', '.join('?' for _ in values)})")
                params.extend(self._to_param(table_def, column, v) for v in values)
            else:
                clauses.append(f"{column} = ?")
                params.append(self._to_param(table_def, column, value))

        sql = f"SELECT * FROM {table_def.table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            if order_by not in table_def.columns:
                raise ValueError(f"Unknown column '{order_by}' for {entity_type}")
            # rowid keeps insertion order among equal sort keys
            sql += f" ORDER BY {order_by}, rowid"

        with self._reader() as conn:
            rows = self._execute(conn, sql, tuple(params)).fetchall()
        return [self._row_to_record(table_def, row) for row in rows]

    def delete(self, entity_type: str, entity_id: str) -> bool:
        table_def = self._table_def(entity_type)
        with self.transaction() as conn:
            cursor = self._execute(conn, f"DELETE FROM {table_def.table} WHERE id = ?", (entity_id,))
        return cursor.rowcount > 0

    def delete_cascade(self, program_id: str) -> bool:
        with self.transaction() as conn:
            exists = self._execute(
                conn, "SELECT 1 FROM programs WHERE id = ?", (program_id,)
            ).fetchone()
            if not exists:
                return False

            mesocycle_ids = [
                r["id"] for r in self._execute(
                    conn, "SELECT id FROM mesocycles WHERE program_id = ?", (program_id,)
                ).fetchall()
            ]
            microcycle_ids = self._child_ids(conn, "microcycles", "mesocycle_id", mesocycle_ids)
            session_ids = self._child_ids(conn, "sessions", "microcycle_id", microcycle_ids)

            # Associations are keyed by an opaque id, not a foreign key
            for entity_type, ids in (
                ("program", [program_id]),
                ("mesocycle", mesocycle_ids),
                ("microcycle", microcycle_ids),
                ("session", session_ids),
            ):
                self._delete_in(
                    conn,
                    "objective_associations",
                    "entity_id",
                    ids,
                    extra=("entity_type", entity_type),
                )

            self._delete_in(conn, "sessions", "id", session_ids)
            self._delete_in(conn, "microcycles", "id", microcycle_ids)
            self._delete_in(conn, "mesocycles", "id", mesocycle_ids)
            self._execute(conn, "DELETE FROM programs WHERE id = ?", (program_id,))

        logger.info(
            f"Deleted program {program_id} with {len(mesocycle_ids)} mesocycles, "
            f"{len(microcycle_ids)} microcycles, {len(session_ids)} sessions"
        )
        return True

    def _child_ids(
        self,
        conn: sqlite3.Connection,
        table: str,
        parent_column: str,
        parent_ids: List[str],
    ) -> List[str]:
        if not parent_ids:
            return []
        placeholders = ", ".join("?" for _ in parent_ids)
        rows = self._execute(
            conn,
            f"SELECT id FROM {table} WHERE {parent_column} IN ({placeholders})",
            tuple(parent_ids),
        ).fetchall()
        return [r["id"] for r in rows]

    def _delete_in(
        self,
        conn: sqlite3.Connection,
        table: str,
        column: str,
        values: List[str],
        extra: Optional[Tuple[str, str]] = None,
    ) -> None:
        if not values:
            return
        placeholders = ", ".join("?" for _ in values)
        sql = f"DELETE FROM {table} WHERE {column} IN ({placeholders})"
        params: Tuple = tuple(values)
        if extra:
            sql += f" AND {extra[0]} = ?"
            params += (extra[1],)
        self._execute(conn, sql, params)

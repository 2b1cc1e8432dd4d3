# =============================================================================
# maintenance_core/offline/local_database.py
# Local SQLite Mirror of the Remote System of Record
# =============================================================================
"""
LocalMirrorStore - SQLite-based store holding the last known copy of every
entity.

Features:
- One table per entity: key, JSON record, indexed columns, updated_at
- Versioned schema (PRAGMA user_version); opening an older file applies
  only the missing versions
- Replace-by-key upserts
- Simple (field, op, value) filters; indexed fields filter in SQL
- DataFrame export (pandas)
- Thread-local connections
"""

from __future__ import annotations
import json
import operator
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging

import pandas as pd

from maintenance_core.config import DEFAULT_DB_PATH
from maintenance_core.data.entities import (
    ALL_ENTITIES,
    EntitySpec,
    camel_to_snake,
    get_entity,
)
from maintenance_core.errors import LocalStoreError

logger = logging.getLogger(__name__)

# (field, op, value) with camelCase field names
Filter = Tuple[str, str, Any]

IN_MEMORY = ":memory:"

_SQL_OPERATORS = {"eq": "=", "lt": "<", "lte": "<=", "gt": ">", "gte": ">="}
_PY_OPERATORS = {
    "eq": operator.eq,
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
}


def _table_ddl(spec: EntitySpec) -> List[str]:
    columns = ["key TEXT PRIMARY KEY", "data TEXT NOT NULL"]
    columns += [camel_to_snake(f) for f in spec.index_fields]
    columns.append("updated_at TEXT")
    statements = [f"CREATE TABLE IF NOT EXISTS {spec.name} ({', '.join(columns)})"]

    for field_name in spec.index_fields:
        column = camel_to_snake(field_name)
        statements.append(
            f"CREATE INDEX IF NOT EXISTS idx_{spec.name}_{column} ON {spec.name} ({column})"
        )
    for fields in spec.composite_indexes:
        cols = [camel_to_snake(f) for f in fields]
        statements.append(
            f"CREATE INDEX IF NOT EXISTS idx_{spec.name}_{'_'.join(cols)} "
            f"ON {spec.name} ({', '.join(cols)})"
        )
    return statements


# version -> DDL statements; each version only adds tables and indexes
MIGRATIONS: Dict[int, List[str]] = {}
for _spec in ALL_ENTITIES:
    MIGRATIONS.setdefault(_spec.since_version, []).extend(_table_ddl(_spec))

SCHEMA_VERSION = max(MIGRATIONS)


def _index_value(value: Any) -> Any:
    """Value stored in an indexed column (scalars as-is, anything else as JSON)."""
    if value is None or isinstance(value, (str, int, float)):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _matches(record: Dict[str, Any], filters: Iterable[Filter]) -> bool:
    for field_name, op, value in filters:
        try:
            if not _PY_OPERATORS[op](record.get(field_name), value):
                return False
        except TypeError:
            # Missing or incomparable values never match an ordering filter
            return False
    return True


class LocalMirrorStore:
    """
    Local SQLite mirror for offline operation.

    Tables are addressed by entity name ("jobs", "budgets", ...); records are
    plain dicts with camelCase keys.

    Connections and schema setup are per thread. A ":memory:" database is
    private to the thread that opened it.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize local mirror.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = str(db_path or DEFAULT_DB_PATH)
        self._ensure_directory()
        self._local = threading.local()

    def _ensure_directory(self) -> None:
        if self.db_path != IN_MEMORY:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            try:
                self._local.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            except sqlite3.Error as e:
                raise LocalStoreError(f"Cannot open local database {self.db_path}: {e}") from e
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self, table: Optional[str] = None):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise LocalStoreError(f"Local database error: {e}", table=table) from e

    def _query(self, sql: str, params: Sequence[Any] = (), table: Optional[str] = None) -> List[sqlite3.Row]:
        self.initialize()
        try:
            return self._get_connection().execute(sql, list(params)).fetchall()
        except sqlite3.Error as e:
            raise LocalStoreError(f"Local database error: {e}", table=table) from e

    # =========================================================================
    # SCHEMA
    # =========================================================================

    @property
    def schema_version(self) -> int:
        row = self._get_connection().execute("PRAGMA user_version").fetchone()
        return row[0]

    def initialize(self) -> None:
        """Create or upgrade this thread's connection to SCHEMA_VERSION."""
        if getattr(self._local, "initialized", False):
            return

        current = self.schema_version
        for version in range(current + 1, SCHEMA_VERSION + 1):
            with self.transaction() as conn:
                for statement in MIGRATIONS.get(version, []):
                    conn.execute(statement)
                # PRAGMA does not accept bound parameters
                conn.execute(f"PRAGMA user_version = {int(version)}")
            logger.info(f"Local database migrated to schema version {version}")

        self._local.initialized = True
        logger.debug(f"Local database ready at: {self.db_path}")

    # =========================================================================
    # RECORD OPERATIONS
    # =========================================================================

    def _split_filters(
        self, spec: EntitySpec, filters: Optional[Sequence[Filter]]
    ) -> Tuple[str, List[Any], List[Filter]]:
        clauses: List[str] = []
        params: List[Any] = []
        remaining: List[Filter] = []
        for field_name, op, value in filters or ():
            if op not in _SQL_OPERATORS:
                raise ValueError(f"Unsupported filter operator: {op}")
            if field_name in spec.index_fields:
                clauses.append(f"{camel_to_snake(field_name)} {_SQL_OPERATORS[op]} ?")
                params.append(_index_value(value))
            else:
                remaining.append((field_name, op, value))
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params, remaining

    def get(self, table: str, key: Any) -> Optional[Dict[str, Any]]:
        """Get a record by key."""
        spec = get_entity(table)
        rows = self._query(f"SELECT data FROM {spec.name} WHERE key = ?", [str(key)], table)
        return json.loads(rows[0]["data"]) if rows else None

    def get_all(self, table: str) -> List[Dict[str, Any]]:
        return self.find(table)

    def find(self, table: str, filters: Optional[Sequence[Filter]] = None) -> List[Dict[str, Any]]:
        """
        Get records matching all filters, in insertion order.

        Args:
            table: Entity name
            filters: (field, op, value) tuples, op in eq/lt/lte/gt/gte

        Returns:
            List of records
        """
        spec = get_entity(table)
        where, params, remaining = self._split_filters(spec, filters)
        rows = self._query(f"SELECT data FROM {spec.name}{where} ORDER BY rowid", params, table)
        records = [json.loads(row["data"]) for row in rows]
        if remaining:
            records = [r for r in records if _matches(r, remaining)]
        return records

    def count(self, table: str, filters: Optional[Sequence[Filter]] = None) -> int:
        spec = get_entity(table)
        where, params, remaining = self._split_filters(spec, filters)
        if remaining:
            return len(self.find(table, filters))
        rows = self._query(f"SELECT COUNT(*) AS n FROM {spec.name}{where}", params, table)
        return rows[0]["n"]

    def put(self, table: str, record: Dict[str, Any]) -> None:
        """Insert or replace a record by key."""
        self.put_many(table, [record])

    def put_many(self, table: str, records: Sequence[Dict[str, Any]]) -> int:
        """
        Insert or replace records by key in one transaction.

        Returns:
            Number of records written
        """
        if not records:
            return 0
        spec = get_entity(table)
        self.initialize()

        index_columns = [camel_to_snake(f) for f in spec.index_fields]
        columns = ["key", "data", *index_columns, "updated_at"]
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns[1:])
        sql = (
            f"INSERT INTO {spec.name} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT(key) DO UPDATE SET {updates}"
        )

        now = datetime.now().isoformat()
        values = []
        for record in records:
            key = spec.key_of(record)
            if key is None:
                raise LocalStoreError(
                    f"Record without '{spec.key_field}' cannot be stored",
                    table=table,
                )
            values.append([
                str(key),
                json.dumps(record, ensure_ascii=False, default=str),
                *(_index_value(record.get(f)) for f in spec.index_fields),
                now,
            ])

        with self.transaction(table) as conn:
            conn.executemany(sql, values)
        return len(values)

    def delete(self, table: str, key: Any) -> bool:
        """Delete a record by key. Returns True if a row was removed."""
        spec = get_entity(table)
        self.initialize()
        with self.transaction(table) as conn:
            cursor = conn.execute(f"DELETE FROM {spec.name} WHERE key = ?", [str(key)])
            return cursor.rowcount > 0

    def delete_where(self, table: str, filters: Sequence[Filter]) -> int:
        """
        Delete every record matching filters.

        Returns:
            Number of records removed
        """
        spec = get_entity(table)
        keys = [str(spec.key_of(r)) for r in self.find(table, filters)]
        if not keys:
            return 0
        with self.transaction(table) as conn:
            conn.executemany(f"DELETE FROM {spec.name} WHERE key = ?", [[k] for k in keys])
        return len(keys)

    def clear(self, table: str) -> None:
        spec = get_entity(table)
        self.initialize()
        with self.transaction(table) as conn:
            conn.execute(f"DELETE FROM {spec.name}")

    # =========================================================================
    # PANDAS INTEGRATION
    # =========================================================================

    def to_dataframe(self, table: str, filters: Optional[Sequence[Filter]] = None) -> pd.DataFrame:
        """
        Load an entity table into a pandas DataFrame (one column per field).

        Args:
            table: Entity name
            filters: Optional (field, op, value) filters

        Returns:
            DataFrame with the matching records
        """
        return pd.DataFrame(self.find(table, filters))

    def table_counts(self) -> Dict[str, int]:
        """Row count per entity table."""
        return {spec.name: self.count(spec.name) for spec in ALL_ENTITIES}

    def close(self) -> None:
        """Close this thread's database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None
            self._local.initialized = False

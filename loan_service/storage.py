"""
Storage Backend Module

Provides the abstract storage interface and two implementations: in-memory
(testing) and SQLite (persistence). Records are JSON documents keyed by id;
monetary values are stored as Decimal strings and dates as ISO strings.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Union
from decimal import Decimal
from datetime import datetime, date, timezone
import sqlite3
import json
import threading
from dataclasses import dataclass
from pathlib import Path
from contextlib import contextmanager


@dataclass
class StorageRecord:
    """Base class for all stored records"""
    id: Optional[str]
    created_at: datetime
    updated_at: datetime

    def touch(self) -> None:
        """Mark the record as modified now"""
        self.updated_at = datetime.now(timezone.utc)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class StorageInterface(ABC):
    """Abstract interface for storage backends"""

    def __init__(self):
        self._lock = threading.RLock()
        self._atomic_depth = 0

    @abstractmethod
    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to storage"""
        pass

    @abstractmethod
    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from storage"""
        pass

    @abstractmethod
    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table in insertion order"""
        pass

    @abstractmethod
    def delete(self, table: str, record_id: str) -> bool:
        """Delete a record from storage"""
        pass

    @abstractmethod
    def clear_table(self, table: str) -> None:
        """Clear all records from a table"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close storage connection"""
        pass

    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        return self.load(table, record_id) is not None

    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find records whose top-level fields equal every filter value"""
        return [
            record for record in self.load_all(table)
            if all(key in record and record[key] == value for key, value in filters.items())
        ]

    def count(self, table: str) -> int:
        """Count records in table"""
        return len(self.load_all(table))

    def load_latest(self, table: str) -> Optional[Dict[str, Any]]:
        """Most recently inserted record of a table, or None when empty"""
        records = self.load_all(table)
        return records[-1] if records else None

    def begin_transaction(self) -> None:
        """Start a transaction (default no-op)"""
        pass

    def commit(self) -> None:
        """Commit current transaction (default no-op)"""
        pass

    def rollback(self) -> None:
        """Rollback current transaction (default no-op)"""
        pass

    @contextmanager
    def atomic(self):
        """
        Unit of work: every write inside the block is committed together or
        not at all. Nested blocks join the outermost one.
        """
        with self._lock:
            outermost = self._atomic_depth == 0
            if outermost:
                self.begin_transaction()
            self._atomic_depth += 1
            try:
                yield
            except Exception:
                self._atomic_depth -= 1
                if outermost:
                    self.rollback()
                raise
            else:
                self._atomic_depth -= 1
                if outermost:
                    self.commit()


_MISSING = object()


class InMemoryStorage(StorageInterface):
    """In-memory storage implementation for testing"""

    def __init__(self):
        super().__init__()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        # Undo entries of the open transaction, newest last; None outside one
        self._journal: Optional[List[tuple]] = None

    @staticmethod
    def _copy(value: Any) -> Any:
        # JSON round-trip both deep-copies and normalizes Decimals/dates to strings
        return json.loads(json.dumps(value, default=_json_default))

    def _table(self, table: str) -> Dict[str, Dict[str, Any]]:
        return self._data.setdefault(table, {})

    def _journal_record(self, table: str, record_id: str) -> None:
        if self._journal is not None:
            self._journal.append(("record", table, record_id, self._table(table).get(record_id, _MISSING)))

    def _journal_table(self, table: str) -> None:
        if self._journal is not None:
            self._journal.append(("table", table, dict(self._table(table))))

    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self._journal_record(table, record_id)
            self._table(table)[record_id] = self._copy(data)

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._table(table).get(record_id)
            return self._copy(record) if record is not None else None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [self._copy(record) for record in self._table(table).values()]

    def load_latest(self, table: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            records = self._table(table)
            if not records:
                return None
            return self._copy(records[next(reversed(records))])

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            if record_id not in self._table(table):
                return False
            self._journal_table(table)
            del self._table(table)[record_id]
            return True

    def exists(self, table: str, record_id: str) -> bool:
        with self._lock:
            return record_id in self._table(table)

    def count(self, table: str) -> int:
        with self._lock:
            return len(self._table(table))

    def clear_table(self, table: str) -> None:
        with self._lock:
            self._journal_table(table)
            self._data[table] = {}

    def begin_transaction(self) -> None:
        self._journal = []

    def commit(self) -> None:
        self._journal = None

    def rollback(self) -> None:
        if self._journal is None:
            return
        # Stored records are replaced on save, never mutated in place
        for entry in reversed(self._journal):
            if entry[0] == "record":
                _, table, record_id, previous = entry
                if previous is _MISSING:
                    self._table(table).pop(record_id, None)
                else:
                    self._table(table)[record_id] = previous
            else:
                _, table, previous_table = entry
                self._data[table] = previous_table
        self._journal = None

    def close(self) -> None:
        """Close storage (no-op for in-memory)"""
        pass


class SQLiteStorage(StorageInterface):
    """SQLite storage implementation for persistence"""

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        super().__init__()
        self.db_path = str(db_path)
        # isolation_level=None: transactions are opened explicitly in begin_transaction
        self._connection = sqlite3.connect(self.db_path, check_same_thread=False, isolation_level=None)
        self._connection.row_factory = sqlite3.Row
        self._in_transaction = False
        self._known_tables = set()

        if self.db_path != ":memory:":
            with self._lock:
                self._connection.execute("PRAGMA journal_mode = WAL")
                self._connection.execute("PRAGMA synchronous = NORMAL")

    def _ensure_table(self, table: str) -> None:
        """Ensure table exists with proper schema"""
        if table in self._known_tables:
            return
        self._connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._connection.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_{table}_created_at
            ON {table}(created_at)
        """)
        self._known_tables.add(table)

    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self._ensure_table(table)
            now = datetime.now(timezone.utc).isoformat()
            data_json = json.dumps(data, default=_json_default)
            self._connection.execute(f"""
                INSERT INTO {table} (id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
            """, (record_id, data_json, now, now))

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            row = self._connection.execute(
                f"SELECT data FROM {table} WHERE id = ?", (record_id,)
            ).fetchone()
            return json.loads(row['data']) if row else None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(
                f"SELECT data FROM {table} ORDER BY created_at, rowid"
            )
            return [json.loads(row['data']) for row in cursor.fetchall()]

    def load_latest(self, table: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            row = self._connection.execute(
                f"SELECT data FROM {table} ORDER BY created_at DESC, rowid DESC LIMIT 1"
            ).fetchone()
            return json.loads(row['data']) if row else None

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    def exists(self, table: str, record_id: str) -> bool:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(
                f"SELECT 1 FROM {table} WHERE id = ? LIMIT 1", (record_id,)
            )
            return cursor.fetchone() is not None

    def count(self, table: str) -> int:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"SELECT COUNT(*) AS count FROM {table}")
            return cursor.fetchone()['count']

    def clear_table(self, table: str) -> None:
        with self._lock:
            self._ensure_table(table)
            self._connection.execute(f"DELETE FROM {table}")

    def begin_transaction(self) -> None:
        with self._lock:
            if not self._in_transaction:
                self._connection.execute("BEGIN")
                self._in_transaction = True

    def commit(self) -> None:
        with self._lock:
            if self._in_transaction:
                self._connection.execute("COMMIT")
                self._in_transaction = False

    def rollback(self) -> None:
        with self._lock:
            if self._in_transaction:
                self._connection.execute("ROLLBACK")
                self._in_transaction = False
                # tables created inside the rolled back transaction are gone
                self._known_tables.clear()

    def close(self) -> None:
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None

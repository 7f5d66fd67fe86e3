from __future__ import annotations

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

JSON_SUFFIX = "_json"


class Data(ABC):
    """
    Abstract state store.

    The orchestrator owns persisted entities across calls; this store keeps
    them in SQLite with helpers for inserting JSON-friendly rows, querying,
    updating and deleting. Only columns named `*_json` hold JSON.
    """

    def __init__(self, db_path: Path | str = Path(".whimsy.db"), in_memory: bool = False) -> None:
        self._db_path = ":memory:" if in_memory else str(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self.connect()

    def __enter__(self) -> Data:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        assert self._conn is not None, "Database connection is not initialized"
        return self._conn

    @property
    def db_path(self) -> str:
        return self._db_path

    def connect(self) -> None:
        with self._lock:
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        # Initialize predefined tables on first connect
        self._init_tables()

    @abstractmethod
    def _init_tables(self) -> None:
        """Create the tables the store relies on."""

    @abstractmethod
    def insert(self, table_name: str, data: Dict[str, Any]) -> None:
        """Insert a dict as row; dict/list values are JSON-serialized automatically."""

    @abstractmethod
    def query(self, sql: str, params: Tuple[Any, ...] = ()) -> List[Dict[str, Any]]:
        """Execute a SELECT and return a list of dict rows with JSON automatically parsed."""

    @abstractmethod
    def update(self, table_name: str, data: Dict[str, Any], where: str, params: Tuple[Any, ...]) -> None:
        """Update rows matching the where clause with params."""

    @abstractmethod
    def delete(self, table_name: str, where: str, params: Tuple[Any, ...]) -> int:
        """Delete rows matching the where clause; returns the number removed."""

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


class SqliteData(Data):
    """SQLite-backed Data implementation.

    Thread-safe via a re-entrant lock around connection operations.
    """

    def _init_tables(self) -> None:
        """Create predefined tables.
        - entities: one row per generated entity, keyed by address
        """
        with self._lock:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS entities (
                    address TEXT PRIMARY KEY,
                    type_name TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    entity_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT,
                    config_json TEXT,
                    triggers_json TEXT,
                    state TEXT NOT NULL,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME
                )
                """
            )
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_entities_type ON entities(type_name)")
            self.conn.commit()

    def _jsonify(self, value: Any) -> Any:
        if isinstance(value, (dict, list)):
            return json.dumps(value, separators=(",", ":"), sort_keys=True)
        return value

    def _dejsonify(self, column: str, value: Any) -> Any:
        if column.endswith(JSON_SUFFIX) and isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def insert(self, table_name: str, data: Dict[str, Any]) -> None:
        data2 = {k: self._jsonify(v) for k, v in data.items()}
        placeholders = ", ".join(["?"] * len(data2))
        columns = ", ".join(data2.keys())
        with self._lock:
            self.conn.execute(
                f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders})",
                tuple(data2.values()),
            )
            self.conn.commit()

    def query(self, sql: str, params: Tuple[Any, ...] = ()) -> List[Dict[str, Any]]:
        with self._lock:
            cur = self.conn.execute(sql, params)
            rows = cur.fetchall()
        results: List[Dict[str, Any]] = []
        for row in rows:
            d = dict(row)
            results.append({k: self._dejsonify(k, v) for k, v in d.items()})
        return results

    def update(self, table_name: str, data: Dict[str, Any], where: str, params: Tuple[Any, ...]) -> None:
        data2 = {k: self._jsonify(v) for k, v in data.items()}
        set_clause = ", ".join(f"{k} = ?" for k in data2.keys())
        with self._lock:
            self.conn.execute(
                f"UPDATE {table_name} SET {set_clause} WHERE {where}",
                tuple(data2.values()) + params,
            )
            self.conn.commit()

    def delete(self, table_name: str, where: str, params: Tuple[Any, ...]) -> int:
        with self._lock:
            cur = self.conn.execute(f"DELETE FROM {table_name} WHERE {where}", params)
            self.conn.commit()
            return cur.rowcount

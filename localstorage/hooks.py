"""SQLite storage with lifecycle hooks on create, update, delete and find."""

from __future__ import annotations

import os
import re
import sqlite3
import threading
from enum import Enum
from typing import Any, Callable, Mapping

DB_FILE_NAME = "local-storage.db"

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class Hook(str, Enum):
    """Points in a row's lifecycle where callbacks run."""

    BEFORE_CREATE = "before_create"
    AFTER_CREATE = "after_create"
    BEFORE_SAVE = "before_save"
    AFTER_SAVE = "after_save"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"
    AFTER_FIND = "after_find"


Callback = Callable[["Database", Any], None]


class HookRegistry:
    """Callbacks registered per hook, run in registration order."""

    def __init__(self) -> None:
        self._callbacks: dict[Hook, list[Callback]] = {hook: [] for hook in Hook}

    def register(self, hook: Hook | str, callback: Callback) -> None:
        """Add a callback to a hook; an unknown hook name raises ValueError."""
        self._callbacks[Hook(hook)].append(callback)

    def trigger(self, hook: Hook | str, db: Database, model: Any) -> None:
        """Run every callback registered for a hook."""
        for callback in list(self._callbacks[Hook(hook)]):
            callback(db, model)


HOOKS = HookRegistry()


def _ident(name: str) -> str:
    if not _IDENT_RE.fullmatch(name):
        raise ValueError(f"invalid identifier: {name!r}")
    return f'"{name}"'


def _where(where: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
    if not where:
        return "", []
    clause = " AND ".join(f"{_ident(k)} IS ?" for k in where)
    return " WHERE " + clause, list(where.values())


class Database:
    """A single-connection SQLite database whose writes and reads fire hooks.

    Tables are created on first insert and gain columns as new ones appear.
    """

    def __init__(self, path: str, registry: HookRegistry) -> None:
        self.path = path
        self.registry = registry
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        self._conn.row_factory = sqlite3.Row

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _columns(self, table: str) -> list[str]:
        rows = self._conn.execute(f"PRAGMA table_info({_ident(table)})").fetchall()
        return [row["name"] for row in rows]

    def _migrate(self, table: str, columns: list[str]) -> None:
        existing = {c.lower() for c in self._columns(table)}
        if not existing:
            cols = ", ".join(_ident(c) for c in columns)
            self._conn.execute(f"CREATE TABLE {_ident(table)} ({cols})")
            return
        for column in columns:
            if column.lower() not in existing:
                self._conn.execute(
                    f"ALTER TABLE {_ident(table)} ADD COLUMN {_ident(column)}"
                )

    def insert(self, table: str, row: dict[str, Any]) -> int:
        """Insert a row and return its rowid."""
        if not row:
            raise ValueError("row has no columns")
        with self._lock:
            self.registry.trigger(Hook.BEFORE_CREATE, self, row)
            columns = list(row)
            self._migrate(table, columns)
            names = ", ".join(_ident(c) for c in columns)
            marks = ", ".join("?" for _ in columns)
            cursor = self._conn.execute(
                f"INSERT INTO {_ident(table)} ({names}) VALUES ({marks})",
                [row[c] for c in columns],
            )
            self.registry.trigger(Hook.AFTER_CREATE, self, row)
            return cursor.lastrowid

    def update(
        self, table: str, values: dict[str, Any], where: Mapping[str, Any]
    ) -> int:
        """Update matching rows and return how many changed."""
        if not values:
            raise ValueError("no values to update")
        if not where:
            raise ValueError("update requires a where clause")
        with self._lock:
            self.registry.trigger(Hook.BEFORE_SAVE, self, values)
            self.registry.trigger(Hook.BEFORE_UPDATE, self, values)
            assignments = ", ".join(f"{_ident(c)} = ?" for c in values)
            clause, params = _where(where)
            cursor = self._conn.execute(
                f"UPDATE {_ident(table)} SET {assignments}{clause}",
                list(values.values()) + params,
            )
            self.registry.trigger(Hook.AFTER_UPDATE, self, values)
            self.registry.trigger(Hook.AFTER_SAVE, self, values)
            return cursor.rowcount

    def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Delete matching rows and return how many went."""
        if not where:
            raise ValueError("delete requires a where clause")
        with self._lock:
            self.registry.trigger(Hook.BEFORE_DELETE, self, where)
            clause, params = _where(where)
            cursor = self._conn.execute(f"DELETE FROM {_ident(table)}{clause}", params)
            self.registry.trigger(Hook.AFTER_DELETE, self, where)
            return cursor.rowcount

    def select(
        self, table: str, where: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Return matching rows as dictionaries."""
        with self._lock:
            clause, params = _where(where)
            rows = [
                dict(row)
                for row in self._conn.execute(
                    f"SELECT * FROM {_ident(table)}{clause}", params
                )
            ]
            self.registry.trigger(Hook.AFTER_FIND, self, rows)
            return rows

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()


def get_db_by_file(db_file: str, registry: HookRegistry | None = None) -> Database:
    """Open a database file, firing callbacks from ``registry`` (or the shared one)."""
    return Database(db_file, HOOKS if registry is None else registry)


_gdb: Database | None = None


def get_global_db(db_path: str) -> Database:
    """Return the process-wide database, opening it under ``db_path`` first time."""
    global _gdb
    if _gdb is not None:
        return _gdb
    os.makedirs(db_path, exist_ok=True)
    _gdb = get_db_by_file(os.path.join(db_path, DB_FILE_NAME))
    return _gdb
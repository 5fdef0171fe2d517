from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from .errors import StartupError
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    added_on: str = "addedOn"
    due_by: str = "dueBy"
    status: str = "status"


COLS = _Cols()


class Database:
    """
    SQLite connection provider.

    Every transaction gets its own connection, so one Database instance can
    be shared by concurrent requests.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path

    @classmethod
    def open(cls, db_path: str) -> "Database":
        """
        Return a Database whose `tasks` table is guaranteed to exist.

        Raises:
            StartupError: if the file cannot be opened or the table cannot be
                created. Callers must treat this as fatal.
        """
        try:
            db = cls(db_path)
            db.init_schema()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failure while initializing database at {db_path}: {e}")
            raise StartupError(f"Unable to initialize database at {db_path}", detail=str(e)) from e
        logger.info(f"Database ready at {db_path}")
        return db

    def connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly with BEGIN.
        conn = sqlite3.connect(self._db_path, isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection inside BEGIN; commit on success, roll back on error."""
        conn = self.connect()
        try:
            conn.execute("BEGIN")
            try:
                yield conn
            except Exception:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    def init_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {COLS.table} (
                    {COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {COLS.title} TEXT NOT NULL,
                    {COLS.description} TEXT NOT NULL,
                    {COLS.added_on} INTEGER NOT NULL,
                    {COLS.due_by} INTEGER NOT NULL,
                    {COLS.status} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{COLS.table}_{COLS.status} ON {COLS.table}({COLS.status})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{COLS.table}_{COLS.due_by} ON {COLS.table}({COLS.due_by})"
            )

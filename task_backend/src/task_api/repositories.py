from __future__ import annotations

import sqlite3
from typing import Iterable, List, Mapping

from .db import COLS, Database
from .logging_config import get_logger
from .models import TaskEntity
from .pagination import page_offset
from .query import SELECT_ALL, search_query_from_params
from .schemas import TaskIn

logger = get_logger(__name__)

_GET_BY_ID = f"{SELECT_ALL} WHERE {COLS.id} = ?"
_GET_PAGE = f"{SELECT_ALL} LIMIT ? OFFSET ?"
_CREATE = (
    f"INSERT INTO {COLS.table} ({COLS.title}, {COLS.description}, {COLS.added_on}, {COLS.due_by}, {COLS.status}) "
    "VALUES (?, ?, ?, ?, ?)"
)
_UPDATE = (
    f"UPDATE {COLS.table} SET {COLS.title} = ?, {COLS.description} = ?, {COLS.added_on} = ?, "
    f"{COLS.due_by} = ?, {COLS.status} = ? WHERE {COLS.id} = ?"
)
_DELETE = f"DELETE FROM {COLS.table} WHERE {COLS.id} = ?"


def _row_to_entity(row: sqlite3.Row) -> TaskEntity:
    return {
        "id": int(row[COLS.id]),
        "title": str(row[COLS.title]),
        "description": str(row[COLS.description]),
        "added_on": int(row[COLS.added_on]),
        "due_by": int(row[COLS.due_by]),
        "status": str(row[COLS.status]),
    }


def _to_entities(rows: Iterable[sqlite3.Row]) -> List[TaskEntity]:
    return [_row_to_entity(r) for r in rows]


# PUBLIC_INTERFACE
class TaskRepository:
    """
    Transactional data access for the `tasks` table.

    Each public method runs in its own transaction: committed when the method
    returns, rolled back when it raises. Database errors are not caught here;
    they reach the caller unchanged.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def get_by_id(self, task_id: int) -> List[TaskEntity]:
        """Return a list holding the matching task, or an empty list if there is none."""
        with self._db.transaction() as conn:
            rows = conn.execute(_GET_BY_ID, (task_id,)).fetchall()
            return _to_entities(rows)

    def get_all(self, page: int, per_page: int) -> List[TaskEntity]:
        """
        Return one page of tasks, zero-indexed.

        Passing -1 for either argument returns the whole table unpaginated.
        """
        with self._db.transaction() as conn:
            if page == -1 or per_page == -1:
                rows = conn.execute(SELECT_ALL).fetchall()
            else:
                rows = conn.execute(_GET_PAGE, (per_page, page_offset(page, per_page))).fetchall()
            return _to_entities(rows)

    def create(self, task: TaskIn) -> int:
        """Insert a task and return the id generated for it. Any id on the input is ignored."""
        with self._db.transaction() as conn:
            cur = conn.execute(
                _CREATE,
                (task.title, task.description, task.added_on, task.due_by, task.status),
            )
            return int(cur.lastrowid)

    def update(self, task: TaskIn, task_id: int) -> None:
        """Replace every mutable field of the row `task_id`. Updating a missing row is a no-op."""
        with self._db.transaction() as conn:
            conn.execute(
                _UPDATE,
                (task.title, task.description, task.added_on, task.due_by, task.status, task_id),
            )

    def delete(self, task_id: int) -> int:
        """Delete the row `task_id` and return the number of rows removed (0 when absent)."""
        with self._db.transaction() as conn:
            cur = conn.execute(_DELETE, (task_id,))
            return int(cur.rowcount)

    def search(self, params: Mapping[str, str]) -> List[TaskEntity]:
        """
        Return tasks matching every recognized filter in `params`.

        Always paginated (see query.search_query_from_params); results are
        unordered.
        """
        query = search_query_from_params(params)
        with self._db.transaction() as conn:
            logger.info(f"Executing query: {query.sql} with params {query.params}")
            rows = conn.execute(query.sql, query.params).fetchall()
            return _to_entities(rows)

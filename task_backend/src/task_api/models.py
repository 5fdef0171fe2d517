from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task row.

    Fields:
    - id: Unique integer identifier assigned by the database
    - title: Short title
    - description: Detailed description
    - added_on: Creation time in epoch milliseconds (supplied by the client)
    - due_by: Due time in epoch milliseconds
    - status: Free-form status label, e.g. "open" or "done"
    """

    id: int
    title: str
    description: str
    added_on: int
    due_by: int
    status: str

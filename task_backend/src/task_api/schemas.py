from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TaskIn(BaseModel):
    """
    Schema for creating or replacing a Task.

    `id` is ignored on create. On replace it must match the id in the URL.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "added_on": 1735689600000,
                "due_by": 1735776000000,
                "status": "open",
            }
        }
    )

    id: Optional[int] = Field(default=None, description="Task id; required to match the path on update")
    title: str = Field(..., description="Short title for the task")
    description: str = Field(..., description="Detailed description")
    added_on: int = Field(..., description="Creation time in epoch milliseconds")
    due_by: int = Field(..., description="Due time in epoch milliseconds")
    status: str = Field(..., description="Status label, e.g. 'open' or 'done'")

    @field_validator("title", "status")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """
        Strip whitespace and reject blank values.
        """
        s = v.strip()
        if not s:
            raise ValueError("must not be blank")
        return s


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 8,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "added_on": 1735689600000,
                "due_by": 1735776000000,
                "status": "open",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: str = Field(..., description="Detailed description")
    added_on: int = Field(..., description="Creation time in epoch milliseconds")
    due_by: int = Field(..., description="Due time in epoch milliseconds")
    status: str = Field(..., description="Status label")

"""Custom exceptions for the task API."""

from typing import Optional


class TaskAPIException(Exception):
    """Base exception for the task API."""

    error = "InternalError"

    def __init__(self, message: str, status_code: int = 500, detail: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)


class StartupError(TaskAPIException):
    """Raised when the database cannot be opened or the schema cannot be created."""

    error = "StartupError"

    def __init__(self, message: str = "Database startup failed", **kwargs):
        super().__init__(message, status_code=500, **kwargs)


class InvalidFilterError(TaskAPIException, ValueError):
    """Raised when a search filter value cannot be converted to its column type."""

    error = "InvalidFilter"

    def __init__(self, key: str, value: str, **kwargs):
        self.key = key
        self.value = value
        message = f"Invalid value '{value}' for search filter '{key}'"
        super().__init__(message, status_code=400, **kwargs)

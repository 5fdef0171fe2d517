# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_api.db import Database
from task_api.main import create_app
from task_api.repositories import TaskRepository
from task_api.settings import Settings


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    # Nested directory checks that Database creates missing parents.
    return str(tmp_path / "db" / "tasks_test.db")


@pytest.fixture()
def db(db_path: str) -> Database:
    return Database.open(db_path)


@pytest.fixture()
def repo(db: Database) -> TaskRepository:
    return TaskRepository(db)


@pytest.fixture()
def settings(db_path: str) -> Settings:
    return Settings(
        db_path=db_path,
        cors_allow_origins=["*"],
        cors_allow_headers=["*"],
        log_level="warning",
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    # Entering the client runs the lifespan, which creates the table.
    with TestClient(app) as c:
        yield c

import sqlite3

import pytest

from task_api.db import Database
from task_api.errors import InvalidFilterError, StartupError
from task_api.pagination import INT64_MAX
from task_api.repositories import TaskRepository

from .fakes import FakeDatabase, make_task


def _seed(repo: TaskRepository, count: int, **overrides):
    return [repo.create(make_task(title=f"Task {i}", **overrides)) for i in range(count)]


class TestDatabase:
    def test_open_is_idempotent(self, db_path):
        Database.open(db_path)
        db = Database.open(db_path)
        with db.transaction() as conn:
            rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='tasks'").fetchall()
        assert len(rows) == 1

    def test_open_failure_is_startup_error(self, tmp_path):
        # A directory cannot be opened as a database file.
        target = tmp_path / "not_a_file"
        target.mkdir()
        with pytest.raises(StartupError):
            Database.open(str(target))

    def test_transaction_commits_on_success(self):
        db = FakeDatabase()
        with db.transaction() as conn:
            conn.execute("SELECT 1")
        db.conn.commit.assert_called_once()
        db.conn.rollback.assert_not_called()
        db.conn.close.assert_called_once()


class TestGetById:
    def test_returns_single_task(self, repo):
        new_id = repo.create(make_task())
        tasks = repo.get_by_id(new_id)
        assert tasks == [
            {
                "id": new_id,
                "title": "sample",
                "description": "sample",
                "added_on": 1,
                "due_by": 1,
                "status": "sample",
            }
        ]

    def test_missing_id_returns_empty_list(self, repo):
        assert repo.get_by_id(424242) == []

    def test_error_rolls_back_and_raises(self):
        db = FakeDatabase(error=sqlite3.OperationalError("error occurred"))
        with pytest.raises(sqlite3.OperationalError):
            TaskRepository(db).get_by_id(8)
        db.conn.rollback.assert_called_once()
        db.conn.commit.assert_not_called()


class TestGetAll:
    def test_empty_table_returns_empty_list(self, repo):
        assert repo.get_all(-1, -1) == []
        assert repo.get_all(0, 10) == []

    def test_minus_one_returns_everything(self, repo):
        ids = _seed(repo, 15)
        assert sorted(t["id"] for t in repo.get_all(-1, -1)) == sorted(ids)
        assert len(repo.get_all(-1, 5)) == 15
        assert len(repo.get_all(2, -1)) == 15

    def test_pages_are_bounded(self, repo):
        _seed(repo, 7)
        assert len(repo.get_all(0, 3)) == 3
        assert len(repo.get_all(1, 3)) == 3
        assert len(repo.get_all(2, 3)) == 1
        assert repo.get_all(3, 3) == []

    def test_binds_limit_and_offset(self):
        db = FakeDatabase()
        TaskRepository(db).get_all(4, 25)
        sql, params = db.statements[-1]
        assert sql.endswith("LIMIT ? OFFSET ?")
        assert params == (25, 100)

    def test_huge_page_offset_is_clamped(self, repo):
        _seed(repo, 2)
        assert repo.get_all(INT64_MAX, 2) == []


class TestCreate:
    def test_round_trip(self, repo):
        task = make_task(title="Write report", description="Quarterly", added_on=100, due_by=200, status="open")
        new_id = repo.create(task)
        (stored,) = repo.get_by_id(new_id)
        assert stored["id"] == new_id
        assert stored == {**task.model_dump(exclude={"id"}), "id": new_id}

    def test_ids_are_generated(self, repo):
        first = repo.create(make_task(id=999))
        second = repo.create(make_task())
        assert first != 999
        assert second > first

    def test_not_null_violation_raises(self, repo):
        task = make_task().model_copy(update={"title": None})
        with pytest.raises(sqlite3.IntegrityError):
            repo.create(task)
        assert repo.get_all(-1, -1) == []

    def test_error_rolls_back(self):
        db = FakeDatabase(error=sqlite3.IntegrityError("constraint"))
        with pytest.raises(sqlite3.IntegrityError):
            TaskRepository(db).create(make_task())
        db.conn.rollback.assert_called_once()


class TestUpdate:
    def test_replaces_all_fields(self, repo):
        new_id = repo.create(make_task())
        repo.update(make_task(title="new", description="desc", added_on=5, due_by=6, status="done"), new_id)
        (stored,) = repo.get_by_id(new_id)
        assert stored == {
            "id": new_id,
            "title": "new",
            "description": "desc",
            "added_on": 5,
            "due_by": 6,
            "status": "done",
        }

    def test_missing_row_is_not_an_error(self, repo):
        assert repo.update(make_task(), 424242) is None
        assert repo.get_all(-1, -1) == []

    def test_error_rolls_back_and_raises(self):
        db = FakeDatabase(error=sqlite3.IntegrityError("NOT NULL constraint failed: tasks.title"))
        with pytest.raises(sqlite3.IntegrityError):
            TaskRepository(db).update(make_task(), 8)
        db.conn.rollback.assert_called_once()
        db.conn.commit.assert_not_called()
        db.conn.close.assert_called_once()

    def test_commit_failure_is_raised(self):
        db = FakeDatabase(commit_error=sqlite3.OperationalError("database is locked"))
        with pytest.raises(sqlite3.OperationalError):
            TaskRepository(db).update(make_task(), 8)
        db.conn.commit.assert_called_once()
        db.conn.close.assert_called_once()


class TestDelete:
    def test_delete_existing_returns_one(self, repo):
        new_id = repo.create(make_task())
        assert repo.delete(new_id) == 1
        assert repo.get_by_id(new_id) == []

    def test_delete_missing_returns_zero(self, repo):
        assert repo.delete(424242) == 0

    def test_error_rolls_back_and_raises(self):
        db = FakeDatabase(error=sqlite3.OperationalError("error occurred"))
        with pytest.raises(sqlite3.OperationalError):
            TaskRepository(db).delete(8)
        db.conn.rollback.assert_called_once()
        db.conn.commit.assert_not_called()


class TestSearch:
    def test_empty_table(self, repo):
        assert repo.search({}) == []

    def test_status_filter(self, repo):
        done = _seed(repo, 2, status="done")
        _seed(repo, 1, status="open")
        found = repo.search({"status": "done"})
        assert sorted(t["id"] for t in found) == sorted(done)
        assert all(t["status"] == "done" for t in found)

    def test_range_filters(self, repo):
        repo.create(make_task(title="early", added_on=5, due_by=50))
        repo.create(make_task(title="middle", added_on=15, due_by=15))
        repo.create(make_task(title="late", added_on=25, due_by=30))
        found = repo.search({"addedOnFrom": "10", "dueByTo": "20"})
        assert [t["title"] for t in found] == ["middle"]

    def test_id_filter(self, repo):
        ids = _seed(repo, 3)
        found = repo.search({"id": str(ids[1])})
        assert [t["id"] for t in found] == [ids[1]]

    def test_always_paginated(self, repo):
        _seed(repo, 12)
        assert len(repo.search({})) == 10
        assert len(repo.search({"page": "1"})) == 2
        assert len(repo.search({"page": "0", "perPage": "5"})) == 5

    def test_out_of_range_pagination_uses_defaults(self, repo):
        _seed(repo, 12)
        big = "99999999999999999999"
        assert len(repo.search({"perPage": big})) == 10
        assert len(repo.search({"page": big})) == 10

    def test_huge_page_and_per_page_return_nothing(self, repo):
        _seed(repo, 2)
        assert repo.search({"page": str(INT64_MAX), "perPage": str(INT64_MAX)}) == []

    def test_out_of_range_filter_value_raises_before_query(self, repo):
        with pytest.raises(InvalidFilterError):
            repo.search({"dueByTo": "99999999999999999999"})

    def test_unknown_keys_are_ignored(self, repo):
        _seed(repo, 2)
        assert len(repo.search({"colour": "red"})) == 2

    def test_status_value_is_bound_not_interpolated(self, repo):
        _seed(repo, 2, status="done")
        assert repo.search({"status": "done\" OR \"1\"=\"1"}) == []
        assert len(repo.get_all(-1, -1)) == 2

    def test_error_rolls_back_and_raises(self):
        db = FakeDatabase(error=sqlite3.OperationalError("no such table: tasks"))
        with pytest.raises(sqlite3.OperationalError):
            TaskRepository(db).search({"status": "done"})
        db.conn.rollback.assert_called_once()

import pytest
from datetime import datetime, timezone, timedelta
from pathlib import Path
import sqlalchemy as db
from taskcli.adapters.sql.task_repo import SqlTaskRepository
from taskcli.domain.task import Task, TaskId
from taskcli.domain.enums import TaskStatus
from taskcli.domain.errors import StorageError, TaskFormatError

T0 = datetime(2025, 1, 1, 12, 0, 0, 654321, tzinfo=timezone.utc)


@pytest.fixture
def tmp_repo(tmp_path):
    """Repository over a fresh temporary database."""
    db_path = tmp_path / "tasks.db"
    repo = SqlTaskRepository(db_path)
    yield repo
    repo.engine.dispose()


def make_task(task_id: int, description: str = "Test", status: TaskStatus = TaskStatus.TODO) -> Task:
    task = Task.create(TaskId(task_id), description, T0)
    task.status = status
    task.updated_at = T0 + timedelta(seconds=task_id)
    return task


def test_empty_database(tmp_repo):
    assert tmp_repo.load() == []
    assert tmp_repo.get_next_id() == 1


def test_save_and_load_round_trip(tmp_repo):
    tasks = [make_task(3, "c", TaskStatus.DONE), make_task(1, "a"), make_task(2, "b", TaskStatus.IN_PROGRESS)]

    tmp_repo.save(tasks)

    assert tmp_repo.load() == tasks


def test_save_replaces_whole_collection(tmp_repo):
    tmp_repo.save([make_task(1), make_task(2)])
    tmp_repo.save([make_task(2)])

    assert [t.task_id for t in tmp_repo.load()] == [2]


def test_get_next_id_is_max_plus_one(tmp_repo):
    tmp_repo.save([make_task(1), make_task(5), make_task(3)])

    assert tmp_repo.get_next_id() == 6


def test_data_survives_new_repository_instance(tmp_path):
    path = tmp_path / "tasks.db"
    first = SqlTaskRepository(path)
    first.save([make_task(1, "persisted")])
    first.engine.dispose()

    second = SqlTaskRepository(path)
    assert second.load()[0].description == "persisted"
    second.engine.dispose()


def test_failed_save_keeps_previous_rows(tmp_repo):
    tmp_repo.save([make_task(1)])

    # duplicate id violates the UNIQUE constraint, the transaction rolls back
    with pytest.raises(StorageError):
        tmp_repo.save([make_task(7), make_task(7)])

    assert [t.task_id for t in tmp_repo.load()] == [1]


def test_unknown_status_raises_format_error(tmp_repo):
    tmp_repo.save([make_task(1)])
    with tmp_repo.engine.begin() as conn:
        conn.execute(db.update(tmp_repo.tasks).values(status="later"))

    with pytest.raises(TaskFormatError):
        tmp_repo.load()


def test_unopenable_database_raises_storage_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")

    with pytest.raises(StorageError):
        SqlTaskRepository(Path(blocker / "tasks.db"))


@pytest.mark.parametrize("values, fragment", [
    ({"description": "   "}, "description"),
    ({"description": ""}, "description"),
    ({"id": 0}, "positive integer"),
    ({"id": -3}, "positive integer"),
])
def test_rows_breaking_task_rules_raise_format_error(tmp_repo, values, fragment):
    tmp_repo.save([make_task(1)])
    with tmp_repo.engine.begin() as conn:
        conn.execute(db.update(tmp_repo.tasks).values(**values))

    with pytest.raises(TaskFormatError) as exc:
        tmp_repo.load()

    assert fragment in str(exc.value)

from datetime import datetime, timezone

from taskcli.adapters.memory.task_repo import InMemoryTaskRepository
from taskcli.domain.task import Task, TaskId
from taskcli.domain.enums import TaskStatus

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_task(task_id: int, description: str = "Test") -> Task:
    return Task.create(TaskId(task_id), description, T0)


def test_empty_repo():
    repo = InMemoryTaskRepository()

    assert repo.load() == []
    assert repo.get_next_id() == 1


def test_get_next_id_is_max_plus_one():
    repo = InMemoryTaskRepository([make_task(1), make_task(5), make_task(3)])

    assert repo.get_next_id() == 6


def test_save_then_load_keeps_order():
    repo = InMemoryTaskRepository()
    tasks = [make_task(2, "b"), make_task(1, "a")]

    repo.save(tasks)

    assert repo.load() == tasks
    assert repo.save_calls == 1
    assert repo.load_calls == 1


def test_loaded_tasks_are_copies():
    repo = InMemoryTaskRepository([make_task(1)])

    loaded = repo.load()
    loaded[0].status = TaskStatus.DONE
    loaded.append(make_task(2))

    fresh = repo.load()
    assert len(fresh) == 1
    assert fresh[0].status == TaskStatus.TODO


def test_saved_tasks_are_copies():
    repo = InMemoryTaskRepository()
    tasks = [make_task(1)]
    repo.save(tasks)

    tasks[0].description = "changed after save"

    assert repo.load()[0].description == "Test"


def test_all_adapters_implement_the_repository_port():
    from taskcli.ports.task_repository import TaskRepository
    from taskcli.adapters.file.task_repo import JsonFileTaskRepository
    from taskcli.adapters.sql.task_repo import SqlTaskRepository

    for adapter in (InMemoryTaskRepository, JsonFileTaskRepository, SqlTaskRepository):
        assert TaskRepository in adapter.__mro__

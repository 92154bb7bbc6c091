from taskcli.ports.task_repository import TaskRepository
from taskcli.domain.task import Task
from typing import Iterable
from copy import deepcopy

### COMMENTS
# ==========================================================
# In-memory task repository (adapters/memory/task_repo.py).
# ==========================================================
# - Used by tests, the `demo` command and the `memory` backend.
# - Keeps a private list of deep copies: the caller's objects and the stored
#   ones never share state, so a mutation only "counts" after `save`.
# - Nothing survives the lifetime of the object.
# - `save_calls` / `load_calls` let tests check that a failed use case did not write.



class InMemoryTaskRepository(TaskRepository):
    """
        Initializes the repository with an optional starting collection.
        :param initial: Iterable of Task objects to preload, kept in the given order.
    """
    def __init__(self, initial: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = [deepcopy(t) for t in (initial or [])]
        self.save_calls = 0
        self.load_calls = 0

    def save(self, tasks: list[Task]) -> None:
        """
            Replaces the stored collection with a copy of `tasks`.

            :param tasks: Full collection to keep.
            :return: None
        """
        self.save_calls += 1
        self._tasks = [deepcopy(t) for t in tasks]

    def load(self) -> list[Task]:
        """
            Returns fresh copies of the stored tasks, in stored order.

            :return: List of `Task` objects (empty when nothing was saved).
        """
        self.load_calls += 1
        return [deepcopy(t) for t in self._tasks]

    def get_next_id(self) -> int:
        return max((t.task_id for t in self._tasks), default=0) + 1

from taskcli.ports.task_repository import TaskRepository
from taskcli.ports.clock import Clock
from taskcli.adapters.system.clock_system import SystemClock
from taskcli.domain.task import Task, TaskId, clean_description
from taskcli.domain.errors import TaskNotFoundError
from typing import Callable
import logging

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# Service layer (services/task_service.py) - use cases.
# ==========================================================
# Role:
# - Orchestrates every use case as one read-modify-write cycle over `TaskRepository`:
#   load the whole collection -> find the task (linear scan) -> one entity
#   operation -> save the whole collection.
# - Works against the TaskRepository port; the concrete adapter is picked by the CLI.
#
# Rules:
# - Entity validation (EmptyDescriptionError) happens before any save.
# - Missing id -> `TaskNotFoundError`, raised after load and before save,
#   so storage is left exactly as it was.
# - StorageError / TaskFormatError from the repository propagate unchanged.
#   No retries, no fallback.



class TaskService:
    """
    Use-case service for tasks.

    :param repo: TaskRepository implementation.
    :param clock: Time source; defaults to `SystemClock`.
    """
    def __init__(self, repo: TaskRepository, clock: Clock | None = None) -> None:
        self.repo = repo
        self.clock = clock or SystemClock()

    def add_task(self, description: str) -> Task:
        """
            Creates a new task and appends it to the stored collection.

            - `task_id` comes from `repo.get_next_id()` (max id + 1).
            - Status starts as "todo", `created_at == updated_at == clock.now()`.

            :param description: Task text (required, stored trimmed).
            :return: Created `Task`.
            :raises EmptyDescriptionError: When the description is blank; nothing is saved.
        """
        text = clean_description(description)  # before any storage access
        next_id = self.repo.get_next_id()
        task = Task.create(TaskId(next_id), text, self.clock.now())

        tasks = self.repo.load()
        tasks.append(task)
        self.repo.save(tasks)

        logger.info("Added task %s", task.task_id)
        return task

    def update_task(self, task_id: TaskId, description: str) -> Task:
        """
            Replaces the description of an existing task.

            :raises TaskNotFoundError: If no task with the given ID exists.
            :raises EmptyDescriptionError: When the description is blank; nothing is saved.
            :return: The updated `Task`.
        """
        task = self._apply(task_id, lambda t: t.update_description(description, self.clock.now()))
        logger.info("Updated task %s", task_id)
        return task

    def delete_task(self, task_id: TaskId) -> None:
        """
            Removes exactly one task with the given ID and saves the rest.

            :raises TaskNotFoundError: If no task with the given ID exists.
        """
        tasks = self.repo.load()
        index = self._find_index(tasks, task_id)
        del tasks[index]
        self.repo.save(tasks)
        logger.info("Deleted task %s", task_id)

    def mark_task_in_progress(self, task_id: TaskId) -> Task:
        """
            Marks an existing task as "in-progress", whatever its current status.

            :raises TaskNotFoundError: If no task with the given ID exists.
            :return: The updated `Task`.
        """
        task = self._apply(task_id, lambda t: t.mark_in_progress(self.clock.now()))
        logger.info("Task %s marked in-progress", task_id)
        return task

    def mark_task_done(self, task_id: TaskId) -> Task:
        """
            Marks an existing task as "done". Calling it again keeps the status
            and only refreshes `updated_at`.

            :raises TaskNotFoundError: If no task with the given ID exists.
            :return: The updated `Task`.
        """
        task = self._apply(task_id, lambda t: t.mark_done(self.clock.now()))
        logger.info("Task %s marked done", task_id)
        return task

    def list_tasks(self, status: str = "") -> list[Task]:
        """
        Returns tasks in stored order.

        - Empty `status`: every task.
        - Otherwise only tasks whose status equals `status` exactly; an unknown
          value gives an empty list, not an error.
        """
        tasks = self.repo.load()
        if not status:
            return tasks
        return [t for t in tasks if t.status == status]

    def _apply(self, task_id: TaskId, operation: Callable[[Task], None]) -> Task:
        tasks = self.repo.load()
        task = tasks[self._find_index(tasks, task_id)]
        operation(task)
        self.repo.save(tasks)
        return task

    def _find_index(self, tasks: list[Task], task_id: TaskId) -> int:
        for index, task in enumerate(tasks):
            if task.task_id == task_id:
                return index
        raise TaskNotFoundError(task_id)

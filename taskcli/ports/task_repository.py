from typing import Protocol
from taskcli.domain.task import Task


### COMMENTS
# ==========================================================
# Task repository contract (ports/task_repository.py).
# ==========================================================
# - Technology independent (memory, JSON file, SQL database).
# - Works on the whole collection only: load everything, save everything.
#   Per-record logic (lookup, mutation, removal) belongs to the service.
# - Adapters map technical failures onto StorageError / TaskFormatError.
# - Order is insertion/load order, not sorted by id.
# - No locking: two processes saving the same storage means last save wins.


class TaskRepository(Protocol):
    """Repository interface for reading and writing the collection of `Task` objects.

    Adapters must:
    - make `save` atomic from the caller's point of view,
    - keep the stored order,
    - translate technical errors into `RepositoryError` subclasses,
    - skip business validation (that belongs to the entity and the service).
    """

    def save(self, tasks: list[Task]) -> None:
        """Replaces the entire persisted collection.

        Exceptions:
            StorageError: When the medium cannot be written.

        Notes:
            A failed save leaves the previously stored collection untouched.
        """

    def load(self) -> list[Task]:
        """Returns the full persisted collection in stored order.

        Returns:
            list[Task]: Empty list when nothing was ever persisted
            (missing or empty artifact).

        Exceptions:
            StorageError: When the medium cannot be read.
            TaskFormatError: When persisted data exists but is malformed.
        """

    def get_next_id(self) -> int:
        """Suggests the next identifier: 1 for an empty collection, max(id) + 1 otherwise.

        Notes:
            Nothing is reserved or persisted. Two callers racing between
            `get_next_id` and `save` can get the same value.
        """

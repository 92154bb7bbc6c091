from typing import NewType
from datetime import datetime
from dataclasses import dataclass
from taskcli.domain.enums import TaskStatus
from taskcli.domain.errors import EmptyDescriptionError

TaskId = NewType("TaskId", int)

@dataclass
class Task():
    """
    Domain model of a single task. Mutable: the service changes it in place inside
    the loaded collection and saves the whole collection afterwards.
    Time is always supplied by the caller (the service's Clock).
    """
    task_id: TaskId
    description: str
    created_at: datetime
    updated_at: datetime
    status: TaskStatus = TaskStatus.TODO

    @classmethod
    def create(cls, task_id: TaskId, description: str, now: datetime) -> "Task":
        """
            Builds a new task in the `todo` state.

            :param task_id: Identifier assigned by the repository (`get_next_id`).
            :param description: Text of the task; stored trimmed.
            :param now: Creation time, used for both `created_at` and `updated_at`.
            :raises EmptyDescriptionError: When the trimmed description is empty.
            :return: New `Task`.
        """
        text = clean_description(description)
        return cls(
            task_id=task_id,
            description=text,
            created_at=now,
            updated_at=now,
            status=TaskStatus.TODO,
        )

    def update_description(self, description: str, now: datetime) -> None:
        """
            Replaces the description (trimmed) and refreshes `updated_at`.

            Validation happens first, so a rejected value leaves the task untouched.

            :raises EmptyDescriptionError: When the trimmed description is empty.
        """
        text = clean_description(description)
        self.description = text
        self._touch(now)

    def mark_in_progress(self, now: datetime) -> None:
        """Sets status to `in-progress` from any state."""
        self.status = TaskStatus.IN_PROGRESS
        self._touch(now)

    def mark_done(self, now: datetime) -> None:
        """Sets status to `done` from any state."""
        self.status = TaskStatus.DONE
        self._touch(now)

    def _touch(self, now: datetime) -> None:
        # updated_at never goes below created_at
        self.updated_at = max(now, self.created_at)


def clean_description(description: str | None) -> str:
    text = (description or "").strip()
    if not text:
        raise EmptyDescriptionError()
    return text



### COMMENTS
# ======================================
# Status transitions
# ======================================
# There is no workflow guard: any status can be reached from any other one
# (done -> in-progress is allowed). mark_* calls are idempotent with respect to
# status, only `updated_at` moves forward.
#
# ======================================
# Identity
# ======================================
# `task_id` is a positive int handed out by the repository as max(id) + 1.
# The entity never changes it after creation. `created_at` is set once as well.

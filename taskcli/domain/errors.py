

### COMMENTS
# ============================================
# Error conventions used across the project
# ============================================
# - Domain (DomainError):
#     * TaskValidationError / EmptyDescriptionError: input broke an entity rule,
#       raised before anything is written
#     * TaskNotFoundError: the id is not in the loaded collection
#
# - Repositories (adapters):
#     * map technical errors (OSError, JSONDecodeError, SQLAlchemyError) onto
#       RepositoryError subclasses, chaining the original cause
#
# - UI (CLI):
#     * DomainError -> friendly message, the process keeps a zero exit code
#     * RepositoryError -> environment problem, non-zero exit code


class DomainError(Exception):
    """Base class for business errors.
    Lets the UI tell user-correctable problems apart from technical ones
    (disk, file format, database). Never raised directly, use a subclass.
    """

class TaskValidationError(DomainError):
    """Raised when input does not satisfy the task's business rules.
    Carries the offending `field` and a readable `message` for the UI.
    """
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(self.__str__())
    def __str__(self):
        return f"Invalid value for '{self.field}': {self.message}"


class EmptyDescriptionError(TaskValidationError):
    """Description is empty or whitespace only."""
    def __init__(self):
        super().__init__("description", "Task description cannot be empty")


class TaskNotFoundError(DomainError):
    """Raised when the requested task is not in the repository.
    Occurs in every operation that needs an existing record: update, delete,
    mark-in-progress and mark-done.
    """
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Task with ID {self.task_id} not found"


class RepositoryError(Exception):
    """Base class for technical persistence errors. Not a DomainError."""


class StorageError(RepositoryError):
    """The storage medium could not be read or written."""


class TaskFormatError(RepositoryError):
    """Persisted data exists but is not well-formed.
    Nothing is repaired automatically; the artifact has to be fixed or removed.
    """
    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(self.__str__())
    def __str__(self):
        return f"{self.source}: {self.message}"

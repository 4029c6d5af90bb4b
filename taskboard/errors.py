"""Error types raised by the store and service layers.

Each error carries the HTTP status the API should answer with, so the
application can map them without knowing every subclass.
"""


class TaskError(Exception):
    """Base class for task manager errors."""

    status_code: int = 500

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)
        self.message = message


class TaskNotFoundError(TaskError):
    """The operation targets a task id that does not exist."""

    status_code = 404

    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class StorageCorruptionError(TaskError):
    """The data file does not hold a well-formed task collection."""


class StorageIOError(TaskError):
    """Reading, writing or renaming the data file failed."""

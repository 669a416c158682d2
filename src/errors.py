"""Exception types raised by the task store and storage layer."""


class TaskListError(Exception):
    """Base class for all task list errors."""


class StorageReadError(TaskListError):
    """Persisted data is missing or malformed. Recovered by load()."""


class IndexOutOfRange(TaskListError, IndexError):
    def __init__(self, index: int, length: int):
        super().__init__(f"No task at position {index} (list has {length}).")
        self.index = index
        self.length = length


class EmptyTitleError(TaskListError, ValueError):
    pass


class InvalidStateError(TaskListError, ValueError):
    pass


class UnknownTaskError(TaskListError, KeyError):
    def __init__(self, task_id: str):
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task id {self.task_id} not found."


class InvalidDeadlineError(TaskListError, ValueError):
    pass

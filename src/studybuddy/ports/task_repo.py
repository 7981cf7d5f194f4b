"""Task repository interface."""

from datetime import date
from typing import Protocol

from studybuddy.core.tasks import Task


class TaskNotFoundError(LookupError):
    """Raised when a task id doesn't exist."""

    pass


class TaskRepository(Protocol):
    """Interface for storing tasks in any backend."""

    def fetch(
        self,
        completed: bool | None = None,
        category: str | None = None,
        due_on: date | None = None,
    ) -> list[Task]:
        """List tasks matching the filters, earliest due first."""
        ...

    def get(self, task_id: str) -> Task:
        """Fetch one task. Raises TaskNotFoundError."""
        ...

    def create(self, task: Task) -> Task:
        """Store a new task. The store assigns its id."""
        ...

    def update(self, task_id: str, **changes) -> Task:
        """Update fields of a task. Raises TaskNotFoundError."""
        ...

    def mark_completed(self, task_id: str, completed: bool) -> tuple[Task, bool]:
        """
        Set a task's completed flag in one atomic step.

        Returns the task and whether the flag actually changed, so only one
        caller ever sees a given not-done -> done transition.
        Raises TaskNotFoundError.
        """
        ...

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it didn't exist."""
        ...

"""Task repository interface."""

from typing import Protocol

from chronogrid.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for storing tasks in any backend."""

    def list_tasks(self) -> list[Task]:
        """Fetch all tasks."""
        ...

    def get_task(self, task_id: str) -> Task:
        """Fetch one task. Raises RecordNotFoundError if missing."""
        ...

    def create_task(self, task: Task) -> Task:
        """Store a new task. Returns it with its assigned identity."""
        ...

    def update_task(self, task: Task) -> Task:
        """Replace an existing task. Returns the stored version."""
        ...

    def delete_task(self, task_id: str) -> None:
        """Delete a task. Raises RecordNotFoundError if missing."""
        ...

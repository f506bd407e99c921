"""Ports - interfaces/protocols for external dependencies."""

from .event_repo import EventRepository
from .task_repo import TaskRepository
from .errors import RecordNotFoundError

__all__ = [
    "EventRepository",
    "TaskRepository",
    "RecordNotFoundError",
]

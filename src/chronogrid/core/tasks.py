"""Pure task domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from .events import parse_instant

logger = logging.getLogger(__name__)

PRIORITIES = ("low", "medium", "high")


@dataclass(frozen=True)
class Task:
    """
    A task with a due date.

    Deadlines and overdue status are never stored here; they are derived by
    the overdue classifier each time they are needed.
    """

    id: str
    title: str
    due: datetime | None
    completed: bool = False
    priority: str = "medium"
    description: str = ""
    category: str = ""

    def days_until_due(self, as_of: date | None = None) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due:
            return None
        as_of = as_of or date.today()
        return (self.due.date() - as_of).days

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from a persistence API record."""
        raw_due = data.get("dueDate") or data.get("due_date")
        due = None
        if raw_due:
            try:
                due = parse_instant(str(raw_due))
            except ValueError:
                logger.warning(f"Task {data.get('id')}: unparseable due date {raw_due!r}")

        priority = data.get("priority") or "medium"
        if priority not in PRIORITIES:
            priority = "medium"

        return cls(
            id=str(data["id"]),
            title=data.get("title") or "Untitled",
            due=due,
            completed=bool(data.get("completed", False)),
            priority=priority,
            description=data.get("description") or "",
            category=data.get("category") or "",
        )

    def to_api(self) -> dict:
        """Serialize to the persistence API's camelCase shape."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due.isoformat() if self.due else None,
            "completed": self.completed,
            "priority": self.priority,
            "category": self.category,
        }


def filter_open(tasks: list[Task]) -> list[Task]:
    """Filter to tasks that are not completed."""
    return [t for t in tasks if not t.completed]


def sort_by_due(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by due date, undated tasks last.

    Pure function - no I/O.
    """
    return sorted(tasks, key=lambda t: (t.due is None, t.due or datetime.max))

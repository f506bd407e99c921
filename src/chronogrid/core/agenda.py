"""Pure agenda formatting - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date

from .events import Event
from .layout import PositionedEvent
from .overdue import Classification, OverdueStatus, OverdueSummary
from .tasks import Task


@dataclass
class DayAgenda:
    """One day's events, ready for formatting."""

    date: date
    all_day: list[Event]
    positioned: list[PositionedEvent]


def format_event_line(event: Event) -> str:
    """
    Format a single all-day event for display.

    Pure function - no I/O.
    """
    location = f" @ {event.location}" if event.location else ""
    return f"- {event.format_time()} {event.title}{location}"


def format_positioned_line(item: PositionedEvent) -> str:
    """
    Format a timed event with its column placement.

    Pure function - no I/O.
    """
    time_str = f"{item.start.strftime('%H:%M')}-{item.end.strftime('%H:%M')}"
    column = f" [col {item.column + 1}/{item.columns}]" if item.columns > 1 else ""
    location = f" @ {item.event.location}" if item.event.location else ""
    return f"- {time_str} {item.event.title}{location}{column}"


def format_day(agenda: DayAgenda) -> str:
    """Format a day's agenda as markdown."""
    lines = [f"## {agenda.date.strftime('%A, %B %d')}"]
    lines.extend(format_event_line(e) for e in agenda.all_day)
    lines.extend(format_positioned_line(p) for p in agenda.positioned)
    if len(lines) == 1:
        lines.append("No events.")
    return "\n".join(lines)


def format_overdue_line(task: Task, result: Classification) -> str:
    """
    Format a single task's urgency.

    Pure function - no I/O.
    """
    if result.missing_due:
        urgency = "no due date"
    elif result.status is OverdueStatus.HARD_OVERDUE:
        urgency = f"HARD OVERDUE by {result.days}d"
    elif result.status is OverdueStatus.SOFT_OVERDUE:
        urgency = f"soft overdue by {result.days}d"
    elif result.days == 0:
        urgency = "due TODAY"
    else:
        urgency = f"due in {result.days}d"

    done = "x" if task.completed else " "
    return f"- [{done}] {task.title} ({urgency}, priority: {task.priority})"


def format_summary(summary: OverdueSummary) -> str:
    return (
        f"{summary.on_time} on time, {summary.soft_overdue} soft overdue, "
        f"{summary.hard_overdue} hard overdue"
    )

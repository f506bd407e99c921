"""Functional core - pure scheduling and layout logic with no I/O."""

from .events import Event, InvalidEventError, RecurrenceKind, RecurrenceRule
from .recurrence import DEFAULT_OCCURRENCE_CAP, expand, expand_all
from .grid import DayColumns, TimeGridMapper, week_days, zoom_row_height
from .layout import PositionedEvent, layout_day, layout_days, partition_all_day
from .interaction import (
    Edge,
    EventChange,
    InteractionController,
    NoActiveSessionError,
    Pointer,
    SessionActiveError,
    SessionState,
)
from .tasks import Task
from .overdue import Classification, OverdueStatus, OverdueSummary, classify, summarize

__all__ = [
    # Events
    "Event",
    "InvalidEventError",
    "RecurrenceKind",
    "RecurrenceRule",
    # Recurrence
    "DEFAULT_OCCURRENCE_CAP",
    "expand",
    "expand_all",
    # Grid
    "DayColumns",
    "TimeGridMapper",
    "week_days",
    "zoom_row_height",
    # Layout
    "PositionedEvent",
    "layout_day",
    "layout_days",
    "partition_all_day",
    # Interaction
    "Edge",
    "EventChange",
    "InteractionController",
    "NoActiveSessionError",
    "Pointer",
    "SessionActiveError",
    "SessionState",
    # Tasks
    "Task",
    "Classification",
    "OverdueStatus",
    "OverdueSummary",
    "classify",
    "summarize",
]

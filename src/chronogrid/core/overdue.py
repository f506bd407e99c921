"""Overdue classification - urgency states from soft/hard deadline offsets.

Pure functions, no I/O. A task moves on-time -> soft-overdue -> hard-overdue
as time passes; the deadlines are fixed by the due date, so the status never
moves backward for increasing ``now``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from .events import parse_instant, start_of_day, to_wall_clock
from .tasks import Task

logger = logging.getLogger(__name__)

DEFAULT_SOFT_OFFSET_DAYS = 3
DEFAULT_HARD_OFFSET_DAYS = 7
_ONE_DAY = timedelta(days=1)


class OverdueStatus(Enum):
    ON_TIME = "on-time"
    SOFT_OVERDUE = "soft-overdue"
    HARD_OVERDUE = "hard-overdue"

    @property
    def rank(self) -> int:
        """Escalation order: on-time < soft-overdue < hard-overdue."""
        return list(OverdueStatus).index(self)


@dataclass(frozen=True)
class Deadlines:
    soft: datetime
    hard: datetime


@dataclass(frozen=True)
class Classification:
    """Urgency of one task at one moment."""

    status: OverdueStatus
    days: int
    soft_deadline: datetime | None = None
    hard_deadline: datetime | None = None
    missing_due: bool = False

    @property
    def is_overdue(self) -> bool:
        return self.status is not OverdueStatus.ON_TIME


@dataclass(frozen=True)
class OverdueSummary:
    on_time: int = 0
    soft_overdue: int = 0
    hard_overdue: int = 0

    @property
    def total_overdue(self) -> int:
        return self.soft_overdue + self.hard_overdue


def deadlines_for(
    due: datetime,
    soft_offset_days: int = DEFAULT_SOFT_OFFSET_DAYS,
    hard_offset_days: int = DEFAULT_HARD_OFFSET_DAYS,
) -> Deadlines:
    """Soft deadline before and hard deadline after a due date."""
    return Deadlines(
        soft=due - timedelta(days=soft_offset_days),
        hard=due + timedelta(days=hard_offset_days),
    )


def _coerce_due(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_wall_clock(value)
    if isinstance(value, date):
        return start_of_day(value)
    if isinstance(value, str):
        try:
            return parse_instant(value)
        except ValueError:
            return None
    return None


def classify(
    task: Task,
    now: datetime,
    soft_offset_days: int = DEFAULT_SOFT_OFFSET_DAYS,
    hard_offset_days: int = DEFAULT_HARD_OFFSET_DAYS,
) -> Classification:
    """
    Classify a task's urgency at ``now``.

    Pure function - no I/O. A missing or unparseable due date never raises:
    the task reads as on-time with 0 days and ``missing_due`` set.
    """
    now = to_wall_clock(now)
    due = _coerce_due(task.due)
    if due is None:
        if task.due not in (None, ""):
            logger.warning(f"Task {task.id}: cannot classify due date {task.due!r}")
        return Classification(status=OverdueStatus.ON_TIME, days=0, missing_due=True)

    deadlines = deadlines_for(due, soft_offset_days, hard_offset_days)

    if now > deadlines.hard:
        status = OverdueStatus.HARD_OVERDUE
        days = (now - deadlines.hard) // _ONE_DAY
    elif now > deadlines.soft:
        status = OverdueStatus.SOFT_OVERDUE
        days = (now - deadlines.soft) // _ONE_DAY
    else:
        status = OverdueStatus.ON_TIME
        days = max(0, (due - now) // _ONE_DAY)

    return Classification(
        status=status,
        days=days,
        soft_deadline=deadlines.soft,
        hard_deadline=deadlines.hard,
    )


def classify_all(
    tasks: list[Task],
    now: datetime,
    soft_offset_days: int = DEFAULT_SOFT_OFFSET_DAYS,
    hard_offset_days: int = DEFAULT_HARD_OFFSET_DAYS,
) -> list[tuple[Task, Classification]]:
    """Classify every task at the same instant."""
    return [(t, classify(t, now, soft_offset_days, hard_offset_days)) for t in tasks]


def summarize(results: list[tuple[Task, Classification]]) -> OverdueSummary:
    """
    Count open tasks per status.

    Completed tasks are skipped.
    """
    counts = {status: 0 for status in OverdueStatus}
    for task, result in results:
        if not task.completed:
            counts[result.status] += 1
    return OverdueSummary(
        on_time=counts[OverdueStatus.ON_TIME],
        soft_overdue=counts[OverdueStatus.SOFT_OVERDUE],
        hard_overdue=counts[OverdueStatus.HARD_OVERDUE],
    )


def should_notify(
    task: Task,
    result: Classification,
    now: datetime,
    threshold_days: int = 1,
    enabled: bool = True,
) -> bool:
    """Whether a reminder is due: from ``threshold_days`` before the soft deadline on."""
    if not enabled or task.completed or result.soft_deadline is None:
        return False
    return now >= result.soft_deadline - timedelta(days=threshold_days)

"""Pure calendar event model - no I/O dependencies."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#0ea5e9"


class InvalidEventError(ValueError):
    """Raised when an event's end does not come after its start."""

    pass


class RecurrenceKind(Enum):
    """How often a recurring event repeats."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def to_wall_clock(dt: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive wall-clock datetime."""
    return to_wall_clock(datetime.fromisoformat(value.strip()))


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time())


@dataclass(frozen=True)
class RecurrenceRule:
    """
    A repeat pattern attached to a base event.

    Weekday indices run 0 (Sunday) to 6 (Saturday). When both count and
    until are set, count wins; when neither is set the expander's cap applies.
    """

    kind: RecurrenceKind = RecurrenceKind.NONE
    interval: int = 1
    days_of_week: frozenset[int] = frozenset()
    day_of_month: int | None = None
    count: int | None = None
    until: datetime | None = None

    @property
    def is_recurring(self) -> bool:
        return self.kind is not RecurrenceKind.NONE

    @classmethod
    def from_api(cls, data: dict | None) -> "RecurrenceRule | None":
        """Create a rule from the persisted ``repeat`` pattern."""
        if not data:
            return None

        raw_kind = data.get("type", "none") or "none"
        try:
            kind = RecurrenceKind(raw_kind)
        except ValueError:
            logger.warning(f"Unsupported repeat type {raw_kind!r}, treating as none")
            kind = RecurrenceKind.NONE

        until = None
        if data.get("endDate"):
            try:
                until = parse_instant(str(data["endDate"]))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring unparseable repeat endDate: {data['endDate']!r}")

        weekdays = (_as_int(d, None) for d in data.get("daysOfWeek") or [])

        return cls(
            kind=kind,
            interval=_as_int(data.get("interval"), 1),
            days_of_week=frozenset(d for d in weekdays if d is not None),
            day_of_month=_as_int(data.get("dayOfMonth"), None),
            count=_as_int(data.get("endAfter"), None),
            until=until,
        )

    def to_api(self) -> dict:
        """Serialize to the persisted ``repeat`` pattern."""
        data: dict = {"type": self.kind.value, "interval": self.interval}
        if self.days_of_week:
            data["daysOfWeek"] = sorted(self.days_of_week)
        if self.day_of_month is not None:
            data["dayOfMonth"] = self.day_of_month
        if self.count is not None:
            data["endAfter"] = self.count
        if self.until is not None:
            data["endDate"] = self.until.isoformat()
        return data


def _as_int(value, default: int | None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Event:
    """A calendar event. Immutable: edits produce new instances."""

    id: str
    title: str
    start: datetime
    end: datetime
    color: str = DEFAULT_COLOR
    all_day: bool = False
    all_week: bool = False
    description: str = ""
    location: str = ""
    category: str = ""
    attendees: tuple[str, ...] = field(default_factory=tuple)
    recurrence: RecurrenceRule | None = None
    series_id: str | None = None

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidEventError(
                f"Event {self.id!r} ends at {self.end.isoformat()} "
                f"which is not after its start {self.start.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> int:
        """Event duration in minutes."""
        return int(self.duration.total_seconds() / 60)

    def with_times(self, start: datetime, end: datetime) -> "Event":
        """Return a copy of this event moved to a new interval."""
        return replace(self, start=start, end=end)

    def intersects(self, start: datetime, end: datetime) -> bool:
        """Check if this event overlaps the half-open span [start, end)."""
        return self.start < end and start < self.end

    def overlaps(self, other: "Event") -> bool:
        """Check if this event overlaps another (adjacent events do not)."""
        return self.intersects(other.start, other.end)

    def format_time(self) -> str:
        """Format the event time for display."""
        if self.all_day:
            return "All day"
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    @classmethod
    def from_api(cls, data: dict) -> "Event":
        """Create an Event from a persistence API record."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "Untitled",
            start=parse_instant(data.get("startDate") or data["start_date"]),
            end=parse_instant(data.get("endDate") or data["end_date"]),
            color=data.get("color") or DEFAULT_COLOR,
            all_day=bool(data.get("isAllDay", data.get("is_all_day", False))),
            all_week=bool(data.get("isAllWeek", data.get("is_all_week", False))),
            description=data.get("description") or "",
            location=data.get("location") or "",
            category=data.get("category") or "",
            attendees=tuple(data.get("attendees") or ()),
            recurrence=RecurrenceRule.from_api(data.get("repeat")),
            series_id=data.get("seriesId"),
        )

    def to_api(self) -> dict:
        """Serialize to the persistence API's camelCase shape."""
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "color": self.color,
            "isAllDay": self.all_day,
            "isAllWeek": self.all_week,
            "location": self.location,
            "attendees": list(self.attendees),
            "category": self.category,
            "repeat": self.recurrence.to_api() if self.recurrence else None,
        }
        if self.series_id:
            data["seriesId"] = self.series_id
        return data


def sort_events_by_start(events: list[Event]) -> list[Event]:
    """Sort events by start time."""
    return sorted(events, key=lambda e: e.start)


def filter_events_by_date(
    events: list[Event],
    start_date: date,
    end_date: date | None = None,
) -> list[Event]:
    """
    Filter events to those touching a date range (inclusive).

    Pure function - no I/O.
    """
    end_date = end_date or start_date
    span_start = start_of_day(start_date)
    span_end = start_of_day(end_date) + timedelta(days=1)
    return [e for e in events if e.intersects(span_start, span_end)]

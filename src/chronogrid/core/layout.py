"""Overlap layout - places one day's events into non-colliding columns.

Pure functions, no I/O. Events that transitively overlap form a group; each
group is colored greedily so that intersecting events never share a column.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .events import Event, start_of_day
from .grid import TimeGridMapper

MIN_EVENT_HEIGHT_PX = 20


@dataclass(frozen=True)
class PositionedEvent:
    """Render geometry for one event on one day."""

    event: Event
    start: datetime
    end: datetime
    top: float
    height: float
    column: int
    columns: int
    group: int

    @property
    def left(self) -> float:
        """Left edge as a fraction of the day column width."""
        return self.column / self.columns

    @property
    def width(self) -> float:
        """Width as a fraction of the day column width."""
        return 1 / self.columns


def partition_all_day(events: list[Event]) -> tuple[list[Event], list[Event]]:
    """
    Split events into (all_day, timed).

    All-day and all-week events render in their own strip, outside the grid.
    """
    all_day = [e for e in events if e.all_day or e.all_week]
    timed = [e for e in events if not (e.all_day or e.all_week)]
    return all_day, timed


def _layout_order(event: Event) -> tuple:
    # Longer events first on equal start so they take the leftmost column
    return (event.start, -event.duration, event.id)


def assign_columns(
    spans: list[tuple[datetime, datetime]],
) -> list[tuple[int, int, int]]:
    """
    Greedy interval coloring over spans sorted by start.

    Returns (group, column, group_columns) for each span, in input order.
    """
    placements: list[tuple[int, int]] = []
    group_sizes: list[int] = []
    column_ends: list[datetime] = []
    group_end: datetime | None = None

    for start, end in spans:
        if group_end is None or start >= group_end:
            # Nothing still running: start a new overlap group
            group_sizes.append(0)
            column_ends = []
            group_end = end
        else:
            group_end = max(group_end, end)

        column = next(
            (i for i, column_end in enumerate(column_ends) if column_end <= start),
            len(column_ends),
        )
        if column == len(column_ends):
            column_ends.append(end)
        else:
            column_ends[column] = end

        group = len(group_sizes) - 1
        group_sizes[group] = max(group_sizes[group], column + 1)
        placements.append((group, column))

    return [(group, column, group_sizes[group]) for group, column in placements]


def layout_day(
    events: list[Event],
    day: date,
    mapper: TimeGridMapper | None = None,
    *,
    min_height: float = MIN_EVENT_HEIGHT_PX,
) -> list[PositionedEvent]:
    """
    Position every event touching ``day``.

    Pure function - no I/O.

    Args:
        events: Candidate events (any days; non-intersecting ones are dropped)
        day: The calendar day being laid out
        mapper: Time grid geometry (defaults to a 64px-row, 24h grid)
        min_height: Height floor so very short events stay tappable

    Returns:
        PositionedEvents in layout order (start, then longest first)
    """
    mapper = mapper or TimeGridMapper()
    day_start = start_of_day(day)
    day_end = day_start + timedelta(days=1)

    todays = sorted(
        (e for e in events if e.intersects(day_start, day_end)),
        key=_layout_order,
    )
    spans = [(max(e.start, day_start), min(e.end, day_end)) for e in todays]

    positioned = []
    for event, (start, end), (group, column, columns) in zip(todays, spans, assign_columns(spans)):
        top = mapper.time_to_offset(start, day)
        bottom = mapper.time_to_offset(end, day)
        positioned.append(
            PositionedEvent(
                event=event,
                start=start,
                end=end,
                top=top,
                height=max(bottom - top, min_height),
                column=column,
                columns=columns,
                group=group,
            )
        )
    return positioned


def layout_days(
    events: list[Event],
    days: list[date],
    mapper: TimeGridMapper | None = None,
    *,
    min_height: float = MIN_EVENT_HEIGHT_PX,
) -> dict[date, list[PositionedEvent]]:
    """Lay out several days at once (e.g. a week view)."""
    return {day: layout_day(events, day, mapper, min_height=min_height) for day in days}

"""Time grid geometry - converts between wall-clock time and pixels.

Pure functions, no I/O. Vertical positions are measured in pixels from the
top of the first visible hour row; horizontal positions in pixels from the
left edge of the grid (including the hour-label gutter).
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .events import start_of_day

DEFAULT_ROW_HEIGHT_PX = 64
MIN_ROW_HEIGHT_PX = 24
MAX_ROW_HEIGHT_PX = 600
DEFAULT_GUTTER_PX = 80


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (unlike round())."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class TimeGridMapper:
    """Linear mapping between time of day and vertical offset."""

    row_height_px: float = DEFAULT_ROW_HEIGHT_PX
    start_hour: int = 0
    end_hour: int = 24

    def __post_init__(self):
        if self.row_height_px <= 0:
            raise ValueError(f"row_height_px must be positive, got {self.row_height_px}")
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(f"Invalid visible hour range {self.start_hour}-{self.end_hour}")

    @property
    def visible_hours(self) -> range:
        return range(self.start_hour, self.end_hour)

    @property
    def grid_height(self) -> float:
        return (self.end_hour - self.start_hour) * self.row_height_px

    def _hours_into_day(self, instant: datetime, reference_day: date) -> float:
        elapsed = instant - start_of_day(reference_day)
        return elapsed.total_seconds() / 3600

    def time_to_offset(self, instant: datetime, reference_day: date | None = None) -> float:
        """
        Pixel offset of an instant on a day's grid.

        Instants before the visible range clamp to the top, instants after it
        (including the next midnight) clamp to the bottom.
        """
        reference_day = reference_day or instant.date()
        hours = self._hours_into_day(instant, reference_day)
        hours = min(max(hours, self.start_hour), self.end_hour)
        return (hours - self.start_hour) * self.row_height_px

    def offset_to_time(self, px: float, reference_day: date) -> datetime:
        """
        Wall-clock time at a pixel offset, to the minute.

        Offsets outside the grid clamp to the first or last hour row.
        """
        hours = self.start_hour + px / self.row_height_px
        if hours < self.start_hour:
            hours = self.start_hour
        elif hours >= self.end_hour:
            hours = self.end_hour - 1
        minutes = math.floor(hours * 60)
        return start_of_day(reference_day) + timedelta(minutes=minutes)

    def _clamp_row(self, row: int) -> int:
        return min(max(row, self.start_hour), self.end_hour - 1)

    def row_at(self, px: float) -> int:
        """Hour row containing a pixel offset."""
        return self._clamp_row(self.start_hour + math.floor(px / self.row_height_px))

    def nearest_row(self, px: float) -> int:
        """Hour row boundary closest to a pixel offset."""
        return self._clamp_row(self.start_hour + round_half_up(px / self.row_height_px))

    def snap(self, px: float, reference_day: date) -> datetime:
        """Snap a pixel offset to the nearest whole-hour row on a day."""
        return start_of_day(reference_day) + timedelta(hours=self.nearest_row(px))

    def live_marker_offset(self, now: datetime) -> float | None:
        """Offset of the current-time line, or None when it is off-grid."""
        hours = self._hours_into_day(now, now.date())
        if not self.start_hour <= hours < self.end_hour:
            return None
        return (hours - self.start_hour) * self.row_height_px


def zoom_row_height(current: float, direction: int, factor: float = 0.1) -> int:
    """
    Row height after one zoom step.

    direction > 0 zooms in, direction < 0 zooms out. The result is rounded
    and kept within [MIN_ROW_HEIGHT_PX, MAX_ROW_HEIGHT_PX].
    """
    step = 1 if direction > 0 else -1 if direction < 0 else 0
    height = current + step * current * factor
    height = max(MIN_ROW_HEIGHT_PX, min(MAX_ROW_HEIGHT_PX, height))
    return round(height)


def week_days(anchor: date, week_starts_on: int = 1) -> list[date]:
    """
    The seven days of the week containing ``anchor``.

    week_starts_on uses 0 for Sunday and 1 for Monday.
    """
    sunday_based = (anchor.weekday() + 1) % 7
    back = (sunday_based - week_starts_on) % 7
    first = anchor - timedelta(days=back)
    return [first + timedelta(days=i) for i in range(7)]


@dataclass(frozen=True)
class DayColumns:
    """Horizontal layout of a multi-day time grid."""

    days: tuple[date, ...]
    width_px: float
    gutter_px: float = DEFAULT_GUTTER_PX

    def __post_init__(self):
        if not self.days:
            raise ValueError("DayColumns needs at least one day")

    @classmethod
    def single(cls, day: date, width_px: float = 800, gutter_px: float = DEFAULT_GUTTER_PX) -> "DayColumns":
        return cls(days=(day,), width_px=width_px, gutter_px=gutter_px)

    @property
    def column_width(self) -> float:
        return max(self.width_px - self.gutter_px, 1) / len(self.days)

    def column_at(self, x: float) -> int:
        """Day column under a pixel x, clamped to the grid."""
        index = math.floor((x - self.gutter_px) / self.column_width)
        return min(max(index, 0), len(self.days) - 1)

    def day_at(self, x: float) -> date:
        return self.days[self.column_at(x)]

    def index_of(self, day: date) -> int | None:
        try:
            return self.days.index(day)
        except ValueError:
            return None

    def left_of(self, index: int) -> float:
        """Pixel x where a day column starts."""
        return self.gutter_px + index * self.column_width

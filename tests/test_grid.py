"""Tests for time grid geometry."""

from datetime import date, datetime

import pytest

from chronogrid.core.grid import (
    DayColumns,
    TimeGridMapper,
    round_half_up,
    week_days,
    zoom_row_height,
)

DAY = date(2024, 1, 1)


class TestTimeToOffset:
    def test_half_past_nine(self):
        assert TimeGridMapper(row_height_px=64).time_to_offset(datetime(2024, 1, 1, 9, 30)) == 608

    def test_midnight_is_top(self):
        assert TimeGridMapper().time_to_offset(datetime(2024, 1, 1)) == 0

    def test_next_midnight_clamps_to_bottom(self):
        mapper = TimeGridMapper()
        assert mapper.time_to_offset(datetime(2024, 1, 2), DAY) == 1536 == mapper.grid_height

    def test_earlier_day_clamps_to_top(self):
        assert TimeGridMapper().time_to_offset(datetime(2023, 12, 31, 22), DAY) == 0

    def test_visible_range_offsets(self):
        mapper = TimeGridMapper(row_height_px=64, start_hour=6, end_hour=22)
        assert mapper.time_to_offset(datetime(2024, 1, 1, 9)) == 192
        assert mapper.time_to_offset(datetime(2024, 1, 1, 5)) == 0
        assert mapper.time_to_offset(datetime(2024, 1, 1, 23)) == 1024


class TestOffsetToTime:
    @pytest.mark.parametrize(
        "px, expected",
        [
            (0, datetime(2024, 1, 1, 0, 0)),
            (608, datetime(2024, 1, 1, 9, 30)),
            (624, datetime(2024, 1, 1, 9, 45)),
            (-50, datetime(2024, 1, 1, 0, 0)),
            (5000, datetime(2024, 1, 1, 23, 0)),
        ],
    )
    def test_inverse_mapping(self, px, expected):
        assert TimeGridMapper(row_height_px=64).offset_to_time(px, DAY) == expected

    def test_round_trip_at_minute_precision(self):
        mapper = TimeGridMapper(row_height_px=48)
        for minute in range(0, 23 * 60, 7):
            instant = datetime(2024, 1, 1, minute // 60, minute % 60)
            back = mapper.offset_to_time(mapper.time_to_offset(instant), DAY)
            assert abs((back - instant).total_seconds()) <= 60

    def test_respects_visible_start_hour(self):
        mapper = TimeGridMapper(row_height_px=64, start_hour=8, end_hour=18)
        assert mapper.offset_to_time(0, DAY) == datetime(2024, 1, 1, 8)
        assert mapper.offset_to_time(10_000, DAY) == datetime(2024, 1, 1, 17)


class TestRows:
    def test_row_at_floors(self):
        mapper = TimeGridMapper(row_height_px=64)
        assert mapper.row_at(127) == 1
        assert mapper.row_at(128) == 2

    def test_nearest_row_rounds_half_up(self):
        mapper = TimeGridMapper(row_height_px=64)
        assert mapper.nearest_row(95) == 1
        assert mapper.nearest_row(96) == 2

    def test_rows_clamp(self):
        mapper = TimeGridMapper(row_height_px=64)
        assert mapper.nearest_row(-500) == 0
        assert mapper.nearest_row(99_999) == 23
        assert mapper.row_at(1536) == 23

    def test_snap(self):
        assert TimeGridMapper(row_height_px=64).snap(620, DAY) == datetime(2024, 1, 1, 10)


class TestValidation:
    def test_rejects_non_positive_row_height(self):
        with pytest.raises(ValueError):
            TimeGridMapper(row_height_px=0)

    @pytest.mark.parametrize("start, end", [(10, 10), (12, 8), (-1, 10), (0, 25)])
    def test_rejects_bad_hour_range(self, start, end):
        with pytest.raises(ValueError):
            TimeGridMapper(start_hour=start, end_hour=end)


class TestLiveMarker:
    def test_inside_grid(self):
        assert TimeGridMapper(row_height_px=64).live_marker_offset(datetime(2024, 1, 1, 10, 15)) == 656

    def test_outside_visible_hours(self):
        mapper = TimeGridMapper(row_height_px=64, start_hour=8, end_hour=18)
        assert mapper.live_marker_offset(datetime(2024, 1, 1, 7, 59)) is None
        assert mapper.live_marker_offset(datetime(2024, 1, 1, 18)) is None


class TestZoom:
    @pytest.mark.parametrize(
        "current, direction, expected",
        [
            (64, 1, 70),
            (64, -1, 58),
            (590, 1, 600),
            (25, -1, 24),
            (64, 0, 64),
        ],
    )
    def test_zoom_steps(self, current, direction, expected):
        assert zoom_row_height(current, direction) == expected


class TestWeekDays:
    def test_monday_start(self):
        days = week_days(date(2024, 1, 3), week_starts_on=1)
        assert days[0] == date(2024, 1, 1)
        assert days[-1] == date(2024, 1, 7)
        assert len(days) == 7

    def test_sunday_start(self):
        days = week_days(date(2024, 1, 3), week_starts_on=0)
        assert days[0] == date(2023, 12, 31)
        assert days[-1] == date(2024, 1, 6)

    def test_anchor_on_first_day(self):
        assert week_days(date(2024, 1, 1))[0] == date(2024, 1, 1)


class TestDayColumns:
    @pytest.fixture
    def columns(self):
        return DayColumns(days=tuple(week_days(date(2024, 1, 3))), width_px=780, gutter_px=80)

    def test_column_width(self, columns):
        assert columns.column_width == 100

    def test_column_at(self, columns):
        assert columns.column_at(385) == 3
        assert columns.day_at(385) == date(2024, 1, 4)

    def test_column_at_clamps(self, columns):
        assert columns.column_at(10) == 0
        assert columns.column_at(5000) == 6

    def test_left_of(self, columns):
        assert columns.left_of(2) == 280

    def test_index_of(self, columns):
        assert columns.index_of(date(2024, 1, 7)) == 6
        assert columns.index_of(date(2024, 2, 1)) is None

    def test_single_day(self):
        single = DayColumns.single(DAY)
        assert single.day_at(0) == DAY
        assert single.day_at(9_999) == DAY

    def test_requires_days(self):
        with pytest.raises(ValueError):
            DayColumns(days=(), width_px=800)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(1.49) == 1

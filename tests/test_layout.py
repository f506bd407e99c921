"""Tests for overlap layout."""

import random
from datetime import date, datetime, timedelta

import pytest

from chronogrid.core.events import Event
from chronogrid.core.grid import TimeGridMapper
from chronogrid.core.layout import (
    MIN_EVENT_HEIGHT_PX,
    assign_columns,
    layout_day,
    layout_days,
    partition_all_day,
)

DAY = date(2024, 1, 1)


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2024, 1, day, hour, minute)


def make(event_id: str, start: datetime, end: datetime, **kwargs) -> Event:
    return Event(id=event_id, title=event_id.upper(), start=start, end=end, **kwargs)


def by_id(positioned) -> dict:
    return {p.event.id: p for p in positioned}


class TestGroups:
    def test_overlapping_pair_and_separate_event(self):
        a = make("a", at(9), at(10, 30))
        b = make("b", at(10), at(11))
        c = make("c", at(12), at(12, 30))

        result = by_id(layout_day([a, b, c], DAY))

        assert (result["a"].column, result["a"].columns) == (0, 2)
        assert (result["b"].column, result["b"].columns) == (1, 2)
        assert result["a"].width == result["b"].width == 0.5
        assert (result["c"].column, result["c"].columns) == (0, 1)
        assert result["c"].width == 1
        assert result["c"].group != result["a"].group == result["b"].group

    def test_event_sharing_start_with_group_joins_it(self):
        # 09:00-09:30 intersects 09:00-10:30, so it cannot sit in its own slot
        a = make("a", at(9), at(10, 30))
        b = make("b", at(10), at(11))
        c = make("c", at(9), at(9, 30))

        result = by_id(layout_day([a, b, c], DAY))

        assert result["a"].column == 0
        assert result["c"].column == 1
        assert result["b"].column == 1
        assert {p.columns for p in result.values()} == {2}

    def test_adjacent_events_do_not_overlap(self):
        a = make("a", at(9), at(10))
        b = make("b", at(10), at(11))

        result = by_id(layout_day([a, b], DAY))

        assert result["a"].columns == result["b"].columns == 1
        assert result["a"].group != result["b"].group

    def test_longer_event_takes_first_column_on_tie(self):
        short = make("a", at(9), at(10))
        long = make("b", at(9), at(12))

        result = by_id(layout_day([short, long], DAY))

        assert result["b"].column == 0
        assert result["a"].column == 1

    def test_freed_column_is_reused(self):
        events = [
            make("a", at(9), at(12)),
            make("b", at(9), at(10)),
            make("c", at(10), at(11)),
            make("d", at(11), at(12)),
        ]

        result = by_id(layout_day(events, DAY))

        assert [result[i].column for i in "abcd"] == [0, 1, 1, 1]
        assert {p.columns for p in result.values()} == {2}

    def test_three_way_overlap(self):
        events = [
            make("a", at(9), at(11)),
            make("b", at(9, 30), at(11)),
            make("c", at(10), at(11)),
        ]

        result = layout_day(events, DAY)

        assert sorted(p.column for p in result) == [0, 1, 2]
        assert all(p.columns == 3 for p in result)

    def test_transitive_group_shares_column_count(self):
        a = make("a", at(9), at(10))
        b = make("b", at(9, 30), at(11))
        c = make("c", at(10, 30), at(11, 30))

        result = by_id(layout_day([a, b, c], DAY))

        assert result["c"].column == 0
        assert result["a"].group == result["b"].group == result["c"].group
        assert {p.columns for p in result.values()} == {2}

    def test_input_order_does_not_matter(self):
        events = [
            make("a", at(9), at(10, 30)),
            make("b", at(10), at(11)),
            make("c", at(14), at(15)),
        ]
        forward = [(p.event.id, p.column, p.columns) for p in layout_day(events, DAY)]
        backward = [(p.event.id, p.column, p.columns) for p in layout_day(events[::-1], DAY)]
        assert forward == backward


class TestGeometry:
    def test_top_and_height(self):
        result = layout_day([make("a", at(9, 30), at(11))], DAY, TimeGridMapper(row_height_px=64))
        assert result[0].top == 608
        assert result[0].height == 96

    def test_short_event_gets_min_height(self):
        result = layout_day([make("a", at(9), at(9, 5))], DAY)
        assert result[0].height == MIN_EVENT_HEIGHT_PX == 20

    def test_custom_min_height(self):
        result = layout_day([make("a", at(9), at(9, 5))], DAY, min_height=32)
        assert result[0].height == 32

    def test_overnight_event_clipped_to_day(self):
        overnight = make("late", at(23), at(2, day=2))

        first = layout_day([overnight], DAY)
        second = layout_day([overnight], date(2024, 1, 2))

        assert first[0].top == 1472
        assert first[0].height == 64
        assert second[0].top == 0
        assert second[0].height == 128
        assert second[0].start == datetime(2024, 1, 2)

    def test_event_ending_at_midnight_excluded_from_next_day(self):
        event = make("a", at(23), at(0, day=2))
        assert layout_day([event], date(2024, 1, 2)) == []
        assert len(layout_day([event], DAY)) == 1

    def test_other_days_dropped(self):
        assert layout_day([make("a", at(9, day=3), at(10, day=3))], DAY) == []

    def test_empty_day(self):
        assert layout_day([], DAY) == []


class TestNonOverlapProperty:
    @pytest.mark.parametrize("seed", [42, 7, 2024])
    def test_intersecting_events_never_share_a_column(self, seed):
        rng = random.Random(seed)
        events = []
        for i in range(40):
            start = at(0) + timedelta(minutes=15 * rng.randrange(0, 90))
            length = timedelta(minutes=15 * rng.randrange(1, 12))
            events.append(make(f"e{i}", start, start + length))

        result = layout_day(events, DAY)

        assert len(result) == 40
        for i, p in enumerate(result):
            assert 0 <= p.column < p.columns
            for q in result[i + 1 :]:
                if p.start < q.end and q.start < p.end:
                    assert p.group == q.group
                    assert p.column != q.column


class TestHelpers:
    def test_partition_all_day(self):
        timed = make("t", at(9), at(10))
        all_day = make("d", at(0), at(0, day=2), all_day=True)
        all_week = make("w", at(0), at(0, day=8), all_week=True)

        assert partition_all_day([timed, all_day, all_week]) == ([all_day, all_week], [timed])

    def test_assign_columns_preserves_input_order(self):
        spans = [(at(9), at(10)), (at(9, 30), at(10, 30)), (at(11), at(12))]
        assert assign_columns(spans) == [(0, 0, 2), (0, 1, 2), (1, 0, 1)]

    def test_layout_days(self):
        events = [make("a", at(9), at(10)), make("b", at(9, day=2), at(10, day=2))]
        result = layout_days(events, [DAY, date(2024, 1, 2), date(2024, 1, 3)])

        assert [p.event.id for p in result[DAY]] == ["a"]
        assert [p.event.id for p in result[date(2024, 1, 2)]] == ["b"]
        assert result[date(2024, 1, 3)] == []

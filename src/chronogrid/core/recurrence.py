"""Recurrence expansion - turns a base event plus a rule into occurrences.

Pure functions, no I/O. Every step is computed from the most recent
occurrence's start, so month-end clamping carries forward unless the rule
pins a day of month.

Weekly rules with selected weekdays use Sunday-to-Saturday weeks: a day
qualifies when its weekday is selected and its week is a multiple of
``interval`` weeks after the base event's week.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .events import Event, RecurrenceKind, RecurrenceRule

logger = logging.getLogger(__name__)

DEFAULT_OCCURRENCE_CAP = 999


def weekday_index(dt: datetime) -> int:
    """Weekday with Sunday as 0, matching RecurrenceRule.days_of_week."""
    return (dt.weekday() + 1) % 7


def occurrence_id(base: Event, index: int) -> str:
    """Identity of the index-th occurrence; index 0 keeps the base id."""
    if index == 0:
        return base.id
    return f"{base.id}:{index}"


def _advance(current: datetime, rule: RecurrenceRule, interval: int) -> datetime:
    """Next start after ``current`` for a flat (non weekday-filtered) rule."""
    match rule.kind:
        case RecurrenceKind.DAILY:
            return current + timedelta(days=interval)
        case RecurrenceKind.WEEKLY:
            return current + timedelta(weeks=interval)
        case RecurrenceKind.MONTHLY:
            if rule.day_of_month:
                # relativedelta clamps day=31 to the month's last day
                return current + relativedelta(months=interval, day=rule.day_of_month)
            return current + relativedelta(months=interval)
        case RecurrenceKind.YEARLY:
            return current + relativedelta(years=interval)
    raise ValueError(f"Cannot advance non-recurring rule {rule.kind}")


def _week_number(dt: datetime) -> int:
    """Sunday-based week ordinal, comparable across years."""
    return (dt.toordinal() - weekday_index(dt)) // 7


def _advance_weekday(
    current: datetime,
    base_start: datetime,
    weekdays: frozenset[int],
    interval: int,
) -> datetime:
    """Next selected weekday after ``current`` within an active week."""
    base_week = _week_number(base_start)
    candidate = current
    # One full interval of weeks always contains a selected weekday
    for _ in range(7 * interval + 7):
        candidate = candidate + timedelta(days=1)
        in_active_week = (_week_number(candidate) - base_week) % interval == 0
        if in_active_week and weekday_index(candidate) in weekdays:
            return candidate
    raise RuntimeError("No selected weekday found within one interval")


def _occurrence(base: Event, index: int, start: datetime) -> Event:
    return replace(
        base,
        id=occurrence_id(base, index),
        start=start,
        end=start + base.duration,
        recurrence=None,
        series_id=base.id,
    )


def expand(
    base: Event,
    rule: RecurrenceRule | None = None,
    *,
    cap: int = DEFAULT_OCCURRENCE_CAP,
) -> list[Event]:
    """
    Expand a base event into its concrete occurrences.

    Pure function - no I/O. Always returns a finite list whose first item is
    the base event itself. Malformed rules (non-positive interval or count,
    no termination) fall back to the capped expansion instead of raising.

    Args:
        base: The event carrying the original identity and duration
        rule: Recurrence rule (defaults to ``base.recurrence``)
        cap: Hard upper bound on the number of occurrences

    Returns:
        Occurrences in chronological order
    """
    rule = rule if rule is not None else base.recurrence
    if rule is None or not rule.is_recurring:
        return [base]

    cap = max(1, cap)
    interval = rule.interval
    if interval < 1:
        logger.debug(f"Event {base.id}: non-positive interval {interval}, using 1")
        interval = 1

    limit = cap
    until = rule.until
    if rule.count is not None and rule.count > 0:
        limit = min(rule.count, cap)
        until = None
    elif until is None:
        logger.debug(f"Event {base.id}: recurrence has no end, capping at {cap}")

    weekdays = frozenset(d for d in rule.days_of_week if 0 <= d <= 6)
    filter_weekdays = rule.kind is RecurrenceKind.WEEKLY and bool(weekdays)

    occurrences = [base]
    current = base.start
    while len(occurrences) < limit:
        try:
            if filter_weekdays:
                current = _advance_weekday(current, base.start, weekdays, interval)
            else:
                current = _advance(current, rule, interval)
            if until is not None and current >= until:
                break
            occurrence = _occurrence(base, len(occurrences), current)
        except (OverflowError, ValueError) as e:
            logger.debug(f"Event {base.id}: stopping at the calendar limit after {len(occurrences)}: {e}")
            break
        occurrences.append(occurrence)

    return occurrences


def expand_all(events: list[Event], *, cap: int = DEFAULT_OCCURRENCE_CAP) -> list[Event]:
    """
    Materialize every recurring event in a collection.

    Pure function - no I/O. Returns a flat list sorted by start.
    """
    expanded: list[Event] = []
    for event in events:
        expanded.extend(expand(event, cap=cap))
    return sorted(expanded, key=lambda e: e.start)

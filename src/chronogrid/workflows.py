"""Shared workflow layer between the CLI and the scheduler.

Each function loads what it needs from the store, runs the pure core, and
returns plain values for the caller to format or persist.
"""

import logging
from datetime import date, datetime
from typing import Callable

from .adapters.api_client import CalendarApiAdapter
from .adapters.json_store import JsonFileStore
from .config import Config, load_config
from .core.agenda import DayAgenda
from .core.events import Event, filter_events_by_date
from .core.grid import week_days
from .core.interaction import EventChange, InteractionController
from .core.layout import layout_day, partition_all_day
from .core.overdue import Classification, classify_all, should_notify, summarize, OverdueSummary
from .core.recurrence import expand, expand_all
from .core.tasks import Task

logger = logging.getLogger(__name__)


def get_store(config: Config) -> JsonFileStore | CalendarApiAdapter:
    """Resolve the persistence backend from config."""
    if config.api_base_url:
        return CalendarApiAdapter(config)
    return JsonFileStore(config.data_path())


def _agenda_for(expanded: list[Event], day: date, config: Config) -> DayAgenda:
    all_day, timed = partition_all_day(filter_events_by_date(expanded, day))
    positioned = layout_day(timed, day, config.grid(), min_height=config.min_event_height)
    return DayAgenda(date=day, all_day=all_day, positioned=positioned)


def day_agenda(store, day: date, config: Config) -> DayAgenda:
    """Expand recurring events and lay out a single day."""
    expanded = expand_all(store.list_events(), cap=config.occurrence_cap)
    return _agenda_for(expanded, day, config)


def week_agendas(store, anchor: date, config: Config) -> list[DayAgenda]:
    """Expand recurring events once and lay out each day of anchor's week."""
    expanded = expand_all(store.list_events(), cap=config.occurrence_cap)
    return [_agenda_for(expanded, day, config) for day in week_days(anchor, config.week_starts_on)]


def occurrences(store, event_id: str, config: Config) -> list[Event]:
    """All occurrences of one stored event."""
    return expand(store.get_event(event_id), cap=config.occurrence_cap)


def apply_change(store, change: EventChange) -> Event:
    """Persist a committed drag/resize as a new version of the event."""
    event = store.get_event(change.event_id)
    updated = store.update_event(event.with_times(change.start, change.end))
    logger.info(f"Rescheduled {change.event_id} to {change.start:%Y-%m-%d %H:%M}")
    return updated


def move_event(store, event_id: str, new_start: datetime) -> Event:
    """Reschedule an event to a new start, keeping its duration."""
    event = store.get_event(event_id)
    change = EventChange(event_id=event.id, start=new_start, end=new_start + event.duration)
    return apply_change(store, change)


def make_controller(
    store,
    config_provider: Callable[[], Config] = load_config,
) -> InteractionController:
    """Interaction controller that writes committed gestures to the store."""
    return InteractionController(
        settings=config_provider,
        on_change=lambda change: apply_change(store, change),
    )


def overdue_report(store, now: datetime, config: Config) -> list[tuple[Task, Classification]]:
    """Classify every task, most urgent first."""
    results = classify_all(
        store.list_tasks(),
        now,
        config.soft_deadline_offset,
        config.hard_deadline_offset,
    )

    def urgency(item: tuple[Task, Classification]) -> tuple[int, int]:
        result = item[1]
        # Longest overdue first; among on-time tasks, soonest due first
        days = -result.days if result.is_overdue else result.days
        return (-result.status.rank, days)

    return sorted(results, key=urgency)


def refresh_overdue(
    store,
    config_provider: Callable[[], Config] = load_config,
    now: datetime | None = None,
) -> OverdueSummary:
    """
    Periodic tick: reclassify tasks and log reminders.

    Config is re-read on every tick so offset changes apply immediately.
    """
    config = config_provider()
    now = now or datetime.now()
    results = overdue_report(store, now, config)
    summary = summarize(results)

    for task, result in results:
        if should_notify(task, result, now, config.notification_threshold, config.enable_notifications):
            logger.info(f"Reminder: {task.title!r} is {result.status.value} ({result.days}d)")

    logger.info(
        f"Overdue check: {summary.total_overdue} overdue "
        f"({summary.soft_overdue} soft, {summary.hard_overdue} hard)"
    )
    return summary

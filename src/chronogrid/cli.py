"""chronogrid CLI - calendar layout and overdue tracking."""

import json
import logging
import sys
from datetime import date, datetime

import click
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.api_client import AuthenticationError
from .adapters.json_store import StoreFormatError
from .config import load_config
from .core.agenda import format_day, format_overdue_line, format_summary
from .core.events import InvalidEventError
from .core.overdue import summarize
from .ports.errors import RecordNotFoundError
from .workflows import (
    day_agenda,
    get_store,
    move_event,
    occurrences,
    overdue_report,
    refresh_overdue,
    week_agendas,
)

logger = logging.getLogger(__name__)

STORE_ERRORS = (AuthenticationError, RecordNotFoundError, StoreFormatError, InvalidEventError)

date_option = click.option(
    "--date",
    "target",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Day to show (YYYY-MM-DD, default today)",
)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _positioned_json(agenda) -> dict:
    return {
        "date": agenda.date.isoformat(),
        "all_day": [e.to_api() for e in agenda.all_day],
        "events": [
            {
                "id": p.event.id,
                "title": p.event.title,
                "start": p.start.isoformat(),
                "end": p.end.isoformat(),
                "top": p.top,
                "height": p.height,
                "column": p.column,
                "columns": p.columns,
            }
            for p in agenda.positioned
        ],
    }


@click.group()
@click.version_option(package_name="chronogrid")
def main():
    """chronogrid - calendar layout engine CLI."""
    pass


@main.command()
@date_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target: datetime | None, as_json: bool):
    """Show one day's events with their column layout."""
    config = load_config()
    target_day = target.date() if target else date.today()
    try:
        agenda = day_agenda(get_store(config), target_day, config)
    except STORE_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(_positioned_json(agenda), indent=2))
    else:
        click.echo(format_day(agenda))


@main.command()
@date_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def week(target: datetime | None, as_json: bool):
    """Show the week containing a day."""
    config = load_config()
    anchor = target.date() if target else date.today()
    try:
        agendas = week_agendas(get_store(config), anchor, config)
    except STORE_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([_positioned_json(a) for a in agendas], indent=2))
    else:
        click.echo("\n\n".join(format_day(a) for a in agendas))


@main.command()
@click.argument("event_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def expand(event_id: str, as_json: bool):
    """List the occurrences of a recurring event."""
    config = load_config()
    try:
        items = occurrences(get_store(config), event_id, config)
    except STORE_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([e.to_api() for e in items], indent=2))
        return

    for item in items:
        click.echo(f"{item.start:%a %Y-%m-%d %H:%M}-{item.end:%H:%M}  {item.title}  ({item.id})")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def overdue(as_json: bool):
    """Classify tasks as on-time, soft-overdue or hard-overdue."""
    config = load_config()
    try:
        results = overdue_report(get_store(config), datetime.now(), config)
    except STORE_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": task.id,
                        "title": task.title,
                        "status": result.status.value,
                        "days": result.days,
                        "missing_due": result.missing_due,
                    }
                    for task, result in results
                ],
                indent=2,
            )
        )
        return

    if not results:
        click.echo("No tasks.")
        return

    for task, result in results:
        click.echo(format_overdue_line(task, result))
    click.echo("")
    click.echo(format_summary(summarize(results)))


@main.command()
@click.argument("event_id")
@click.argument("start", type=click.DateTime(formats=["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]))
def move(event_id: str, start: datetime):
    """Reschedule an event to START, keeping its duration."""
    config = load_config()
    try:
        event = move_event(get_store(config), event_id, start)
    except STORE_ERRORS as e:
        _fail(e)
    click.echo(f"Moved {event.title} to {event.start:%Y-%m-%d %H:%M}-{event.end:%H:%M}")


@main.command()
def watch():
    """Re-run the overdue check on a fixed interval."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    store = get_store(config)
    interval = max(config.refresh_interval_seconds, 1)

    scheduler = BlockingScheduler()
    scheduler.add_job(
        refresh_overdue,
        IntervalTrigger(seconds=interval),
        args=[store],
        id="overdue_refresh",
        next_run_time=datetime.now(),
    )
    logger.info(f"Checking overdue tasks every {interval}s (Ctrl+C to stop)")

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Stopped")


if __name__ == "__main__":
    main()

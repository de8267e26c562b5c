"""taskcycle CLI - recurring task planner."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.occurrences import RecurrenceFilter, TaskOccurrence, group_by_date, occurrences_on
from .core.stats import StatsPeriod
from .core.tasks import Priority, Recurrence, Task
from .workflows import (
    TaskNotFoundError,
    add_task,
    clear_completed,
    complete_task,
    completion_stats,
    delete_task,
    edit_task,
    get_store,
    list_occurrences,
    remove_completed,
)

RECURRENCE_CHOICES = [r.value for r in Recurrence]
KIND_CHOICES = [f.value for f in RecurrenceFilter]
PERIOD_CHOICES = [p.value for p in StatsPeriod]


def _parse_date(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from None


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _task_json(task: Task) -> dict:
    return task.to_record()


def _occurrence_json(occ: TaskOccurrence) -> dict:
    return {"date": occ.date.isoformat(), "task": _task_json(occ.task)}


def _format_task_line(task: Task, when: date | None = None) -> str:
    when_str = when.isoformat() if when else task.due_date
    time_str = f" {task.due_time}" if task.due_time else ""
    repeat = f" ({task.recurring.value})" if task.is_recurring else ""
    done = " [done]" if task.completed else ""
    return (
        f"{when_str}{time_str}  [{task.priority_label() or '?':6}] "
        f"{task.text}{repeat} #{task.category}{done}  {task.id}"
    )


@click.group()
@click.version_option(package_name="taskcycle")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """taskcycle - recurring task planner."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )
    ctx.obj = config


@main.command()
@click.argument("text")
@click.option("--due", callback=_parse_date, help="Due date (YYYY-MM-DD), defaults to today")
@click.option("--time", "due_time", default="", help="Due time (HH:MM), display only")
@click.option("--recurring", type=click.Choice(RECURRENCE_CHOICES), default="none")
@click.option("--priority", type=click.IntRange(1, 3), default=int(Priority.MEDIUM),
              help="1=High, 2=Medium, 3=Low")
@click.option("--category", default=None, help="Category (defaults to DEFAULT_CATEGORY)")
@click.option("--notes", default="")
@click.option("--participant", "participants", multiple=True, help="Repeat for several people")
@click.option("--notify", "notify_before", is_flag=True, help="Notify before the task is due")
@click.option("--today", callback=_parse_date, hidden=True)
@click.pass_obj
def add(config, text, due, due_time, recurring, priority, category, notes, participants,
        notify_before, today):
    """Add a task."""
    today = today or date.today()
    task = add_task(
        get_store(config),
        text,
        today,
        due_date=due.isoformat() if due else "",
        due_time=due_time,
        recurring=Recurrence(recurring),
        priority=priority,
        category=category or config.default_category,
        notes=notes,
        participants=list(participants),
        notify_before=notify_before,
    )
    click.echo(f"Added {task.id}: {task.text} (due {task.due_date})")


@main.command("list")
@click.option("--category", "categories", multiple=True,
              help="Only these categories (repeatable). Defaults to FILTER_CATEGORIES")
@click.option("--kind", type=click.Choice(KIND_CHOICES), default=None,
              help="all, recurring or non recurring")
@click.option("--today", callback=_parse_date, help="Pretend today is this date")
@click.option("--show-completed/--hide-completed", default=None,
              help="Include tasks already marked completed")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_cmd(config, categories, kind, today, show_completed, as_json):
    """List the next occurrence of every task over the coming year."""
    today = today or date.today()
    occs = list_occurrences(
        get_store(config),
        categories or config.filter_categories,
        today,
        kind or config.recurrence_filter,
        include_completed=config.show_completed if show_completed is None else show_completed,
    )

    if as_json:
        click.echo(json.dumps([_occurrence_json(o) for o in occs], indent=2))
        return

    if not occs:
        click.echo("No upcoming tasks.")
        return

    for day, day_occs in group_by_date(occs).items():
        for occ in day_occs:
            click.echo(_format_task_line(occ.task, day))


@main.command()
@click.option("--date", "-d", "target_date", callback=_parse_date,
              help="Day to show (YYYY-MM-DD), defaults to today")
@click.option("--today", callback=_parse_date, hidden=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def day(config, target_date, today, as_json):
    """Show tasks falling on one day."""
    today = today or date.today()
    target = target_date or today
    occs = occurrences_on(
        list_occurrences(get_store(config), config.filter_categories, today,
                         config.recurrence_filter),
        target,
    )

    if as_json:
        click.echo(json.dumps([_occurrence_json(o) for o in occs], indent=2))
        return

    if not occs:
        click.echo(f"Nothing on {target.strftime('%A, %b %d')}.")
        return

    click.echo(f"### {target.strftime('%A, %B %d')}")
    for occ in occs:
        click.echo(_format_task_line(occ.task, occ.date))


@main.command()
@click.argument("task_id")
@click.option("--today", callback=_parse_date, help="Completion date, defaults to today")
@click.pass_obj
def done(config, task_id, today):
    """Mark a task's current occurrence as done."""
    try:
        record, task = complete_task(get_store(config), task_id, today or date.today())
    except TaskNotFoundError as e:
        _fail(e)

    if record is None:
        click.echo(f"Task {task_id} is already completed.")
        return

    if task.is_recurring:
        click.echo(f"✓ {record.text} ({record.due_date}), next due {task.due_date}")
    else:
        click.echo(f"✓ {record.text} ({record.due_date})")


@main.command()
@click.argument("task_id")
@click.option("--text", default=None)
@click.option("--due", callback=_parse_date, help="Due date (YYYY-MM-DD)")
@click.option("--time", "due_time", default=None)
@click.option("--recurring", type=click.Choice(RECURRENCE_CHOICES), default=None)
@click.option("--priority", type=click.IntRange(1, 3), default=None)
@click.option("--category", default=None)
@click.option("--notes", default=None)
@click.option("--participant", "participants", multiple=True)
@click.option("--notify/--no-notify", "notify_before", default=None)
@click.pass_obj
def edit(config, task_id, text, due, due_time, recurring, priority, category, notes,
         participants, notify_before):
    """Edit a task."""
    changes = {
        "text": text,
        "due_date": due.isoformat() if due else None,
        "due_time": due_time,
        "recurring": recurring,
        "priority": priority,
        "category": category,
        "notes": notes,
        "participants": list(participants) if participants else None,
        "notify_before": notify_before,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        task = edit_task(get_store(config), task_id, **changes)
    except TaskNotFoundError as e:
        _fail(e)
    click.echo(f"Updated {task.id}: {task.text} (due {task.due_date})")


@main.command()
@click.argument("task_id")
@click.pass_obj
def delete(config, task_id):
    """Delete a task (it is kept with the completed records)."""
    try:
        task = delete_task(get_store(config), task_id)
    except TaskNotFoundError as e:
        _fail(e)
    click.echo(f"Deleted {task.text}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def completed(config, as_json):
    """List completed records."""
    records = get_store(config).load_completed()

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in records], indent=2))
        return

    if not records:
        click.echo("No completed tasks.")
        return

    for record in records:
        click.echo(_format_task_line(record))


@main.command("completed-remove")
@click.argument("record_id")
@click.pass_obj
def completed_remove(config, record_id):
    """Remove one completed record."""
    try:
        remove_completed(get_store(config), record_id)
    except TaskNotFoundError as e:
        _fail(e)
    click.echo(f"Removed {record_id}")


@main.command("completed-clear")
@click.confirmation_option(prompt="Delete all completed records?")
@click.pass_obj
def completed_clear(config):
    """Delete every completed record."""
    count = clear_completed(get_store(config))
    click.echo(f"Cleared {count} completed records.")


@main.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="daily")
@click.option("--today", callback=_parse_date, hidden=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stats(config, period, today, as_json):
    """Completions per category for today, this week or this month."""
    counts = completion_stats(get_store(config), StatsPeriod(period), today or date.today())

    if as_json:
        click.echo(json.dumps(counts, indent=2))
        return

    if not counts:
        click.echo("No activities found.")
        return

    width = max(len(c) for c in counts)
    for category, count in counts.items():
        click.echo(f"{category:{width}}  {'#' * count} {count}")


if __name__ == "__main__":
    main()

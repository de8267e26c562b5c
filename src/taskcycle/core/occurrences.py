"""Occurrence aggregation - pure functions over a task list, no I/O."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable

from .recurrence import add_months, add_years
from .tasks import Recurrence, Task

logger = logging.getLogger(__name__)

WINDOW_DAYS = 365
ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class TaskOccurrence:
    """A task on one concrete calendar date. Recomputed on demand, never stored."""

    task: Task
    date: date


class RecurrenceFilter(Enum):
    """Which kinds of task an occurrence list shows."""

    ALL = "all"
    RECURRING = "recurring"
    NON_RECURRING = "non recurring"

    @classmethod
    def parse(cls, raw) -> "RecurrenceFilter":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower().replace("-", " ").replace("_", " "))
        except ValueError:
            return cls.ALL


def occurrence_window(today: date) -> tuple[date, date]:
    """Inclusive (start, end) of the forward window."""
    try:
        return today, today + timedelta(days=WINDOW_DAYS)
    except OverflowError:
        return today, date.max


def _advance_to(due: date, start: date, recurring: Recurrence) -> date:
    """Move a monthly/yearly anchor forward by whole periods until it reaches start."""
    if due >= start:
        return due
    if recurring is Recurrence.MONTHLY:
        occurrence = add_months(due, (start.year - due.year) * 12 + start.month - due.month)
        if occurrence < start:
            occurrence = add_months(occurrence, 1)
    else:
        occurrence = add_years(due, start.year - due.year)
        if occurrence < start:
            occurrence = add_years(occurrence, 1)
    return occurrence


def candidate_date(task: Task, today: date) -> date | None:
    """
    The task's next occurrence on or after today, if it falls inside the window.

    Returns None when the due date does not parse or the occurrence lies
    outside [today, today + WINDOW_DAYS].
    """
    due = task.due()
    if due is None:
        return None

    start, end = occurrence_window(today)
    recurring = Recurrence.parse(task.recurring)

    if recurring is Recurrence.NONE:
        occurrence = due
    elif recurring is Recurrence.DAILY:
        occurrence = max(due, start)
    else:
        try:
            occurrence = _advance_to(due, start, recurring)
        except (OverflowError, ValueError):
            # next occurrence would be past date.max
            return None

    if start <= occurrence <= end:
        return occurrence
    return None


def filter_by_category(tasks: Iterable[Task], filter_categories: Iterable[str]) -> list[Task]:
    """Tasks in the given categories. The "All" sentinel keeps everything."""
    categories = set(filter_categories)
    if ALL_CATEGORIES in categories:
        return list(tasks)
    return [t for t in tasks if t.category in categories]


def occurrences(
    tasks: Iterable[Task],
    filter_categories: Iterable[str],
    today: date,
) -> list[TaskOccurrence]:
    """
    Next occurrence of each task within the window, earliest first.

    One entry per task id (the earliest candidate wins). Ties keep input
    order. Tasks whose due date does not parse are left out.

    Pure function - no I/O.
    """
    earliest: dict[str, TaskOccurrence] = {}
    for task in filter_by_category(tasks, filter_categories):
        when = candidate_date(task, today)
        if when is None:
            logger.debug("No occurrence in window for task %s (due %r)", task.id, task.due_date)
            continue
        current = earliest.get(task.id)
        if current is None or when < current.date:
            earliest[task.id] = TaskOccurrence(task=task, date=when)

    return sorted(earliest.values(), key=lambda occ: occ.date)


def filter_by_recurrence(
    occs: Iterable[TaskOccurrence], mode: RecurrenceFilter | str
) -> list[TaskOccurrence]:
    """Keep all, only recurring, or only one-shot occurrences."""
    mode = RecurrenceFilter.parse(mode)
    if mode is RecurrenceFilter.RECURRING:
        return [o for o in occs if o.task.is_recurring]
    if mode is RecurrenceFilter.NON_RECURRING:
        return [o for o in occs if not o.task.is_recurring]
    return list(occs)


def active_occurrences(occs: Iterable[TaskOccurrence]) -> list[TaskOccurrence]:
    """Drop occurrences of tasks already marked completed."""
    return [o for o in occs if not o.task.completed]


def occurrences_on(occs: Iterable[TaskOccurrence], day: date) -> list[TaskOccurrence]:
    """Occurrences falling on a single calendar day."""
    return [o for o in occs if o.date == day]


def group_by_date(occs: Iterable[TaskOccurrence]) -> dict[date, list[TaskOccurrence]]:
    """Group occurrences by date, keeping their order."""
    grouped: dict[date, list[TaskOccurrence]] = {}
    for occ in occs:
        grouped.setdefault(occ.date, []).append(occ)
    return grouped

"""Recurrence rules - pure date arithmetic, no I/O."""

import logging
from datetime import date, timedelta

from .tasks import Recurrence, Task, parse_due_date

logger = logging.getLogger(__name__)


def add_months(anchor: date, months: int) -> date:
    """
    Add whole months, normalizing day overflow forward.

    The anchor's day-of-month is counted from the first of the target month,
    so a day the target month lacks spills into the following month:
    2024-01-31 + 1 month == 2024-03-02, 2023-01-31 + 1 month == 2023-03-03.
    """
    year, month_index = divmod(anchor.year * 12 + (anchor.month - 1) + months, 12)
    first = date(year, month_index + 1, 1)
    return first + timedelta(days=anchor.day - 1)


def add_years(anchor: date, years: int) -> date:
    """Add whole years with the same overflow rule (Feb 29 -> Mar 1)."""
    return add_months(anchor, years * 12)


def next_due_date(task: Task, today: date) -> date:
    """
    Next due date after the task's current one.

    Anchors on the task's due date, or on `today` if that does not parse.
    One-shot tasks return the anchor unchanged, and so does a date that
    would run past date.max.

    Pure function - no I/O.
    """
    anchor = parse_due_date(task.due_date) or today

    try:
        match Recurrence.parse(task.recurring):
            case Recurrence.DAILY:
                return anchor + timedelta(days=1)
            case Recurrence.MONTHLY:
                return add_months(anchor, 1)
            case Recurrence.YEARLY:
                return add_years(anchor, 1)
            case _:
                return anchor
    except (OverflowError, ValueError):
        logger.warning("Task %s cannot advance past %s, keeping it", task.id, anchor)
        return anchor

"""Completion statistics over the completed-record archive."""

from datetime import date
from enum import Enum
from typing import Iterable

from .tasks import Task


class StatsPeriod(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _in_period(day: date, period: StatsPeriod, today: date) -> bool:
    match period:
        case StatsPeriod.DAILY:
            return day == today
        case StatsPeriod.WEEKLY:
            return day.isocalendar()[:2] == today.isocalendar()[:2]
        case StatsPeriod.MONTHLY:
            return (day.year, day.month) == (today.year, today.month)
    return False


def completed_in_period(records: Iterable[Task], period: StatsPeriod, today: date) -> list[Task]:
    """Completed records whose due date falls in the same day, ISO week or month as today."""
    selected = []
    for record in records:
        day = record.due()
        if day is not None and _in_period(day, period, today):
            selected.append(record)
    return selected


def category_counts(records: Iterable[Task], period: StatsPeriod, today: date) -> dict[str, int]:
    """Number of completions per category, in order of first appearance."""
    counts: dict[str, int] = {}
    for record in completed_in_period(records, period, today):
        counts[record.category] = counts.get(record.category, 0) + 1
    return counts

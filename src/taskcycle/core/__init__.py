"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Recurrence, Priority, RecordError, new_task_id, parse_due_date
from .recurrence import add_months, add_years, next_due_date
from .occurrences import (
    TaskOccurrence,
    RecurrenceFilter,
    occurrences,
    candidate_date,
    filter_by_recurrence,
    active_occurrences,
    occurrences_on,
    group_by_date,
)
from .book import TaskBook, DuplicateTaskError
from .stats import StatsPeriod, category_counts, completed_in_period

__all__ = [
    # Tasks
    "Task",
    "Recurrence",
    "Priority",
    "RecordError",
    "new_task_id",
    "parse_due_date",
    # Recurrence
    "add_months",
    "add_years",
    "next_due_date",
    # Occurrences
    "TaskOccurrence",
    "RecurrenceFilter",
    "occurrences",
    "candidate_date",
    "filter_by_recurrence",
    "active_occurrences",
    "occurrences_on",
    "group_by_date",
    # Book
    "TaskBook",
    "DuplicateTaskError",
    # Stats
    "StatsPeriod",
    "category_counts",
    "completed_in_period",
]

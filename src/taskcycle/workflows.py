"""Shared workflow layer between the CLI and the task store.

Each mutating function loads the book, applies one TaskBook operation, saves,
and returns the affected task.
"""

from dataclasses import replace
from datetime import date
from typing import Iterable

from .adapters.json_store import JsonTaskStore
from .config import Config
from .core.book import TaskBook
from .core.occurrences import (
    RecurrenceFilter,
    TaskOccurrence,
    active_occurrences,
    filter_by_recurrence,
)
from .core.stats import StatsPeriod, category_counts
from .core.tasks import Task
from .ports.task_store import TaskStore

EDITABLE_FIELDS = {
    "text",
    "priority",
    "category",
    "due_date",
    "due_time",
    "recurring",
    "notes",
    "participants",
    "notify_before",
}


class TaskNotFoundError(LookupError):
    """Raised when a task id is not in the store."""

    pass


def get_store(config: Config) -> JsonTaskStore:
    """Resolve the task file from config."""
    return JsonTaskStore(config.data_path)


def load_book(store: TaskStore) -> TaskBook:
    return TaskBook(store.load_tasks(), store.load_completed())


def save_book(store: TaskStore, book: TaskBook) -> None:
    store.save(book.tasks, book.completed)


def add_task(store: TaskStore, text: str, today: date, **fields) -> Task:
    """Create a task (fresh id, due today unless given) and persist it."""
    book = load_book(store)
    task = book.add(Task.create(text, today=today, **fields))
    save_book(store, book)
    return task


def edit_task(store: TaskStore, task_id: str, **changes) -> Task:
    """Change any field of a live task except its id."""
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

    book = load_book(store)
    task = book.get(task_id)
    if task is None:
        raise TaskNotFoundError(f"No task with id {task_id}")

    updated = replace(task, **changes)
    book.update(updated)
    save_book(store, book)
    return updated


def complete_task(store: TaskStore, task_id: str, today: date) -> tuple[Task | None, Task]:
    """
    Complete a task's current occurrence.

    Returns (completed record, live task after the toggle). The record is None
    when there was nothing to complete.
    """
    book = load_book(store)
    task = book.get(task_id)
    if task is None:
        raise TaskNotFoundError(f"No task with id {task_id}")

    record = book.toggle_completion(task, today)
    if record is not None:
        save_book(store, book)
    return record, task


def delete_task(store: TaskStore, task_id: str) -> Task:
    book = load_book(store)
    task = book.delete(task_id)
    if task is None:
        raise TaskNotFoundError(f"No task with id {task_id}")
    save_book(store, book)
    return task


def remove_completed(store: TaskStore, task_id: str) -> None:
    book = load_book(store)
    if not book.remove_completed(task_id):
        raise TaskNotFoundError(f"No completed record with id {task_id}")
    save_book(store, book)


def clear_completed(store: TaskStore) -> int:
    book = load_book(store)
    count = book.clear_completed()
    save_book(store, book)
    return count


def list_occurrences(
    store: TaskStore,
    categories: Iterable[str],
    today: date,
    recurrence_filter: RecurrenceFilter | str = RecurrenceFilter.ALL,
    include_completed: bool = False,
) -> list[TaskOccurrence]:
    """Occurrences to display: aggregated, then filtered by kind and completion."""
    occs = load_book(store).occurrences(categories, today)
    occs = filter_by_recurrence(occs, recurrence_filter)
    if not include_completed:
        occs = active_occurrences(occs)
    return occs


def completion_stats(store: TaskStore, period: StatsPeriod, today: date) -> dict[str, int]:
    return category_counts(store.load_completed(), period, today)

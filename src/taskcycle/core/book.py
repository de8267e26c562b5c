"""TaskBook - the live task set and the completed-record archive."""

import logging
from datetime import date
from typing import Iterable

from .occurrences import TaskOccurrence, occurrences
from .recurrence import next_due_date
from .tasks import Task, new_task_id

logger = logging.getLogger(__name__)


class DuplicateTaskError(ValueError):
    """Raised when adding a task whose id is already live."""

    pass


class TaskBook:
    """
    Owns the live tasks and the append-only completed records.

    All mutation goes through the methods here. Single writer: callers
    serialize mutations and never aggregate while one is in progress.
    """

    def __init__(self, tasks: Iterable[Task] = (), completed: Iterable[Task] = ()):
        self._tasks: list[Task] = list(tasks)
        self._completed: list[Task] = list(completed)

    @property
    def tasks(self) -> list[Task]:
        """Live tasks (a copy of the list; the Task objects are shared)."""
        return list(self._tasks)

    @property
    def completed(self) -> list[Task]:
        """Completed records, oldest first."""
        return list(self._completed)

    def __len__(self) -> int:
        return len(self._tasks)

    def live_ids(self) -> set[str]:
        return {t.id for t in self._tasks}

    def get(self, task_id: str) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def get_completed(self, task_id: str) -> Task | None:
        return next((t for t in self._completed if t.id == task_id), None)

    def add(self, task: Task) -> Task:
        if task.id in self.live_ids():
            raise DuplicateTaskError(f"Task {task.id} already exists")
        self._tasks.append(task)
        logger.info("Added task %s (%s, %s)", task.id, task.recurring.value, task.due_date)
        return task

    def update(self, updated: Task) -> bool:
        """Replace the live task with the same id. Returns False if there is none."""
        for index, task in enumerate(self._tasks):
            if task.id == updated.id:
                self._tasks[index] = updated
                logger.info("Updated task %s", updated.id)
                return True
        return False

    def delete(self, task_id: str) -> Task | None:
        """Remove a live task and archive it with the completed records."""
        task = self.get(task_id)
        if task is None:
            return None
        self._tasks = [t for t in self._tasks if t is not task]
        self._completed.append(task)
        logger.info("Deleted task %s", task_id)
        return task

    def _fresh_record_id(self) -> str:
        taken = {t.id for t in self._completed} | self.live_ids()
        record_id = new_task_id()
        while record_id in taken:
            record_id = new_task_id()
        return record_id

    def toggle_completion(self, task: Task, today: date) -> Task | None:
        """
        Mark one occurrence of a task as done.

        Recurring: archive a copy with a fresh id and the current due date,
        then roll the live task forward to its next due date.
        One-shot: mark completed and move the task itself to the archive.
        No-op (returns None) for a one-shot task that is already completed.

        `today` anchors a recurring task whose due date does not parse.
        Returns the new completed record.
        """
        if task.is_recurring:
            record = task.snapshot(id=self._fresh_record_id(), completed=True)
            self._completed.append(record)
            task.due_date = next_due_date(task, today).isoformat()
            logger.info(
                "Completed %s occurrence %s of task %s, next due %s",
                task.recurring.value,
                record.due_date,
                task.id,
                task.due_date,
            )
            return record

        if task.completed:
            return None
        task.completed = True
        self._tasks = [t for t in self._tasks if t is not task]
        self._completed.append(task)
        logger.info("Completed task %s", task.id)
        return task

    def remove_completed(self, task_id: str) -> bool:
        before = len(self._completed)
        self._completed = [t for t in self._completed if t.id != task_id]
        return len(self._completed) != before

    def clear_completed(self) -> int:
        count = len(self._completed)
        self._completed = []
        logger.info("Cleared %d completed records", count)
        return count

    def occurrences(self, filter_categories: Iterable[str], today: date) -> list[TaskOccurrence]:
        return occurrences(self._tasks, filter_categories, today)

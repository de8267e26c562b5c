"""File-based task storage adapters."""

import json
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Callable

from taskcycle.core.tasks import RecordError, Task

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
COMPLETED_KEY = "completedTasks"

Clock = Callable[[], date]


def _records_to_tasks(records, key: str, today: date) -> list[Task]:
    """Read records one by one, dropping the ones that fail to load."""
    if not isinstance(records, list):
        if records is not None:
            logger.warning(f"Ignoring {key}: expected a list, got {type(records).__name__}")
        return []

    tasks = []
    for index, record in enumerate(records):
        try:
            tasks.append(Task.from_record(record, today))
        except RecordError as e:
            logger.warning(f"Dropping {key}[{index}]: {e}")
    return tasks


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskStore protocol. One document holds both lists:
    {"tasks": [...], "completedTasks": [...]}.

    `clock` supplies the date given to records stored without a due date.
    """

    def __init__(self, path: Path | str, clock: Clock = date.today):
        self.path = Path(path).expanduser()
        self.clock = clock

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Task file {self.path} is not valid JSON, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Task file {self.path} has no task lists, treating as empty")
            return {}
        return data

    def _write(self, lists: dict[str, list[Task]]) -> None:
        """Replace the given lists in one atomic file swap."""
        data = self._read()
        for key, tasks in lists.items():
            data[key] = [t.to_record() for t in tasks]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved {', '.join(lists)} to {self.path}")

    def _load(self, key: str) -> list[Task]:
        return _records_to_tasks(self._read().get(key), key, self.clock())

    def load_tasks(self) -> list[Task]:
        return self._load(TASKS_KEY)

    def save_tasks(self, tasks: list[Task]) -> None:
        self._write({TASKS_KEY: tasks})

    def load_completed(self) -> list[Task]:
        return self._load(COMPLETED_KEY)

    def save_completed(self, tasks: list[Task]) -> None:
        self._write({COMPLETED_KEY: tasks})

    def save(self, tasks: list[Task], completed: list[Task]) -> None:
        self._write({TASKS_KEY: tasks, COMPLETED_KEY: completed})


class MemoryTaskStore:
    """
    In-memory task storage.

    Implements TaskStore protocol. Keeps serialized records, so loads always
    hand out fresh Task objects just like the file store.
    """

    def __init__(
        self,
        tasks: list[dict] | None = None,
        completed: list[dict] | None = None,
        clock: Clock = date.today,
    ):
        self.records = {
            TASKS_KEY: list(tasks or []),
            COMPLETED_KEY: list(completed or []),
        }
        self.clock = clock

    def load_tasks(self) -> list[Task]:
        return _records_to_tasks(self.records[TASKS_KEY], TASKS_KEY, self.clock())

    def save_tasks(self, tasks: list[Task]) -> None:
        self.records[TASKS_KEY] = [t.to_record() for t in tasks]

    def load_completed(self) -> list[Task]:
        return _records_to_tasks(self.records[COMPLETED_KEY], COMPLETED_KEY, self.clock())

    def save_completed(self, tasks: list[Task]) -> None:
        self.records[COMPLETED_KEY] = [t.to_record() for t in tasks]

    def save(self, tasks: list[Task], completed: list[Task]) -> None:
        self.records = {
            TASKS_KEY: [t.to_record() for t in tasks],
            COMPLETED_KEY: [t.to_record() for t in completed],
        }

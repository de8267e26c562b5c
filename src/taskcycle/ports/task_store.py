"""Task store interface."""

from typing import Protocol

from taskcycle.core.tasks import Task


class TaskStore(Protocol):
    """Interface for persisting the live tasks and the completed records."""

    def load_tasks(self) -> list[Task]:
        """Load live tasks. Malformed records are skipped."""
        ...

    def save_tasks(self, tasks: list[Task]) -> None:
        """Replace the stored live tasks."""
        ...

    def load_completed(self) -> list[Task]:
        """Load completed records."""
        ...

    def save_completed(self, tasks: list[Task]) -> None:
        """Replace the stored completed records."""
        ...

    def save(self, tasks: list[Task], completed: list[Task]) -> None:
        """Replace both lists together, so a crash never leaves one without the other."""
        ...

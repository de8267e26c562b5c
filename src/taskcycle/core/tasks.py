"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum, IntEnum

DEFAULT_CATEGORY = "Personal"


class RecordError(ValueError):
    """Raised when a stored task record is missing required fields."""

    pass


class Recurrence(Enum):
    """How a task's due date advances."""

    NONE = "none"
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw) -> "Recurrence":
        """Map a stored tag to a member. Unknown tags fall back to NONE."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return cls.NONE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.NONE


class Priority(IntEnum):
    HIGH = 1
    MEDIUM = 2
    LOW = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


def new_task_id() -> str:
    """Opaque unique task id."""
    return uuid.uuid4().hex


def parse_due_date(raw) -> date | None:
    """
    Parse a stored "YYYY-MM-DD" due date.

    Any time-of-day suffix ("2024-06-01T09:00", "2024-06-01 09:00") is ignored.
    Returns None instead of raising.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    day_part = raw.strip().split("T")[0].split(" ")[0]
    try:
        return date.fromisoformat(day_part)
    except ValueError:
        return None


@dataclass
class Task:
    """A one-shot or recurring activity."""

    id: str
    text: str
    due_date: str
    completed: bool = False
    priority: int = Priority.MEDIUM
    category: str = DEFAULT_CATEGORY
    due_time: str = ""
    recurring: Recurrence = Recurrence.NONE
    notes: str = ""
    participants: list[str] = field(default_factory=list)
    notify_before: bool = False

    def __setattr__(self, name, value):
        # recurring is always a Recurrence member, however it was assigned
        if name == "recurring":
            value = Recurrence.parse(value)
        super().__setattr__(name, value)

    @classmethod
    def create(cls, text: str, *, today: date, due_date: str = "", **fields) -> "Task":
        """New live task with a fresh id. Due date defaults to today."""
        fields.setdefault("id", "")
        task = cls(text=text, due_date=due_date or today.isoformat(), **fields)
        if not task.id:
            task.id = new_task_id()
        return task

    @property
    def is_recurring(self) -> bool:
        return Recurrence.parse(self.recurring) is not Recurrence.NONE

    def due(self) -> date | None:
        """Parsed due date, or None if the stored value is not a calendar date."""
        return parse_due_date(self.due_date)

    def priority_label(self) -> str:
        try:
            return Priority(self.priority).label
        except ValueError:
            return ""

    def snapshot(self, **changes) -> "Task":
        """Independent copy of this task with optional field changes."""
        changes.setdefault("participants", list(self.participants))
        return replace(self, **changes)

    @classmethod
    def from_record(cls, data: dict, today: date) -> "Task":
        """
        Create Task from a flat stored record.

        Missing optional fields get defaults; a missing due date becomes
        `today`. A missing or invalid `text` or `priority`, or an optional
        field of the wrong type, raises RecordError.
        """
        if not isinstance(data, dict):
            raise RecordError(f"Task record must be a mapping, got {type(data).__name__}")

        text = data.get("text")
        if not isinstance(text, str):
            raise RecordError("Task record has no text")

        priority = data.get("priority")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise RecordError(f"Task record {text!r} has no valid priority")
        if priority not in {p.value for p in Priority}:
            raise RecordError(f"Task record {text!r} has unknown priority {priority}")

        def optional_str(key: str, default: str) -> str:
            value = data.get(key)
            if value is None:
                return default
            if not isinstance(value, str):
                raise RecordError(f"Task record {text!r} has non-text {key}: {value!r}")
            return value or default

        participants = data.get("participants")
        if participants is None:
            participants = []
        if not isinstance(participants, list) or not all(isinstance(p, str) for p in participants):
            raise RecordError(f"Task record {text!r} has invalid participants: {participants!r}")

        record_id = data.get("id")
        if record_id is not None and not isinstance(record_id, (str, int)):
            raise RecordError(f"Task record {text!r} has invalid id: {record_id!r}")

        return cls(
            id=str(record_id or new_task_id()),
            text=text,
            completed=bool(data.get("completed", False)),
            priority=priority,
            category=optional_str("category", DEFAULT_CATEGORY),
            due_date=optional_str("dueDate", today.isoformat()),
            due_time=optional_str("dueTime", ""),
            recurring=data.get("recurring", "none"),
            notes=optional_str("notes", ""),
            participants=list(participants),
            notify_before=bool(data.get("notifyBefore", False)),
        )

    def to_record(self) -> dict:
        """Serialize to the flat stored record."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": int(self.priority),
            "category": self.category,
            "dueDate": self.due_date,
            "dueTime": self.due_time,
            "recurring": self.recurring.value,
            "notes": self.notes,
            "participants": list(self.participants),
            "notifyBefore": self.notify_before,
        }

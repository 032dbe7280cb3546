"""
Task entity - the single record persisted by the task store.

Records keep the camelCase keys of the stored JSON array (parentId,
endDate) through field aliases, so data files written by earlier clients
load unchanged. Construction always normalizes the raw input and derives
`status` from the due date; see `Task.normalize_input`.
"""

import time
from datetime import date
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app import dates
from app.exceptions import FamilyTooLargeError, ValidationError

# Child ids are mother_id * CHILD_ID_FACTOR + index. Existing data files use
# this scheme, so it stays as a storage format constraint; it caps a family
# at MAX_CHILDREN occurrences besides the mother.
CHILD_ID_FACTOR = 1000
MAX_CHILDREN = CHILD_ID_FACTOR - 1

_ALIASES = {"parent_id": "parentId", "end_date": "endDate"}


class TaskType(str, Enum):
    """Task variants. Values are the strings found in stored records."""

    REGULAR = "regular task"
    PERIODIC = "periodic task"
    REMINDER = "reminder"

    @classmethod
    def from_raw(cls, raw: Any) -> "TaskType":
        """Accept stored values and short names; anything else is a regular task."""
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        return cls.REGULAR


class TaskStatus(str, Enum):
    DUE = "due"
    LATE = "late"
    DONE = "done"

    @classmethod
    def from_raw(cls, raw: Any) -> "TaskStatus | None":
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


def new_task_id() -> int:
    """Clock-derived id for a newly created task (milliseconds since epoch)."""
    return int(time.time() * 1000)


def child_task_id(mother_id: int, index: int) -> int:
    """Id of the `index`-th child occurrence of a family (index starts at 1)."""
    if index > MAX_CHILDREN:
        raise FamilyTooLargeError(mother_id, MAX_CHILDREN)
    return mother_id * CHILD_ID_FACTOR + index


def child_index(mother_id: int, task_id: int) -> int:
    """Inverse of `child_task_id`. Non-positive for the mother itself."""
    return task_id - mother_id * CHILD_ID_FACTOR


def initial_status(task_type: "TaskType", status: Any, due: str | None) -> "TaskStatus | None":
    """
    Derive the status a task gets on construction.

    - reminders and tasks without a due date have no status
    - an explicit "done" is kept
    - a due date before today makes the task "late"
    - everything else is "due" ("late" is never taken from input as-is)
    """
    if task_type is TaskType.REMINDER or not due:
        return None
    if TaskStatus.from_raw(status) is TaskStatus.DONE:
        return TaskStatus.DONE
    if dates.is_overdue(due):
        return TaskStatus.LATE
    return TaskStatus.DUE


def _pick(data: Mapping[str, Any], alias: str, name: str) -> Any:
    return data[alias] if alias in data else data.get(name)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _positive_int(value: Any) -> int | None:
    number = _optional_int(value)
    if number is None or number <= 0:
        return None
    return number


def _coerce_id(value: Any) -> int:
    return _optional_int(value) or new_task_id()


class Task(BaseModel):
    """
    A task, reminder, or one occurrence of a periodic family.

    Periodic families: the mother has parent_id == id, every child has
    parent_id == mother.id. title/frequency/end_date/type are shared by the
    whole family; status and desc belong to each occurrence.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = ""
    desc: str = ""
    due: str | None = None
    type: TaskType = TaskType.REGULAR
    status: TaskStatus | None = None
    parent_id: int | None = Field(default=None, alias="parentId")
    end_date: str | None = Field(default=None, alias="endDate")
    frequency: int | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_input(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        task_type = TaskType.from_raw(data.get("type"))
        due = _optional_text(data.get("due"))
        periodic = task_type is TaskType.PERIODIC

        return {
            "id": _coerce_id(data.get("id")),
            "title": str(data.get("title") or ""),
            "desc": str(data.get("desc") or ""),
            "due": due,
            "type": task_type,
            "status": initial_status(task_type, data.get("status"), due),
            # Family fields only exist on periodic tasks
            "parentId": _optional_int(_pick(data, "parentId", "parent_id")) if periodic else None,
            "endDate": _optional_text(_pick(data, "endDate", "end_date")) if periodic else None,
            "frequency": _positive_int(data.get("frequency")) if periodic else None,
        }

    # ---- construction / serialization ----

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Task":
        """Build a task from a stored (or submitted) record."""
        return cls.model_validate(dict(record))

    def to_record(self) -> dict[str, Any]:
        """The persisted form: camelCase keys, enum values, nulls kept."""
        return self.model_dump(mode="json", by_alias=True)

    def derive(self, **changes: Any) -> "Task":
        """
        New task from this one's fields plus `changes`.

        Normalization runs again, so status is recomputed for the result.
        Keys may be attribute names (parent_id) or stored keys (parentId).
        """
        record = self.to_record()
        for name, value in changes.items():
            record[_ALIASES.get(name, name)] = value
        return Task.from_record(record)

    # ---- derived properties ----

    @property
    def is_periodic(self) -> bool:
        return self.type is TaskType.PERIODIC

    @property
    def is_mother(self) -> bool:
        """True for the head of a family (or a task with no parent at all)."""
        return self.parent_id is None or self.parent_id == self.id

    @property
    def family_id(self) -> int:
        return self.parent_id if self.parent_id is not None else self.id

    @property
    def due_date(self) -> date | None:
        return dates.parse_date(self.due)

    @property
    def end_day(self) -> date | None:
        return dates.parse_date(self.end_date)

    def is_overdue(self, day: str | None) -> bool:
        """True iff `day` is set and strictly before the start of today."""
        return dates.is_overdue(day)

    def validate(self) -> None:
        """Hard precondition for any save: a non-blank title."""
        if not self.title.strip():
            raise ValidationError(
                "Title is required",
                details=[{"loc": ["body", "title"], "msg": "title must not be blank", "type": "missing"}],
            )

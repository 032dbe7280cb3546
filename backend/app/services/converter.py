"""
Type conversion between regular tasks, periodic families and reminders.

The rules are checked in precedence order against the stored version of the
task; the first that matches decides the conversion:

1. to periodic   - stored task missing or not periodic, new type periodic
2. from periodic - stored task periodic, new type not periodic
3. to reminder   - stored task not a reminder, new type reminder
4. from reminder - stored task a reminder, new type something else

Every conversion returns the complete resulting task list; callers persist it.
"""

from dataclasses import dataclass, field
from enum import Enum

from app.exceptions import PeriodicParametersError
from app.logging_config import get_logger
from app.models.task import Task, TaskType, new_task_id
from app.services import recurrence

logger = get_logger(__name__)


class ConversionKind(str, Enum):
    TO_PERIODIC = "to_periodic"
    FROM_PERIODIC = "from_periodic"
    TO_REMINDER = "to_reminder"
    FROM_REMINDER = "from_reminder"


@dataclass
class ConversionResult:
    tasks: list[Task] = field(default_factory=list)
    success: bool = True
    kind: ConversionKind | None = None


def missing_periodic_parameters(task: Task) -> list[str]:
    """Names of the fields a periodic task needs but does not have."""
    missing = []
    if task.due_date is None:
        missing.append("due")
    if task.end_day is None:
        missing.append("endDate")
    if not task.frequency:
        missing.append("frequency")
    return missing


def fresh_task_id(tasks: list[Task]) -> int:
    """Clock id that does not collide with any id already in the list."""
    taken = {task.id for task in tasks}
    candidate = new_task_id()
    while candidate in taken:
        candidate += 1
    return candidate


class TaskConverter:
    """Decides and performs type transitions."""

    def detect(self, task: Task, stored: Task | None) -> ConversionKind | None:
        """Which conversion (if any) turns `stored` into `task`."""
        stored_type = stored.type if stored is not None else None

        if task.type is TaskType.PERIODIC and stored_type is not TaskType.PERIODIC:
            return ConversionKind.TO_PERIODIC
        if stored_type is TaskType.PERIODIC and task.type is not TaskType.PERIODIC:
            return ConversionKind.FROM_PERIODIC
        if stored_type is not TaskType.REMINDER and task.type is TaskType.REMINDER:
            return ConversionKind.TO_REMINDER
        if stored_type is TaskType.REMINDER and task.type is not TaskType.REMINDER:
            return ConversionKind.FROM_REMINDER
        return None

    def convert(self, task: Task, tasks: list[Task]) -> ConversionResult:
        """
        Apply the matching conversion for `task` against the current list.

        Returns the unchanged list with kind=None when no rule applies.
        """
        stored = recurrence.find_by_id(task.id, tasks)
        kind = self.detect(task, stored)

        if kind is None:
            return ConversionResult(tasks=list(tasks), success=True, kind=None)

        if kind is ConversionKind.TO_PERIODIC:
            result = self.to_periodic(task, tasks)
        elif kind is ConversionKind.FROM_PERIODIC:
            result = self.from_periodic(task, stored, tasks)
        elif kind is ConversionKind.TO_REMINDER:
            result = self.to_reminder(task, tasks)
        elif kind is ConversionKind.FROM_REMINDER:
            result = self.from_reminder(task, tasks)
        else:
            raise AssertionError(f"Unhandled conversion kind: {kind}")

        logger.info(f"Converted task {task.id}: {kind.value} ({len(tasks)} -> {len(result)} tasks)")
        return ConversionResult(tasks=result, success=True, kind=kind)

    def to_periodic(self, task: Task, tasks: list[Task]) -> list[Task]:
        """
        Make `task` the mother of a new family and generate its children.

        Children fall every `frequency` days after the mother's due date up to
        and including the end date, with ids mother_id*1000 + 1, +2, ...
        """
        missing = missing_periodic_parameters(task)
        if missing:
            raise PeriodicParametersError(missing)

        mother = task.derive(parent_id=task.id)
        days = recurrence.occurrences_after(mother.due_date, mother.frequency, mother.end_day)
        children = [
            recurrence.make_child(mother, index, day)
            for index, day in enumerate(days, start=1)
        ]
        return recurrence.remove_by_id(task.id, tasks) + [mother] + children

    def from_periodic(self, task: Task, stored: Task, tasks: list[Task]) -> list[Task]:
        """Collapse the stored task's whole family into one non-periodic task."""
        remaining = recurrence.without_family(stored.family_id, tasks)
        single = Task.from_record({
            "id": fresh_task_id(tasks),
            "title": task.title,
            "desc": task.desc,
            "due": task.due,
            "type": task.type,
            "status": task.status,
        })
        return remaining + [single]

    def to_reminder(self, task: Task, tasks: list[Task]) -> list[Task]:
        return recurrence.upsert(task.derive(type=TaskType.REMINDER, status=None), tasks)

    def from_reminder(self, task: Task, tasks: list[Task]) -> list[Task]:
        # Status is always recomputed from the due date
        return recurrence.upsert(task.derive(status=None), tasks)

"""
Periodic family helpers.

A family is a mother (parent_id == id) plus every task whose parent_id
points at it. These helpers are pure: they take and return task lists and
never touch persistence.
"""

from datetime import date
from typing import Iterable

from app import dates
from app.models.task import Task, TaskStatus, child_index, child_task_id

# Shared by every member of a family; status and desc are per-occurrence.
GROUP_PROPERTIES = ("title", "frequency", "end_date", "type")


def find_by_id(task_id: int, tasks: Iterable[Task]) -> Task | None:
    return next((task for task in tasks if task.id == task_id), None)


def upsert(task: Task, tasks: list[Task]) -> list[Task]:
    """Replace the task with the same id in place, or append it."""
    for index, existing in enumerate(tasks):
        if existing.id == task.id:
            return tasks[:index] + [task] + tasks[index + 1:]
    return tasks + [task]


def remove_by_id(task_id: int, tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if task.id != task_id]


def in_family(task: Task, family_id: int) -> bool:
    return task.id == family_id or task.parent_id == family_id


def family_members(family_id: int, tasks: Iterable[Task]) -> list[Task]:
    """
    Mother and children of a family.

    Works for orphans too: children whose mother is gone still share the
    parent_id and come back as a family without a mother.
    """
    return [task for task in tasks if in_family(task, family_id)]


def without_family(family_id: int, tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if not in_family(task, family_id)]


def highest_child_index(family_id: int, tasks: Iterable[Task]) -> int:
    """Largest child index used in the family so far (0 when there are none)."""
    indexes = [
        child_index(family_id, task.id)
        for task in family_members(family_id, tasks)
        if task.id != family_id
    ]
    return max(indexes, default=0)


def latest_due(family: Iterable[Task]) -> date | None:
    days = [task.due_date for task in family if task.due_date is not None]
    return max(days, default=None)


def make_child(mother: Task, index: int, due: date, status: TaskStatus | None = TaskStatus.DUE, desc: str = "") -> Task:
    """A child occurrence inheriting the mother's group properties."""
    return mother.derive(
        id=child_task_id(mother.id, index),
        parent_id=mother.id,
        due=dates.to_iso(due),
        status=status,
        desc=desc,
    )


def occurrences_after(start: date, frequency: int, end: date) -> list[date]:
    """Occurrence days strictly after `start`, up to and including `end`."""
    if (end - start).days < frequency:
        return []
    return list(dates.step_days(dates.add_days(start, frequency), frequency, end))


def propagate_group_properties(source: Task, family_id: int, tasks: list[Task]) -> list[Task]:
    """Copy title/frequency/end_date/type from `source` onto every family member."""
    shared = {name: getattr(source, name) for name in GROUP_PROPERTIES}
    return [
        task.derive(**shared) if in_family(task, family_id) else task
        for task in tasks
    ]

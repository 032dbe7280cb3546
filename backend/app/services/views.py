"""
Read models for the overdue list, planning board, calendar and counters.

All functions are pure over an already-loaded task list.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from app import dates
from app.models.task import Task, TaskStatus

MONTHS_AHEAD = 12


@dataclass
class CalendarMonth:
    year: int
    month: int

    @property
    def name(self) -> str:
        return date(self.year, self.month, 1).strftime("%B")


def overdue_tasks(tasks: list[Task]) -> list[Task]:
    """Late tasks whose due date is still in the past, oldest first."""
    late = [
        task for task in tasks
        if task.status is TaskStatus.LATE and task.is_overdue(task.due)
    ]
    return sorted(late, key=lambda task: task.due_date)


def planning_tasks(tasks: list[Task]) -> list[Task]:
    """Tasks without a due date, in creation (id) order."""
    return sorted((task for task in tasks if task.due_date is None), key=lambda task: task.id)


def calendar_days(tasks: list[Task], start: date | None = None, end: date | None = None) -> dict[str, list[Task]]:
    """Group dated tasks by due day, optionally limited to [start, end]."""
    grouped: dict[str, list[Task]] = defaultdict(list)
    for task in tasks:
        day = task.due_date
        if day is None:
            continue
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        grouped[dates.to_iso(day)].append(task)
    return dict(sorted(grouped.items()))


def calendar_months(tasks: list[Task], reference: date | None = None) -> list[CalendarMonth]:
    """
    Months to render: from the earliest due month (or the current month when
    nothing is dated) through MONTHS_AHEAD months after the current one.
    """
    reference = reference or dates.today()
    due_days = [task.due_date for task in tasks if task.due_date is not None]
    first = min(due_days, default=reference)

    year, month = first.year, first.month
    end_index = reference.year * 12 + reference.month - 1 + MONTHS_AHEAD

    months = []
    while year * 12 + month - 1 <= end_index:
        months.append(CalendarMonth(year=year, month=month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


def task_stats(tasks: list[Task]) -> dict[str, int]:
    """Counts per status; tasks without a status are not counted."""
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        if task.status is not None:
            counts[task.status.value] += 1
    return {"total": sum(counts.values()), **counts}

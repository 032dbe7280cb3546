"""
Tests for type conversions between regular tasks, periodic families and reminders.
"""

import pytest

from app.exceptions import PeriodicParametersError
from app.models.task import Task, TaskStatus, TaskType
from app.services.converter import ConversionKind, TaskConverter


def regular(task_id=42, **fields):
    data = {"id": task_id, "title": "Gym", "due": "2025-01-01", "type": "regular task"}
    data.update(fields)
    return Task.from_record(data)


def periodic(task_id=42, **fields):
    data = {
        "id": task_id, "title": "Gym", "due": "2025-01-01", "type": "periodic task",
        "endDate": "2025-01-10", "frequency": 3,
    }
    data.update(fields)
    return Task.from_record(data)


@pytest.fixture
def converter():
    return TaskConverter()


class TestDetect:
    def test_precedence(self, converter):
        assert converter.detect(periodic(), None) is ConversionKind.TO_PERIODIC
        assert converter.detect(periodic(), regular()) is ConversionKind.TO_PERIODIC
        assert converter.detect(regular(), periodic()) is ConversionKind.FROM_PERIODIC
        assert converter.detect(regular(type="reminder"), periodic()) is ConversionKind.FROM_PERIODIC
        assert converter.detect(regular(type="reminder"), regular()) is ConversionKind.TO_REMINDER
        assert converter.detect(regular(), regular(type="reminder")) is ConversionKind.FROM_REMINDER

    def test_same_type_needs_nothing(self, converter):
        assert converter.detect(regular(), regular()) is None
        assert converter.detect(periodic(), periodic()) is None


class TestToPeriodic:
    def test_family_is_generated(self, converter):
        """due 01-01, end 01-10, every 3 days -> 01-01, 01-04, 01-07, 01-10."""
        other = regular(task_id=7, title="Other")
        result = converter.convert(periodic(), [regular(), other])

        assert result.success
        assert result.kind is ConversionKind.TO_PERIODIC

        family = [task for task in result.tasks if task.family_id == 42]
        assert [task.id for task in family] == [42, 42001, 42002, 42003]
        assert [task.due for task in family] == ["2025-01-01", "2025-01-04", "2025-01-07", "2025-01-10"]
        assert all(task.parent_id == 42 for task in family)
        assert all(task.end_date == "2025-01-10" and task.frequency == 3 for task in family)
        assert other in result.tasks
        assert len(result.tasks) == 5

    def test_children_inherit_but_start_fresh(self, converter):
        mother = periodic(desc="bring towel", status="done")
        result = converter.convert(mother, [])
        children = [task for task in result.tasks if task.id != 42]
        assert all(task.title == "Gym" for task in children)
        assert all(task.desc == "" for task in children)
        assert all(task.status is TaskStatus.DUE for task in children)

    def test_past_children_are_late(self, converter):
        result = converter.convert(periodic(due="2024-12-25", endDate="2024-12-31"), [])
        assert [task.due for task in result.tasks] == ["2024-12-25", "2024-12-28", "2024-12-31"]
        assert all(task.status is TaskStatus.LATE for task in result.tasks)

    def test_end_before_due_leaves_only_mother(self, converter):
        result = converter.convert(periodic(endDate="2024-12-01"), [])
        assert [task.id for task in result.tasks] == [42]

    def test_missing_parameters(self, converter):
        with pytest.raises(PeriodicParametersError) as exc_info:
            converter.convert(periodic(frequency=None), [])
        assert exc_info.value.missing == ["frequency"]


class TestFromPeriodic:
    def test_family_collapses_to_one_task(self, converter):
        family = converter.convert(periodic(endDate="2025-01-07"), []).tasks
        assert len(family) == 3
        other = regular(task_id=7, title="Other")

        edited_child = family[1].derive(type="regular task", title="Gym once", desc="just this")
        result = converter.convert(edited_child, family + [other])

        assert result.kind is ConversionKind.FROM_PERIODIC
        assert len(result.tasks) == 2
        single = next(task for task in result.tasks if task.id != 7)
        assert single.id not in {42, 42001, 42002}
        assert single.type is TaskType.REGULAR
        assert single.title == "Gym once"
        assert single.desc == "just this"
        assert single.parent_id is None
        assert single.end_date is None
        assert single.frequency is None


class TestReminders:
    def test_to_reminder_clears_status(self, converter):
        stored = regular(status="due")
        result = converter.convert(stored.derive(type="reminder"), [stored])
        assert result.kind is ConversionKind.TO_REMINDER
        assert result.tasks[0].type is TaskType.REMINDER
        assert result.tasks[0].status is None

    def test_from_reminder_recomputes_status(self, converter):
        stored = regular(type="reminder", due="2024-12-01")
        result = converter.convert(stored.derive(type="regular task"), [stored])
        assert result.kind is ConversionKind.FROM_REMINDER
        assert result.tasks[0].status is TaskStatus.LATE

    def test_from_reminder_ignores_submitted_status(self, converter):
        stored = regular(type="reminder", due="2025-01-05")
        result = converter.convert(stored.derive(type="regular task", status="done"), [stored])
        assert result.kind is ConversionKind.FROM_REMINDER
        assert result.tasks[0].status is TaskStatus.DUE

    def test_no_conversion_returns_list_unchanged(self, converter):
        stored = regular()
        result = converter.convert(stored.derive(title="Gym!"), [stored])
        assert result.kind is None
        assert result.success
        assert result.tasks == [stored]

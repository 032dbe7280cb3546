"""
Tests for the save/delete pipeline with non-periodic tasks, persistence
failures and the change signal.
"""

from datetime import date

import pytest

from app import dates
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models.task import Task, TaskStatus, TaskType


class TestSave:
    @pytest.mark.asyncio
    async def test_create_appends(self, service, gateway):
        result = await service.save(Task(id=1, title="Rent", due="2025-01-05"))
        assert result.success
        assert [task.id for task in result.tasks] == [1]
        assert gateway.get(1).status is TaskStatus.DUE

    @pytest.mark.asyncio
    async def test_edit_replaces_in_place(self, service, gateway):
        await service.save(Task(id=1, title="Rent", due="2025-01-05"))
        await service.save(Task(id=2, title="Dentist", due="2025-01-06"))

        await service.save(Task(id=1, title="Rent (paid)", due="2025-01-05", status="done"))

        assert [task.id for task in gateway.tasks] == [1, 2]
        assert gateway.get(1).title == "Rent (paid)"
        assert gateway.get(1).status is TaskStatus.DONE

    @pytest.mark.asyncio
    async def test_blank_title_changes_nothing(self, service, gateway):
        with pytest.raises(ValidationError):
            await service.save(Task(id=1, title="  "))
        assert gateway.saves == 0

    @pytest.mark.asyncio
    async def test_type_change_goes_through_converter(self, service, gateway):
        await service.save(Task(id=1, title="Call mum", due="2025-01-05"))
        await service.save(Task(id=1, title="Call mum", due="2025-01-05", type="reminder"))

        task = gateway.get(1)
        assert task.type is TaskType.REMINDER
        assert task.status is None

    @pytest.mark.asyncio
    async def test_failed_save_reports_failure(self, service, gateway, notifier):
        gateway.fail_saves = True
        result = await service.save(Task(id=1, title="Rent"))
        assert result.success is False
        assert notifier.revision == 0

    @pytest.mark.asyncio
    async def test_failed_load_raises(self, service, gateway):
        gateway.fail_loads = True
        with pytest.raises(PersistenceError):
            await service.save(Task(id=1, title="Rent"))

    @pytest.mark.asyncio
    async def test_successful_save_signals_change(self, service, notifier):
        seen = []
        notifier.subscribe(seen.append)

        await service.save(Task(id=1, title="Rent"))
        await service.save(Task(id=2, title="Gas"))

        assert notifier.revision == 2
        assert seen == [1, 2]


class TestDelete:
    @pytest.mark.asyncio
    async def test_removes_single_task(self, service, gateway):
        await service.save(Task(id=1, title="Rent"))
        await service.save(Task(id=2, title="Gas"))

        result = await service.delete(1)

        assert result.success
        assert [task.id for task in gateway.tasks] == [2]

    @pytest.mark.asyncio
    async def test_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            await service.delete(999)


class TestRead:
    @pytest.mark.asyncio
    async def test_get_task(self, service):
        await service.save(Task(id=1, title="Rent"))
        assert (await service.get_task(1)).title == "Rent"
        with pytest.raises(NotFoundError):
            await service.get_task(2)

    @pytest.mark.asyncio
    async def test_statuses_are_fresh_on_every_load(self, service, gateway, monkeypatch):
        await service.save(Task(id=1, title="Rent", due="2025-01-05"))
        assert (await service.get_task(1)).status is TaskStatus.DUE

        monkeypatch.setattr(dates, "today", lambda: date(2025, 1, 10))
        assert (await service.get_task(1)).status is TaskStatus.LATE

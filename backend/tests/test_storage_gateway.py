"""
Tests for the JSON file store and the task gateways.
"""

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.exceptions import InvalidPayloadError, PersistenceError, StoreError
from app.gateway import HttpTaskGateway, StoreTaskGateway
from app.main import app
from app.models.task import Task
from app.services.converter import TaskConverter
from app.storage import JsonBlobStore, get_task_store


def sample_tasks():
    family = TaskConverter().convert(
        Task.from_record({
            "id": 42, "title": "Gym", "due": "2025-01-01", "type": "periodic task",
            "endDate": "2025-01-07", "frequency": 3,
        }),
        [],
    ).tasks
    return family + [
        Task(id=1, title="Çay al", due="2024-12-30"),
        Task(id=2, title="Call", due="2025-01-03", type="reminder"),
        Task(id=3, title="Someday"),
    ]


class TestJsonBlobStore:
    @pytest.mark.asyncio
    async def test_first_read_creates_empty_array(self, task_store):
        assert await task_store.read() == []
        assert task_store.path.read_text(encoding="utf-8") == "[]"

    @pytest.mark.asyncio
    async def test_write_is_pretty_and_keeps_unicode(self, task_store):
        await task_store.write([{"title": "Çay"}])
        text = task_store.path.read_text(encoding="utf-8")
        assert text == json.dumps([{"title": "Çay"}], indent=2, ensure_ascii=False)
        assert not task_store.path.with_suffix(".json.tmp").exists()

    @pytest.mark.asyncio
    async def test_non_list_rejected(self, task_store):
        with pytest.raises(InvalidPayloadError):
            await task_store.write({"title": "not a list"})

    @pytest.mark.asyncio
    async def test_corrupt_file(self, task_store):
        task_store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            await task_store.read()


class TestStoreTaskGateway:
    @pytest.mark.asyncio
    async def test_round_trip(self, task_store):
        gateway = StoreTaskGateway(task_store)
        tasks = sample_tasks()

        assert await gateway.save_all(tasks)
        loaded = await gateway.load_all()

        assert [(t.id, t.type, t.due) for t in loaded] == [(t.id, t.type, t.due) for t in tasks]

        first_write = task_store.path.read_text(encoding="utf-8")
        assert await gateway.save_all(await gateway.load_all())
        assert task_store.path.read_text(encoding="utf-8") == first_write

    @pytest.mark.asyncio
    async def test_malformed_records_are_skipped(self, task_store):
        await task_store.write([1, "x", {"id": 5, "title": "Kept"}])
        loaded = await StoreTaskGateway(task_store).load_all()
        assert [task.id for task in loaded] == [5]

    @pytest.mark.asyncio
    async def test_old_shape_records_get_defaults(self, task_store):
        await task_store.write([{"id": 5, "title": "Old", "due": "2024-12-01"}])
        task = (await StoreTaskGateway(task_store).load_all())[0]
        assert task.desc == ""
        assert task.status.value == "late"

    @pytest.mark.asyncio
    async def test_unreadable_store_raises(self, task_store):
        task_store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            await StoreTaskGateway(task_store).load_all()

    @pytest.mark.asyncio
    async def test_unwritable_store_returns_false(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonBlobStore(blocker / "tasks.json", "tasks")
        assert await StoreTaskGateway(store).save_all(sample_tasks()) is False


class TestHttpTaskGateway:
    @pytest.mark.asyncio
    async def test_round_trip_through_blob_endpoints(self, task_store):
        app.dependency_overrides[get_task_store] = lambda: task_store
        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                gateway = HttpTaskGateway("http://test/", client=client)
                tasks = sample_tasks()

                assert await gateway.save_all(tasks)
                loaded = await gateway.load_all()
        finally:
            app.dependency_overrides.clear()

        assert [(t.id, t.type, t.due) for t in loaded] == [(t.id, t.type, t.due) for t in tasks]
        assert len(json.loads(task_store.path.read_text(encoding="utf-8"))) == len(tasks)

    @pytest.mark.asyncio
    async def test_server_errors(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "boom"}))
        async with AsyncClient(transport=transport) as client:
            gateway = HttpTaskGateway("http://store", client=client)

            with pytest.raises(PersistenceError):
                await gateway.load_all()
            assert await gateway.save_all(sample_tasks()) is False

    @pytest.mark.asyncio
    async def test_non_list_response(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"tasks": []}))
        async with AsyncClient(transport=transport) as client:
            with pytest.raises(PersistenceError):
                await HttpTaskGateway("http://store", client=client).load_all()

    @pytest.mark.asyncio
    async def test_load_defeats_caches(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        async with AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await HttpTaskGateway("http://store", client=client).load_all()

        assert seen[0].url.path == "/tasks"
        assert "timestamp" in seen[0].url.params
        assert seen[0].headers["Cache-Control"] == "no-cache"

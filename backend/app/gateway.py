"""
Task persistence gateways.

The save pipeline only ever reads the full task list and writes it back:

    tasks = await gateway.load_all()
    ok = await gateway.save_all(tasks)

`StoreTaskGateway` talks to the local JSON file, `HttpTaskGateway` to a
blob store server over HTTP (GET/POST /tasks).
"""

import time
from typing import Any, Iterable, Protocol

import httpx

from app.exceptions import DaybookException, PersistenceError
from app.logging_config import get_logger
from app.models.task import Task
from app.storage import JsonBlobStore

logger = get_logger(__name__)


class TaskGateway(Protocol):
    async def load_all(self) -> list[Task]:
        ...

    async def save_all(self, tasks: list[Task]) -> bool:
        ...


def tasks_from_records(records: Iterable[Any]) -> list[Task]:
    """
    Rebuild tasks from stored records.

    Construction recomputes every status against today. Records that are not
    JSON objects are skipped.
    """
    tasks = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"Skipping malformed task record: {record!r}")
            continue
        tasks.append(Task.from_record(record))
    return tasks


def tasks_to_records(tasks: Iterable[Task]) -> list[dict[str, Any]]:
    return [task.to_record() for task in tasks]


class StoreTaskGateway:
    """Gateway over the in-process JSON file store."""

    def __init__(self, store: JsonBlobStore):
        self.store = store

    async def load_all(self) -> list[Task]:
        try:
            records = await self.store.read()
        except DaybookException as e:
            raise PersistenceError(f"Could not load tasks: {e.message}") from e
        return tasks_from_records(records)

    async def save_all(self, tasks: list[Task]) -> bool:
        try:
            await self.store.write(tasks_to_records(tasks))
        except DaybookException as e:
            logger.error(f"Saving tasks failed: {e.message}")
            return False
        logger.info(f"Saved {len(tasks)} tasks")
        return True


class HttpTaskGateway:
    """
    Gateway over a remote blob store.

    A client can be passed in (tests hand one bound to the ASGI app);
    otherwise one is created per call with the configured timeout.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}/tasks"
        if self.client is not None:
            return await self.client.request(method, url, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method, url, **kwargs)

    async def load_all(self) -> list[Task]:
        try:
            # Timestamp and headers keep intermediaries from serving a stale list
            response = await self._request(
                "GET",
                params={"timestamp": int(time.time() * 1000)},
                headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
            )
            response.raise_for_status()
            records = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Loading tasks from {self.base_url} failed: {e}")
            raise PersistenceError("Could not load tasks from the remote store") from e

        if not isinstance(records, list):
            raise PersistenceError("Remote store did not return a list of tasks")
        return tasks_from_records(records)

    async def save_all(self, tasks: list[Task]) -> bool:
        try:
            response = await self._request("POST", json=tasks_to_records(tasks))
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Saving tasks to {self.base_url} failed: {e}")
            return False
        logger.info(f"Saved {len(tasks)} tasks to {self.base_url}")
        return True

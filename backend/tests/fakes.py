"""
In-memory stand-ins used across the test suite.
"""

from app.exceptions import PersistenceError
from app.gateway import tasks_from_records, tasks_to_records
from app.models.task import Task


class InMemoryGateway:
    """Gateway keeping stored records in a list; can be told to fail."""

    def __init__(self, tasks: list[Task] | None = None):
        self.records = tasks_to_records(tasks or [])
        self.saves = 0
        self.fail_loads = False
        self.fail_saves = False

    async def load_all(self) -> list[Task]:
        if self.fail_loads:
            raise PersistenceError("Could not load tasks")
        return tasks_from_records(self.records)

    async def save_all(self, tasks: list[Task]) -> bool:
        if self.fail_saves:
            return False
        self.records = tasks_to_records(tasks)
        self.saves += 1
        return True

    @property
    def tasks(self) -> list[Task]:
        return tasks_from_records(self.records)

    def get(self, task_id: int) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

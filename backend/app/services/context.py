"""
Explicit context for task operations: where the list lives and who hears
about changes.
"""

from dataclasses import dataclass

from app.gateway import TaskGateway
from app.logging_config import get_logger
from app.models.task import Task
from app.notifier import ListChangeNotifier

logger = get_logger(__name__)


@dataclass
class TaskContext:
    gateway: TaskGateway
    notifier: ListChangeNotifier

    async def load(self) -> list[Task]:
        return await self.gateway.load_all()

    async def commit(self, tasks: list[Task]) -> bool:
        """Persist the whole list; fire the change signal only if it stuck."""
        success = await self.gateway.save_all(tasks)
        if success:
            await self.notifier.notify_list_changed()
        else:
            logger.warning(f"Saving {len(tasks)} tasks failed; list change not signalled")
        return success

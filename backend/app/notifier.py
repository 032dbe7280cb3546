"""
List-change signal.

Every successful commit of the task list calls `notify_list_changed()`.
Listeners (in-process subscribers) are awaited in turn; rendering clients
that live outside the process poll the revision counter instead.
"""

import inspect
from functools import lru_cache
from typing import Any, Callable

from app.logging_config import get_logger

logger = get_logger(__name__)

Listener = Callable[[int], Any]


class ListChangeNotifier:
    def __init__(self) -> None:
        self.revision = 0
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def notify_list_changed(self) -> int:
        """Bump the revision and tell every listener. Returns the new revision."""
        self.revision += 1
        logger.debug(f"Task list changed, revision={self.revision}")

        for listener in list(self._listeners):
            try:
                outcome = listener(self.revision)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                # The list is already saved; a broken listener must not undo that
                logger.exception(f"List change listener {listener!r} failed")

        return self.revision


@lru_cache
def get_notifier() -> ListChangeNotifier:
    """Process-wide notifier."""
    return ListChangeNotifier()

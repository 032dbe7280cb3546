"""
JSON array file store.

Each store is one file holding a JSON array. Reads and writes run in the
default executor so the event loop never blocks on disk; writes go to a
temporary file that replaces the target, so a crash mid-write never leaves
a truncated file behind.
"""

import asyncio
import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from app.config import get_settings
from app.exceptions import InvalidPayloadError, StoreError
from app.logging_config import get_logger

logger = get_logger(__name__)


class JsonBlobStore:
    """Read-all / write-all store for one JSON array file."""

    def __init__(self, path: Path, entity_name: str):
        self.path = Path(path)
        self.entity_name = entity_name
        self._lock = asyncio.Lock()

    def ensure_exists(self) -> None:
        """Create the data directory and an empty array file if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]", encoding="utf-8")
            logger.info(f"Created {self.entity_name} store at {self.path}")

    def _read_sync(self) -> list[Any]:
        self.ensure_exists()
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not contain a JSON array")
        return data

    def _write_sync(self, records: list[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        temp_path.replace(self.path)

    async def read(self) -> list[Any]:
        """Every record in the file, as parsed JSON."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read_sync)
        except (OSError, ValueError) as e:
            logger.error(f"Reading {self.entity_name} from {self.path} failed: {e}")
            raise StoreError(f"Could not read {self.entity_name}") from e

    async def write(self, records: Any) -> None:
        """Replace the whole file with `records`, which must be a list."""
        if not isinstance(records, list):
            raise InvalidPayloadError(self.entity_name)

        loop = asyncio.get_running_loop()
        async with self._lock:
            try:
                await loop.run_in_executor(None, self._write_sync, records)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Writing {self.entity_name} to {self.path} failed: {e}")
                raise StoreError(f"Could not write {self.entity_name}") from e

        logger.debug(f"Wrote {len(records)} {self.entity_name} to {self.path}")


@lru_cache
def get_task_store() -> JsonBlobStore:
    return JsonBlobStore(get_settings().tasks_path, "tasks")


@lru_cache
def get_diary_store() -> JsonBlobStore:
    return JsonBlobStore(get_settings().diary_path, "diary entries")

"""
Blob store routes: whole-array read and write for tasks and diary entries.

    GET  /tasks            -> the stored JSON array
    POST /tasks            -> replace it (body must be an array)
    GET  /diary-entries    -> same for diary entries
    POST /diary-entries
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response

from app.logging_config import get_logger
from app.storage import JsonBlobStore, get_diary_store, get_task_store

logger = get_logger(__name__)

router = APIRouter()

NO_STORE = "no-store, no-cache, must-revalidate, private"


@router.get("/tasks")
async def read_tasks(
    response: Response,
    store: JsonBlobStore = Depends(get_task_store),
) -> list[Any]:
    """Raw task records. The file is created as [] on first access."""
    response.headers["Cache-Control"] = NO_STORE
    return await store.read()


@router.post("/tasks")
async def write_tasks(
    payload: Any = Body(...),
    store: JsonBlobStore = Depends(get_task_store),
) -> dict:
    await store.write(payload)
    logger.info(f"Stored {len(payload)} task records")
    return {"success": True}


@router.get("/diary-entries")
async def read_diary_entries(
    response: Response,
    store: JsonBlobStore = Depends(get_diary_store),
) -> list[Any]:
    response.headers["Cache-Control"] = NO_STORE
    return await store.read()


@router.post("/diary-entries")
async def write_diary_entries(
    payload: Any = Body(...),
    store: JsonBlobStore = Depends(get_diary_store),
) -> dict:
    await store.write(payload)
    logger.info(f"Stored {len(payload)} diary records")
    return {"success": True}

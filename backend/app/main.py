"""
Daybook - personal task and diary tracker with recurring task families.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.exceptions import register_exception_handlers
from app.logging_config import setup_logging, get_logger
from app.routes import diary, store, tasks
from app.storage import get_diary_store, get_task_store

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Daybook API...")
    get_task_store().ensure_exists()
    get_diary_store().ensure_exists()
    logger.info(f"Data directory: {settings.data_dir.resolve()}")
    if settings.store_url:
        logger.info(f"Task pipeline uses remote store at {settings.store_url}")
    yield
    logger.info("Shutting down Daybook API...")


app = FastAPI(
    title=settings.app_name,
    description="Personal task and diary tracker with recurring task families",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(store.router, tags=["Store"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(diary.router, prefix="/api/diary", tags=["Diary"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}

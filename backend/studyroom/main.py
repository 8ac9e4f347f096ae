# backend/studyroom/main.py
"""
Study room booking API.

The application lifespan owns two pieces of process state: the room seed,
applied at startup, and the weekly reset scheduler task.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from studyroom import __version__
from studyroom.core.config import is_running_tests, settings
from studyroom.database import get_db_session, init_db
from studyroom.errors import register_error_handlers
from studyroom.routes import prometheus
from studyroom.routes.v1 import api_v1
from studyroom.services.room_service import RoomService
from studyroom.services.weekly_reset import WeeklyResetScheduler

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info("Study room API starting up...")
    logger.info(f"Environment: {settings.environment} (timezone={settings.timezone})")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    init_db()
    try:
        with get_db_session() as db:
            RoomService(db).seed_rooms()
    except Exception as e:
        # Listing re-seeds lazily, so a failed startup seed is not fatal
        logger.error(f"Room seeding failed at startup: {e}")

    scheduler: Optional[WeeklyResetScheduler] = None
    if settings.weekly_reset_enabled and not settings.is_testing:
        scheduler = WeeklyResetScheduler()
        scheduler.start()
    app.state.weekly_reset_scheduler = scheduler

    yield

    logger.info("Study room API shutting down...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title="Study Room Booking API",
    description="Hourly reservations for shared study rooms",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.include_router(api_v1)
app.include_router(prometheus.router)


@app.get("/")
def root() -> dict:
    return {"message": "Study Room Booking API", "version": __version__, "docs": "/docs"}

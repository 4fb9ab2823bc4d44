import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import backend.models as _models  # noqa: F401 — registers tables with SQLModel metadata
from backend.config import settings
from backend.database import create_db_and_tables
from backend.log import setup_logging
from backend.routers import analytics, calculator, exercises, sessions, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_format, settings.log_level)
    create_db_and_tables()
    logger.info("gymprogress started (database: %s)", settings.database_url)
    yield


app = FastAPI(title="gymprogress", lifespan=lifespan)

app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(exercises.router, prefix="/api/users/{user_id}/exercises", tags=["exercises"])
app.include_router(sessions.router, prefix="/api/users/{user_id}/sessions", tags=["sessions"])
app.include_router(analytics.router, prefix="/api/users/{user_id}/analytics", tags=["analytics"])
app.include_router(calculator.router, prefix="/api/calculator", tags=["calculator"])

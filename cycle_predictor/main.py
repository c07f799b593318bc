"""FastAPI application entry point."""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from loguru import logger

from cycle_predictor.config import settings

# Configure loguru
logger.remove()
logger.add(sys.stderr, level="DEBUG" if settings.DEBUG else "INFO")
logger.add("logs/app.log", rotation="10 MB", retention="7 days", level="INFO")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Starting {} ...", settings.APP_NAME)

    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    Path("logs").mkdir(exist_ok=True)

    from cycle_predictor.db.engine import async_session_factory, create_tables, engine
    await create_tables(engine)

    if settings.SCHEDULER_ENABLED:
        from cycle_predictor.scraper.scheduler import start_scheduler
        from cycle_predictor.services.runtime import build_runtime
        start_scheduler(build_runtime(settings, async_session_factory))

    yield

    # Shutdown
    if settings.SCHEDULER_ENABLED:
        from cycle_predictor.scraper.scheduler import stop_scheduler
        await stop_scheduler()

    await engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Cycle-synchronized High/Low prediction scheduler",
    lifespan=lifespan,
)

# Include API routers
from cycle_predictor.api.v1.router import api_router  # noqa: E402
app.include_router(api_router, prefix="/api/v1")

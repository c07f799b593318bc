"""Scheduler status API endpoints."""

from fastapi import APIRouter

from cycle_predictor.scraper.scheduler import get_scheduler_status

router = APIRouter()


@router.get("/status")
async def scheduler_status():
    """Scheduled jobs and the current cycle state."""
    return get_scheduler_status()

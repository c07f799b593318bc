"""Aggregate API v1 router."""

from fastapi import APIRouter

from cycle_predictor.api.v1.endpoints import draws, predictions, scheduler

api_router = APIRouter()

api_router.include_router(scheduler.router, prefix="/scheduler", tags=["scheduler"])
api_router.include_router(predictions.router, prefix="/predictions", tags=["predictions"])
api_router.include_router(draws.router, prefix="/draws", tags=["draws"])

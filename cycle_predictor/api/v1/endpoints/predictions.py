"""Prediction and verification API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query

from cycle_predictor.api.deps import get_settings, get_verification_store
from cycle_predictor.config import Settings
from cycle_predictor.ledger.pending_store import PendingStore
from cycle_predictor.ledger.verification_store import VerificationStore
from cycle_predictor.schemas.prediction import (
    AccuracySummary,
    PendingPrediction,
    VerificationRecord,
)
from cycle_predictor.services.prediction_service import summarize_accuracy

router = APIRouter()


@router.get("/pending", response_model=PendingPrediction)
async def get_pending(settings: Settings = Depends(get_settings)):
    """The latest recorded prediction (resolved or not), with per-slot confidence."""
    pending = PendingStore(settings.PENDING_PREDICTION_FILE).load_pending()
    if pending is None:
        raise HTTPException(status_code=404, detail="No prediction recorded yet")
    return pending


@router.get("/verifications", response_model=list[VerificationRecord])
async def list_verifications(
    limit: int = Query(100, ge=1, le=1000),
    store: VerificationStore = Depends(get_verification_store),
):
    """Most recent per-slot verification records."""
    return await store.list_recent(limit=limit)


@router.get("/accuracy", response_model=AccuracySummary)
async def accuracy(store: VerificationStore = Depends(get_verification_store)):
    """Overall and per-slot hit rate of verified predictions."""
    return summarize_accuracy(await store.list_all())

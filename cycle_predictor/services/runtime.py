"""Wires collaborators, pipeline, ledger and runner together."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cycle_predictor.config import Settings
from cycle_predictor.cycle.runner import CycleRunner
from cycle_predictor.ledger.audit_log import AuditLog
from cycle_predictor.ledger.pending_store import PendingStore
from cycle_predictor.ledger.verification_ledger import VerificationLedger
from cycle_predictor.ledger.verification_store import SqlVerificationStore
from cycle_predictor.ml.inference.model_registry import build_ensemble
from cycle_predictor.ml.inference.predictor import ScoringPipeline
from cycle_predictor.scraper.base import BaseCountdownSource, BaseDrawSource
from cycle_predictor.scraper.http_source import HttpCountdownSource, HttpDrawSource
from cycle_predictor.services.prediction_service import PredictionService


@dataclass
class Runtime:
    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    countdown_source: BaseCountdownSource
    draw_source: BaseDrawSource
    service: PredictionService
    runner: CycleRunner


def build_runtime(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    countdown_source: BaseCountdownSource | None = None,
    draw_source: BaseDrawSource | None = None,
) -> Runtime:
    countdown_source = countdown_source or HttpCountdownSource(settings)
    draw_source = draw_source or HttpDrawSource(settings)

    ledger = VerificationLedger(
        PendingStore(settings.PENDING_PREDICTION_FILE),
        SqlVerificationStore(session_factory),
        AuditLog(settings.VERIFICATION_LOG_FILE),
    )
    pipeline = ScoringPipeline(settings, build_ensemble(settings))
    service = PredictionService(settings, session_factory, pipeline, ledger)
    runner = CycleRunner(settings, countdown_source, service.run_prediction)

    return Runtime(
        settings=settings,
        session_factory=session_factory,
        countdown_source=countdown_source,
        draw_source=draw_source,
        service=service,
        runner=runner,
    )

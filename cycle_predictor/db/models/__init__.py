"""ORM models package."""

from cycle_predictor.db.models.draw import DrawRecord
from cycle_predictor.db.models.verification import VerificationRow
from cycle_predictor.db.models.ingest_log import IngestLog

__all__ = [
    "DrawRecord",
    "VerificationRow",
    "IngestLog",
]

"""Durable storage for the single pending prediction."""

import os
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from cycle_predictor.errors import PersistenceError
from cycle_predictor.schemas.prediction import PendingPrediction


class PendingStore:
    """JSON file holding at most one PendingPrediction.

    Writes go to a temp file in the same directory and are swapped in with
    os.replace, so a reader sees either the old entry or the new one.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def persist(self, pending: PendingPrediction) -> None:
        payload = pending.model_dump_json(indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"could not write {self.path}: {e}") from e

    def load_pending(self) -> PendingPrediction | None:
        if not self.path.exists():
            return None
        try:
            return PendingPrediction.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable pending prediction {}: {}", self.path, e)
            return None

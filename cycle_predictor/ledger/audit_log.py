"""Append-only, human-readable verification trail."""

import re
from datetime import datetime
from pathlib import Path

from cycle_predictor.errors import PersistenceError
from cycle_predictor.schemas.prediction import VerificationRecord

HEADER = "=== PREDICTION HISTORY ===\n\n"
_LINE_KEY = re.compile(r" - (?P<cycle>\d+) - Predicted: .*\| Slot: (?P<slot>\d+)$")


def format_timestamp(ts: datetime) -> str:
    return ts.strftime("[%H:%M:%S %d/%m/%Y]")


def format_record(record: VerificationRecord, predicted_at: datetime) -> str:
    verdict = "Correct" if record.is_correct else "Wrong"
    return (
        f"{format_timestamp(predicted_at)} - {record.cycle_id} - "
        f"Predicted: {record.display_digit} ({record.predicted.value}) | "
        f"Actual: {record.actual_digit} ({record.actual.value}) | "
        f"[{verdict}] | Slot: {record.slot}"
    )


class AuditLog:
    def __init__(self, path: Path):
        self.path = Path(path)

    def append_line(self, line: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not self.path.exists()
            with self.path.open("a", encoding="utf-8") as fh:
                if is_new:
                    fh.write(HEADER)
                fh.write(line.rstrip("\n") + "\n")
        except OSError as e:
            raise PersistenceError(f"could not append to {self.path}: {e}") from e

    def read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()
        return [ln for ln in lines if ln and ln != HEADER.strip()]

    def logged_slots(self, cycle_id: str) -> set[int]:
        """Slots that already have a line for ``cycle_id``."""
        slots = set()
        for line in self.read_lines():
            match = _LINE_KEY.search(line)
            if match and match["cycle"] == cycle_id:
                slots.add(int(match["slot"]))
        return slots

"""Verification ledger — one pending prediction, resolved against the real draw."""

from datetime import datetime

from loguru import logger

from cycle_predictor.ledger.audit_log import AuditLog, format_record
from cycle_predictor.ledger.pending_store import PendingStore
from cycle_predictor.ledger.verification_store import VerificationStore
from cycle_predictor.schemas.draw import DrawRecordSchema
from cycle_predictor.schemas.prediction import (
    Category,
    PendingPrediction,
    VerificationRecord,
    category_of,
)


class VerificationLedger:
    """Holds at most one unresolved prediction and verifies it exactly once."""

    def __init__(
        self,
        pending_store: PendingStore,
        verification_store: VerificationStore,
        audit_log: AuditLog,
        clock=datetime.now,
    ):
        self.pending_store = pending_store
        self.verification_store = verification_store
        self.audit_log = audit_log
        self.clock = clock

    def load_pending(self) -> PendingPrediction | None:
        return self.pending_store.load_pending()

    def record_prediction(
        self,
        target_cycle_id: str,
        categories: list[Category],
        display_numbers: list[int],
        probabilities: list[float],
    ) -> PendingPrediction:
        """Replace the pending entry with a new forecast for ``target_cycle_id``.

        An older entry that was never resolved is dropped.

        Raises:
            PersistenceError: the entry could not be written
        """
        if not len(categories) == len(display_numbers) == len(probabilities):
            raise ValueError("categories, display numbers and probabilities must align")

        previous = self.pending_store.load_pending()
        if previous and not previous.is_resolved and previous.cycle_id != target_cycle_id:
            logger.warning(
                "Abandoning unresolved prediction for cycle {} (replaced by {})",
                previous.cycle_id, target_cycle_id,
            )

        pending = PendingPrediction(
            cycle_id=str(target_cycle_id),
            created_at=self.clock(),
            predicted_categories=list(categories),
            display_numbers=list(display_numbers),
            probabilities=list(probabilities),
        )
        self.pending_store.persist(pending)
        logger.info("Recorded prediction for cycle {}", pending.cycle_id)
        return pending

    def build_records(
        self, pending: PendingPrediction, draw: DrawRecordSchema, verified_at: datetime
    ) -> list[VerificationRecord]:
        records = []
        for slot, predicted in enumerate(pending.predicted_categories):
            digit = draw.digit(slot)
            actual = category_of(digit)
            records.append(VerificationRecord(
                cycle_id=pending.cycle_id,
                slot=slot,
                predicted=predicted,
                actual=actual,
                actual_digit=digit,
                display_digit=pending.display_numbers[slot],
                probability=pending.probabilities[slot],
                is_correct=predicted == actual,
                verified_at=verified_at,
            ))
        return records

    async def resolve(
        self, candidate_records: list[DrawRecordSchema]
    ) -> list[VerificationRecord]:
        """Verify the pending prediction if its draw is among ``candidate_records``.

        Returns the appended records; empty when there is nothing to verify yet.

        Raises:
            PersistenceError: the records or audit lines could not be stored;
                the entry stays pending and the next call fills in what is missing
        """
        pending = self.pending_store.load_pending()
        if pending is None or pending.is_resolved:
            return []

        draw = next((r for r in candidate_records if r.draw_id == pending.cycle_id), None)
        if draw is None:
            logger.debug("Draw {} not available yet", pending.cycle_id)
            return []
        if len(draw.numbers) < len(pending.predicted_categories):
            logger.warning(
                "Draw {} has {} slots, prediction has {}; not verifying",
                draw.draw_id, len(draw.numbers), len(pending.predicted_categories),
            )
            return []

        verified_at = self.clock()
        records = self.build_records(pending, draw, verified_at)
        inserted = await self.verification_store.append(records)

        # Lines may be missing after an earlier audit failure, even when the
        # store already holds every record
        logged = self.audit_log.logged_slots(pending.cycle_id)
        for record in records:
            if record.slot not in logged:
                self.audit_log.append_line(format_record(record, pending.created_at))

        if inserted:
            correct = sum(r.is_correct for r in records)
            logger.info(
                "Verified cycle {}: {}/{} correct (actual {})",
                pending.cycle_id, correct, len(records), ",".join(draw.numbers),
            )
        else:
            logger.warning("Cycle {} was already verified; marking resolved", pending.cycle_id)
            records = []

        self.pending_store.persist(pending.model_copy(update={"resolved_at": verified_at}))
        return records

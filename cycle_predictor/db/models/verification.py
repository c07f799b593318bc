"""Verification record ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cycle_predictor.db.base import Base


class VerificationRow(Base):
    """Per-slot outcome of a resolved prediction. Append-only."""

    __tablename__ = "verification_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cycle_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)
    predicted: Mapped[str] = mapped_column(String(8), nullable=False)  # High / Low
    actual: Mapped[str] = mapped_column(String(8), nullable=False)
    actual_digit: Mapped[int] = mapped_column(Integer, nullable=False)
    display_digit: Mapped[int] = mapped_column(Integer, nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    verified_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("cycle_id", "slot", name="uq_verification_cycle_slot"),
    )

    def __repr__(self) -> str:
        return f"<VerificationRow cycle={self.cycle_id} slot={self.slot} ok={self.is_correct}>"

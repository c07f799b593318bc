"""Draw record ORM model."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from cycle_predictor.db.base import Base


class DrawRecord(Base):
    """One completed cycle's outcome. Inserted once, never updated."""

    __tablename__ = "draw_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    draw_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    # Numeric copy of draw_id so ordering does not depend on string length
    draw_number: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # Digit strings, one per slot, in slot order
    numbers: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    draw_time: Mapped[str] = mapped_column(String(40), nullable=False)

    ingested_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<DrawRecord id={self.draw_id} numbers={self.numbers}>"

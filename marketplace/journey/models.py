from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from marketplace.db.base import Base


class JourneyRecord(Base):
    """
    Durable proof that a user reached a gate.

    Append-only: one row per (user, gate), written when a paid order contains
    an artwork from that gate. Re-purchasing a gate never adds a second row.
    """

    __tablename__ = "journey_records"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    gate_number = Column(Integer, nullable=False)

    unlocked_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "gate_number", name="uq_journey_user_gate"),
    )

    def to_dict(self) -> dict:
        return {
            "gate_number": self.gate_number,
            "unlocked_at": str(self.unlocked_at) if self.unlocked_at else None,
        }

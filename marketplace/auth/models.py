from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from marketplace.db.base import Base
from marketplace.core.config import INITIAL_GATE_UNLOCKED, DEFAULT_SPIRITUAL_LEVEL


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)

    password_hash = Column(String(255), nullable=False)

    # Cosmetic label; not derived from progression anywhere.
    spiritual_level = Column(String(50), default=DEFAULT_SPIRITUAL_LEVEL, nullable=False)
    contemplation_streak = Column(Integer, default=0, nullable=False)

    # Progression state, only ever written by account creation and checkout.
    total_insights = Column(Integer, default=0, nullable=False)
    highest_gate_unlocked = Column(Integer, default=INITIAL_GATE_UNLOCKED, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "name": self.name,
            "spiritual_level": self.spiritual_level,
            "contemplation_streak": self.contemplation_streak,
            "total_insights": self.total_insights,
            "highest_gate_unlocked": self.highest_gate_unlocked,
            "created_at": str(self.created_at) if self.created_at else None,
        }

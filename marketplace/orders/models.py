from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from marketplace.db.base import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # pending | completed
    status = Column(String(50), default="pending", nullable=False)
    total_amount = Column(Integer, nullable=False)

    payment_method = Column(String(50), default="stripe", nullable=False)
    payment_status = Column(String(50), default="pending", nullable=False)
    # Provider reference (PaymentIntent id); one order per payment
    payment_id = Column(String(255), unique=True, index=True, nullable=True)

    customer_email = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)

    # Snapshot of what was paid for: [{id, title, price, gate_number}, ...]
    items = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "total_amount": self.total_amount,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "payment_id": self.payment_id,
            "customer_email": self.customer_email,
            "customer_name": self.customer_name,
            "items": self.items or [],
            "created_at": str(self.created_at) if self.created_at else None,
            "completed_at": str(self.completed_at) if self.completed_at else None,
        }

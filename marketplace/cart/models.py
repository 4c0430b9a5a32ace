from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from marketplace.db.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    artwork_id = Column(Integer, ForeignKey("artworks.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    artwork = relationship("Artwork")

    # An artwork sits in a cart at most once
    __table_args__ = (
        UniqueConstraint("user_id", "artwork_id", name="uq_cart_user_artwork"),
    )

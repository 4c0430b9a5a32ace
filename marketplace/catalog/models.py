from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON
from sqlalchemy.sql import func

from marketplace.db.base import Base


class Artwork(Base):
    """
    A purchasable digital artwork.

    gate_number places the artwork in the progression; unlock_requirement is the
    gate a buyer must have reached to purchase it (equal to gate_number for every
    seeded artwork). Artworks without a gate sit outside the progression and are
    always available.
    """

    __tablename__ = "artworks"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False)

    # Minor currency units (cents)
    price = Column(Integer, nullable=False)

    category = Column(String(100), nullable=False)

    # Gate name, e.g. "Subject & Predicate"
    gate = Column(String(100), nullable=True)
    gate_number = Column(Integer, nullable=True, index=True)
    unlock_requirement = Column(Integer, nullable=True)

    image = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    philosophical_context = Column(Text, nullable=True)

    tags = Column(JSON, default=list)
    emotions = Column(JSON, default=list)

    likes = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    downloads = Column(Integer, default=0, nullable=False)
    trending = Column(Boolean, default=False, nullable=False)
    rating = Column(Integer, default=50, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "price": self.price,
            "category": self.category,
            "gate": self.gate,
            "gate_number": self.gate_number,
            "unlock_requirement": self.unlock_requirement,
            "image": self.image,
            "description": self.description,
            "philosophical_context": self.philosophical_context,
            "tags": self.tags or [],
            "emotions": self.emotions or [],
            "likes": self.likes,
            "views": self.views,
            "downloads": self.downloads,
            "trending": self.trending,
            "rating": self.rating,
            "created_at": str(self.created_at) if self.created_at else None,
        }

"""
Catalog browsing.

Anonymous visitors see every artwork unlocked; signed-in users see their
own frontier.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from marketplace.auth.models import User
from marketplace.catalog.models import Artwork
from marketplace.catalog.seed import GATES
from marketplace.core.deps import get_optional_user
from marketplace.db.session import get_db
from marketplace.db.store import Store
from marketplace.journey.progression import ALL_GATES_UNLOCKED, annotate, is_unlocked

router = APIRouter(prefix="/api", tags=["catalog"])


def _frontier(user: Optional[User]) -> int:
    return user.highest_gate_unlocked if user else ALL_GATES_UNLOCKED


def _with_flag(artwork: Artwork, unlocked: bool) -> dict:
    data = artwork.to_dict()
    data["unlocked"] = unlocked
    return data


@router.get("/artworks")
def list_artworks(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    artworks = (
        db.query(Artwork)
        .order_by(
            Artwork.gate_number.asc(),
            Artwork.trending.desc(),
            Artwork.created_at.desc(),
        )
        .all()
    )
    return [_with_flag(a, unlocked) for a, unlocked in annotate(artworks, _frontier(user))]


@router.get("/artworks/{artwork_id}")
def get_artwork(
    artwork_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    artwork = db.query(Artwork).filter(Artwork.id == artwork_id).first()
    if not artwork:
        raise HTTPException(status_code=404, detail="Artwork not found")

    artwork.views = (artwork.views or 0) + 1
    db.commit()
    db.refresh(artwork)

    return _with_flag(artwork, is_unlocked(artwork.gate_number, _frontier(user)))


@router.get("/gates")
def list_gates(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Every gate with its artwork count and where the caller stands on it."""
    counts = dict(
        db.query(Artwork.gate_number, func.count(Artwork.id))
        .filter(Artwork.gate_number.isnot(None))
        .group_by(Artwork.gate_number)
        .all()
    )
    completed = set()
    if user:
        completed = {r.gate_number for r in Store(db).journey_for(user.id)}

    frontier = _frontier(user)
    return [
        {
            "gate_number": number,
            "name": name,
            "artworks": counts.get(number, 0),
            "unlocked": is_unlocked(number, frontier),
            "completed": number in completed,
        }
        for number, name in sorted(GATES.items())
    ]

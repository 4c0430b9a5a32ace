from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from marketplace.auth.models import User
from marketplace.cart.models import CartItem
from marketplace.catalog.models import Artwork
from marketplace.core.deps import get_current_user
from marketplace.db.session import get_db
from marketplace.journey.progression import is_unlocked

router = APIRouter(prefix="/api/cart", tags=["cart"])


class AddToCartRequest(BaseModel):
    artwork_id: int


def cart_rows(db: Session, user_id: int) -> list:
    return (
        db.query(CartItem)
        .join(Artwork, CartItem.artwork_id == Artwork.id)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        .all()
    )


@router.post("", status_code=201)
def add_to_cart(
    body: AddToCartRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    artwork = db.query(Artwork).filter(Artwork.id == body.artwork_id).first()
    if not artwork:
        raise HTTPException(status_code=404, detail="Artwork not found")

    if not is_unlocked(artwork.unlock_requirement, user.highest_gate_unlocked):
        raise HTTPException(status_code=403, detail="Gate locked")

    existing = db.query(CartItem).filter(
        CartItem.user_id == user.id,
        CartItem.artwork_id == artwork.id,
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Item already in cart")

    item = CartItem(user_id=user.id, artwork_id=artwork.id)
    db.add(item)
    db.commit()
    db.refresh(item)

    return {"id": item.id, "user_id": item.user_id, "artwork_id": item.artwork_id}


@router.get("")
def get_cart(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = []
    for row in cart_rows(db, user.id):
        data = row.artwork.to_dict()
        data["cart_id"] = row.id
        result.append(data)
    return result


@router.delete("/{cart_id}")
def remove_from_cart(
    cart_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    db.query(CartItem).filter(
        CartItem.id == cart_id,
        CartItem.user_id == user.id,
    ).delete(synchronize_session=False)
    db.commit()

    return {"message": "Item removed from cart"}

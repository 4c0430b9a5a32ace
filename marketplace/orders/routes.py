from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.auth.models import User
from marketplace.core.deps import get_current_user
from marketplace.db.session import get_db
from marketplace.orders.models import Order

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
def list_orders(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    orders = (
        db.query(Order)
        .filter(Order.user_id == user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [o.to_dict() for o in orders]

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from marketplace.auth.models import User
from marketplace.cart.routes import cart_rows
from marketplace.core.deps import get_current_user, get_store, get_payment_processor
from marketplace.db.store import Store
from marketplace.orders.checkout import complete_checkout, PaymentNotCompleted, PaymentOwnershipError
from marketplace.payments.processor import PaymentProviderError

router = APIRouter(prefix="/api/payment", tags=["payment"])


class ConfirmRequest(BaseModel):
    payment_intent_id: str


# ======================================================
# CREATE INTENT (prices come from the stored cart, not the client)
# ======================================================
@router.post("/create-intent")
def create_intent(
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
    processor=Depends(get_payment_processor),
):
    rows = cart_rows(store.db, user.id)
    if not rows:
        raise HTTPException(status_code=400, detail="No items provided")

    artwork_ids = [row.artwork_id for row in rows]
    total_amount = sum(row.artwork.price for row in rows)

    try:
        intent = processor.create_intent(total_amount, user.id, artwork_ids)
    except PaymentProviderError:
        raise HTTPException(status_code=502, detail="Payment processing failed")

    return {
        "client_secret": intent.client_secret,
        "payment_intent_id": intent.payment_intent_id,
        "amount": intent.amount,
    }


# ======================================================
# CONFIRM PAYMENT AND CREATE ORDER
# ======================================================
@router.post("/confirm")
def confirm_payment(
    body: ConfirmRequest,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
    processor=Depends(get_payment_processor),
):
    try:
        confirmation = processor.confirm(body.payment_intent_id)
    except PaymentProviderError:
        raise HTTPException(status_code=502, detail="Payment confirmation failed")

    try:
        result = complete_checkout(store, user, confirmation, payment_method=processor.name)
    except PaymentOwnershipError:
        raise HTTPException(status_code=403, detail="Payment belongs to another account")
    except PaymentNotCompleted:
        raise HTTPException(status_code=400, detail="Payment not completed")

    return {
        "order": result.order.to_dict(),
        "message": "Payment already processed" if result.already_processed else "Payment successful",
        "highest_gate_unlocked": result.highest_gate_unlocked,
        "unlocked_gates": list(result.unlocked_gates),
    }

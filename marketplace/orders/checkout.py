"""
Checkout completion.

Runs after the payment provider has been asked about a payment:
  - nothing is written unless the payment succeeded
  - the order snapshot is rebuilt from the artworks the intent names
  - progression update, journey records, removal of the paid artworks from
    the cart and the order row are committed together; any failure rolls
    all of them back
  - confirming the same payment twice returns the first order unchanged
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from marketplace.auth.models import User
from marketplace.db.store import Store
from marketplace.journey.progression import apply_purchase, purchased_gates
from marketplace.orders.models import Order
from marketplace.payments.processor import PaymentConfirmation
from marketplace.core.log import get_logger

logger = get_logger(__name__, "CHECKOUT")


class PaymentNotCompleted(Exception):
    pass


class PaymentOwnershipError(Exception):
    """The payment was created for a different user, or for no user at all."""


def item_snapshot(artwork) -> dict:
    """What an order remembers about a purchased artwork."""
    return {
        "id": artwork.id,
        "title": artwork.title,
        "price": artwork.price,
        "gate_number": artwork.gate_number,
    }


@dataclass
class CheckoutResult:
    order: Order
    highest_gate_unlocked: int
    unlocked_gates: tuple
    already_processed: bool = False


def complete_checkout(
    store: Store,
    user: User,
    confirmation: PaymentConfirmation,
    payment_method: str = "stripe",
) -> CheckoutResult:
    if confirmation.user_id is None or confirmation.user_id != user.id:
        logger.warning(
            f"user={user.id} tried to confirm payment={confirmation.payment_intent_id} "
            f"owned by user={confirmation.user_id}"
        )
        raise PaymentOwnershipError(confirmation.payment_intent_id)

    if not confirmation.succeeded:
        logger.info(
            f"payment={confirmation.payment_intent_id} not completed "
            f"(status={confirmation.status or 'unknown'})"
        )
        raise PaymentNotCompleted(confirmation.payment_intent_id)

    existing: Optional[Order] = store.find_order_by_payment(confirmation.payment_intent_id)
    if existing is not None:
        logger.info(f"payment={confirmation.payment_intent_id} already has order={existing.id}")
        return CheckoutResult(
            order=existing,
            highest_gate_unlocked=user.highest_gate_unlocked,
            unlocked_gates=(),
            already_processed=True,
        )

    try:
        with store.transaction():
            locked = store.get_user(user.id, for_update=True)
            items = [item_snapshot(a) for a in store.artworks_by_ids(confirmation.artwork_ids)]
            outcome = apply_purchase(locked.highest_gate_unlocked, purchased_gates(items))

            if outcome.changed:
                store.update_user_progression(user.id, outcome.highest_gate_unlocked, outcome.insight_delta)
                for gate in outcome.journey_gates:
                    store.insert_journey_record_if_absent(user.id, gate)

            store.clear_cart(user.id, confirmation.artwork_ids)
            order = store.insert_order(
                user,
                total_amount=confirmation.amount,
                payment_id=confirmation.payment_intent_id,
                items=items,
                payment_method=payment_method,
            )
    except IntegrityError:
        # A concurrent confirmation of the same payment committed first.
        existing = store.find_order_by_payment(confirmation.payment_intent_id)
        if existing is None:
            raise
        store.db.refresh(user)
        return CheckoutResult(
            order=existing,
            highest_gate_unlocked=user.highest_gate_unlocked,
            unlocked_gates=(),
            already_processed=True,
        )

    store.db.refresh(user)
    logger.info(
        f"order={order.id} user={user.id} amount={order.total_amount} "
        f"gates={list(outcome.journey_gates)} frontier={user.highest_gate_unlocked}"
    )
    return CheckoutResult(
        order=order,
        highest_gate_unlocked=user.highest_gate_unlocked,
        unlocked_gates=outcome.journey_gates,
    )

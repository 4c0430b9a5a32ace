"""
Backfill journey records from completed orders.

Purpose:
- Orders paid before journey records existed carry gate numbers in their
  item snapshots; replay them through the progression rules
- Insert any missing (user, gate) journey records
- Raise a user's frontier if it lags behind what they have paid for
- SAFE to run multiple times (won't duplicate entries, never lowers a frontier)

IMPORTANT:
- total_insights is NOT touched; insights are only earned at checkout
- Run manually from the project root:  python -m scripts.backfill_journeys
"""
from sqlalchemy.orm import Session

from marketplace.db.session import SessionLocal
from marketplace.db.store import Store
from marketplace.auth.models import User
from marketplace.orders.models import Order
from marketplace.journey.progression import apply_purchase, purchased_gates


def backfill_user(store: Store, user: User) -> int:
    """Replay one user's completed orders. Returns how many gates were paid for."""
    orders = (
        store.db.query(Order)
        .filter(Order.user_id == user.id, Order.status == "completed")
        .all()
    )
    gates = []
    for order in orders:
        gates.extend(purchased_gates(order.items or []))

    outcome = apply_purchase(user.highest_gate_unlocked, gates)
    if not outcome.changed:
        return 0

    if outcome.highest_gate_unlocked > user.highest_gate_unlocked:
        store.update_user_progression(user.id, outcome.highest_gate_unlocked, 0)
    for gate in outcome.journey_gates:
        store.insert_journey_record_if_absent(user.id, gate)
    return len(outcome.journey_gates)


def backfill_journeys():
    db: Session = SessionLocal()
    store = Store(db)

    try:
        users = db.query(User).all()
        touched = 0
        gates_seen = 0

        with store.transaction():
            for user in users:
                count = backfill_user(store, user)
                if count:
                    touched += 1
                    gates_seen += count

        print("✅ Journey backfill complete")
        print(f"   Users with paid gates: {touched}")
        print(f"   Gates replayed: {gates_seen}")

    except Exception as e:
        print("❌ Error while backfilling journeys")
        print(str(e))
        raise
    finally:
        db.close()


if __name__ == "__main__":
    backfill_journeys()

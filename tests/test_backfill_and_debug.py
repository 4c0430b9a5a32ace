from fastapi import FastAPI
from fastapi.testclient import TestClient

import marketplace.main  # noqa: F401  (creates tables on the app database)
from marketplace.db.session import get_db
from marketplace.db.store import Store
from marketplace.journey.models import JourneyRecord
from marketplace.orders.models import Order
from marketplace.web.debug_routes import router as debug_router
from scripts.backfill_journeys import backfill_user


def _paid_order(db, user, gates, ref):
    db.add(Order(
        user_id=user.id,
        status="completed",
        total_amount=1000 * len(gates),
        payment_status="succeeded",
        payment_id=ref,
        customer_email=user.email,
        customer_name=user.username,
        items=[{"id": i, "title": "t", "price": 1000, "gate_number": g} for i, g in enumerate(gates)],
    ))
    db.commit()


def test_backfill_replays_paid_orders(db, make_user):
    user = make_user()
    _paid_order(db, user, [1, 2], "pi_old_1")
    _paid_order(db, user, [2, None], "pi_old_2")
    store = Store(db)

    with store.transaction():
        assert backfill_user(store, user) == 2
    db.refresh(user)

    assert user.highest_gate_unlocked == 3
    assert user.total_insights == 0
    gates = sorted(r.gate_number for r in db.query(JourneyRecord).filter_by(user_id=user.id))
    assert gates == [1, 2]

    # second run changes nothing
    with store.transaction():
        backfill_user(store, user)
    assert db.query(JourneyRecord).filter_by(user_id=user.id).count() == 2


def test_backfill_skips_users_without_orders(db, make_user):
    user = make_user(highest_gate_unlocked=4)
    store = Store(db)

    with store.transaction():
        assert backfill_user(store, user) == 0

    db.refresh(user)
    assert user.highest_gate_unlocked == 4


def test_debug_users_lists_progression(db, make_user):
    user = make_user(highest_gate_unlocked=3)
    store = Store(db)
    with store.transaction():
        store.insert_journey_record_if_absent(user.id, 2)
        store.insert_journey_record_if_absent(user.id, 1)

    debug_app = FastAPI()
    debug_app.include_router(debug_router)
    debug_app.dependency_overrides[get_db] = lambda: db
    client = TestClient(debug_app)

    resp = client.get("/debug/users")

    assert resp.status_code == 200
    [row] = resp.json()
    assert row["id"] == user.id
    assert row["highest_gate_unlocked"] == 3
    assert row["journey_gates"] == [1, 2]
    assert "email" not in row
    assert client.get("/debug/diagnostics/db").status_code == 404

import pytest

from marketplace.auth.models import User
from marketplace.cart.models import CartItem
from marketplace.db.store import Store
from marketplace.journey.models import JourneyRecord
from marketplace.orders.checkout import complete_checkout, PaymentNotCompleted, PaymentOwnershipError
from marketplace.orders.models import Order
from marketplace.payments.processor import PaymentConfirmation


def _confirmation(user, artworks, ref="pi_test_1", succeeded=True):
    return PaymentConfirmation(
        payment_intent_id=ref,
        succeeded=succeeded,
        amount=sum(a.price for a in artworks),
        user_id=user.id if user is not None else None,
        artwork_ids=[a.id for a in artworks],
        status="succeeded" if succeeded else "requires_payment_method",
    )


def _journey_gates(db, user_id):
    return sorted(
        r.gate_number for r in db.query(JourneyRecord).filter_by(user_id=user_id).all()
    )


def test_successful_checkout_advances_and_records(db, make_user, make_artwork):
    user = make_user()
    art = make_artwork(1, price=56700)
    db.add(CartItem(user_id=user.id, artwork_id=art.id))
    db.commit()

    result = complete_checkout(Store(db), user, _confirmation(user, [art]))

    assert result.highest_gate_unlocked == 2
    assert result.unlocked_gates == (1,)
    assert not result.already_processed
    assert user.highest_gate_unlocked == 2
    assert user.total_insights == 1
    assert _journey_gates(db, user.id) == [1]
    assert db.query(CartItem).filter_by(user_id=user.id).count() == 0

    order = db.query(Order).filter_by(user_id=user.id).one()
    assert order.payment_id == "pi_test_1"
    assert order.total_amount == 56700
    assert order.status == "completed"
    assert order.customer_email == user.email


def test_unpaid_checkout_writes_nothing(db, make_user, make_artwork):
    user = make_user()
    art = make_artwork(1)
    db.add(CartItem(user_id=user.id, artwork_id=art.id))
    db.commit()

    with pytest.raises(PaymentNotCompleted):
        complete_checkout(Store(db), user, _confirmation(user, [art], succeeded=False))

    db.refresh(user)
    assert user.highest_gate_unlocked == 1
    assert _journey_gates(db, user.id) == []
    assert db.query(CartItem).filter_by(user_id=user.id).count() == 1
    assert db.query(Order).count() == 0


def test_someone_elses_payment_is_rejected(db, make_user, make_artwork):
    owner = make_user()
    intruder = make_user()
    art = make_artwork(1)

    with pytest.raises(PaymentOwnershipError):
        complete_checkout(Store(db), intruder, _confirmation(owner, [art]))

    assert db.query(Order).count() == 0


def test_payment_without_an_owner_is_rejected(db, make_user, make_artwork):
    user = make_user()
    art = make_artwork(1)

    with pytest.raises(PaymentOwnershipError):
        complete_checkout(Store(db), user, _confirmation(None, [art]))

    db.refresh(user)
    assert user.highest_gate_unlocked == 1
    assert db.query(Order).count() == 0


def test_repeat_gate_purchase_keeps_one_journey_record(db, make_user, make_artwork):
    user = make_user(highest_gate_unlocked=3)
    art = make_artwork(2)
    store = Store(db)

    complete_checkout(store, user, _confirmation(user, [art], ref="pi_a"))
    complete_checkout(store, user, _confirmation(user, [art], ref="pi_b"))

    assert _journey_gates(db, user.id) == [2]
    assert user.highest_gate_unlocked == 3
    # each transaction still counts its distinct gates
    assert user.total_insights == 2
    assert db.query(Order).filter_by(user_id=user.id).count() == 2


def test_confirming_the_same_payment_twice_returns_the_first_order(db, make_user, make_artwork):
    user = make_user()
    art = make_artwork(1)
    store = Store(db)
    confirmation = _confirmation(user, [art], ref="pi_once")

    first = complete_checkout(store, user, confirmation)
    second = complete_checkout(store, user, confirmation)

    assert second.already_processed
    assert second.order.id == first.order.id
    assert user.total_insights == 1
    assert db.query(Order).count() == 1


def test_store_failure_rolls_back_the_whole_unit(db, make_user, make_artwork, monkeypatch):
    user = make_user()
    art = make_artwork(1)
    db.add(CartItem(user_id=user.id, artwork_id=art.id))
    db.commit()
    store = Store(db)

    def broken_clear_cart(user_id, artwork_ids=None):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "clear_cart", broken_clear_cart)

    with pytest.raises(RuntimeError):
        complete_checkout(store, user, _confirmation(user, [art]))

    db.expire_all()
    fresh = db.query(User).filter_by(id=user.id).one()
    assert fresh.highest_gate_unlocked == 1
    assert fresh.total_insights == 0
    assert _journey_gates(db, user.id) == []
    assert db.query(CartItem).filter_by(user_id=user.id).count() == 1
    assert db.query(Order).count() == 0


def test_ungated_items_create_an_order_without_progress(db, make_user, make_artwork):
    user = make_user(highest_gate_unlocked=2)
    art = make_artwork(None)

    result = complete_checkout(Store(db), user, _confirmation(user, [art]))

    assert result.unlocked_gates == ()
    assert user.highest_gate_unlocked == 2
    assert db.query(Order).count() == 1


def test_items_added_after_the_intent_stay_in_the_cart(db, make_user, make_artwork):
    user = make_user(highest_gate_unlocked=2)
    paid = make_artwork(1)
    later = make_artwork(2)
    db.add(CartItem(user_id=user.id, artwork_id=paid.id))
    db.commit()
    confirmation = _confirmation(user, [paid])
    db.add(CartItem(user_id=user.id, artwork_id=later.id))
    db.commit()

    result = complete_checkout(Store(db), user, confirmation)

    remaining = [row.artwork_id for row in db.query(CartItem).filter_by(user_id=user.id).all()]
    assert remaining == [later.id]
    assert [item["id"] for item in result.order.items] == [paid.id]
    assert result.order.total_amount == paid.price


def test_order_snapshot_is_rebuilt_from_the_artworks_table(db, make_user, make_artwork):
    user = make_user()
    art = make_artwork(1, price=4200, title="Seed of Light")

    result = complete_checkout(Store(db), user, _confirmation(user, [art]))

    assert result.order.items == [
        {"id": art.id, "title": "Seed of Light", "price": 4200, "gate_number": 1},
    ]


def test_buying_every_gate_at_once(db, make_user, make_artwork):
    user = make_user(highest_gate_unlocked=14)
    artworks = [make_artwork(gate) for gate in range(1, 15)]

    result = complete_checkout(Store(db), user, _confirmation(user, artworks, ref="pi_all"))

    assert len(result.order.items) == 14
    assert result.unlocked_gates == tuple(range(1, 15))
    assert user.highest_gate_unlocked == 15
    assert user.total_insights == 14
    assert _journey_gates(db, user.id) == list(range(1, 15))


# ======================================================
# Store
# ======================================================

def test_insert_journey_record_if_absent_is_set_like(db, make_user):
    user = make_user(highest_gate_unlocked=5)
    store = Store(db)

    with store.transaction():
        store.insert_journey_record_if_absent(user.id, 3)
        store.insert_journey_record_if_absent(user.id, 3)
    with store.transaction():
        store.insert_journey_record_if_absent(user.id, 3)

    assert _journey_gates(db, user.id) == [3]


def test_update_user_progression_never_lowers_the_frontier(db, make_user):
    user = make_user(highest_gate_unlocked=6)
    store = Store(db)

    with store.transaction():
        store.update_user_progression(user.id, 4, 1)

    db.refresh(user)
    assert user.highest_gate_unlocked == 6
    assert user.total_insights == 1

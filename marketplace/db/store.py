"""
Persistence operations the checkout flow relies on.

A Store wraps one SQLAlchemy session. Writes made inside ``transaction()``
commit together or not at all.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import case, delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from marketplace.auth.models import User
from marketplace.cart.models import CartItem
from marketplace.catalog.models import Artwork
from marketplace.journey.models import JourneyRecord
from marketplace.orders.models import Order

# Dialects that understand INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class Store:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """
        Load a user. With for_update the row stays locked until the
        surrounding transaction ends (ignored by SQLite, which serialises
        writers anyway).
        """
        stmt = select(User).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalars().first()

    def update_user_progression(self, user_id: int, new_highest: int, insight_delta: int) -> None:
        """
        Raise the user's frontier to new_highest and add insight_delta insights.

        The frontier comparison happens inside the UPDATE so a concurrent
        writer that already moved it further is never overwritten.
        """
        self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                highest_gate_unlocked=case(
                    (User.highest_gate_unlocked < new_highest, new_highest),
                    else_=User.highest_gate_unlocked,
                ),
                total_insights=User.total_insights + insight_delta,
            )
            .execution_options(synchronize_session=False)
        )

    # ------------------------------------------------------------------
    # Journey
    # ------------------------------------------------------------------

    def insert_journey_record_if_absent(self, user_id: int, gate_number: int) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is not None:
            self.db.execute(
                insert(JourneyRecord)
                .values(user_id=user_id, gate_number=gate_number)
                .on_conflict_do_nothing(index_elements=["user_id", "gate_number"])
            )
            return

        existing = self.db.query(JourneyRecord).filter_by(
            user_id=user_id, gate_number=gate_number
        ).first()
        if existing is None:
            self.db.add(JourneyRecord(user_id=user_id, gate_number=gate_number))
            self.db.flush()

    def journey_for(self, user_id: int) -> list:
        return (
            self.db.query(JourneyRecord)
            .filter(JourneyRecord.user_id == user_id)
            .order_by(JourneyRecord.gate_number.asc())
            .all()
        )

    # ------------------------------------------------------------------
    # Cart / orders
    # ------------------------------------------------------------------

    def clear_cart(self, user_id: int, artwork_ids: Optional[list] = None) -> None:
        """Empty the user's cart, or only the given artworks when ids are passed."""
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        if artwork_ids is not None:
            stmt = stmt.where(CartItem.artwork_id.in_(artwork_ids))
        self.db.execute(stmt.execution_options(synchronize_session=False))

    def artworks_by_ids(self, artwork_ids: list) -> list:
        """Artworks for the given ids, in the order given; unknown ids are skipped."""
        if not artwork_ids:
            return []
        rows = self.db.query(Artwork).filter(Artwork.id.in_(artwork_ids)).all()
        by_id = {a.id: a for a in rows}
        return [by_id[i] for i in dict.fromkeys(artwork_ids) if i in by_id]

    def insert_order(
        self,
        user: User,
        total_amount: int,
        payment_id: str,
        items: list,
        payment_method: str = "stripe",
    ) -> Order:
        order = Order(
            user_id=user.id,
            status="completed",
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status="succeeded",
            payment_id=payment_id,
            customer_email=user.email,
            customer_name=user.username,
            items=items,
            completed_at=datetime.now(timezone.utc),
        )
        self.db.add(order)
        self.db.flush()
        return order

    def find_order_by_payment(self, payment_id: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.payment_id == payment_id).first()

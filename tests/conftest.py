import os
import tempfile
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# Configure the app before anything imports marketplace.*: a throwaway SQLite
# file, a fixed JWT secret and the in-process demo payment provider.
_tmp_dir = tempfile.mkdtemp(prefix="marketplace-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["PAYMENT_PROVIDER"] = "demo"
os.environ["SEED_CATALOG"] = "1"

from marketplace.db.base import Base  # noqa: E402
from marketplace.auth.models import User  # noqa: E402
from marketplace.catalog.models import Artwork  # noqa: E402
from marketplace.cart.models import CartItem  # noqa: E402, F401
from marketplace.journey.models import JourneyRecord  # noqa: E402, F401
from marketplace.orders.models import Order  # noqa: E402, F401


@pytest.fixture
def db():
    """A private in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_user(db):
    def _make(highest_gate_unlocked=1, **overrides):
        suffix = uuid.uuid4().hex[:8]
        user = User(
            email=overrides.pop("email", f"seeker-{suffix}@example.com"),
            username=overrides.pop("username", f"seeker-{suffix}"),
            name=overrides.pop("name", "Test Seeker"),
            password_hash="x:y",
            highest_gate_unlocked=highest_gate_unlocked,
            **overrides,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_artwork(db):
    def _make(gate_number, price=1000, **overrides):
        artwork = Artwork(
            title=overrides.pop("title", f"Gate {gate_number} piece"),
            artist="Test Artist",
            price=price,
            category="Tree of Knowledge",
            gate=f"Gate {gate_number}",
            gate_number=gate_number,
            unlock_requirement=gate_number,
            image="https://example.com/a.png",
            description="A test artwork",
            **overrides,
        )
        db.add(artwork)
        db.commit()
        db.refresh(artwork)
        return artwork
    return _make

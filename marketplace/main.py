from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.core.config import ENABLE_DEBUG_ROUTES, SEED_CATALOG
from marketplace.db.base import Base, engine, SessionLocal, log_diagnostics
from marketplace.db.session import get_db

# Import models so create_all picks them up
from marketplace.auth.models import User
from marketplace.catalog.models import Artwork
from marketplace.cart.models import CartItem  # noqa: F401
from marketplace.journey.models import JourneyRecord  # noqa: F401
from marketplace.orders.models import Order
from marketplace.catalog.seed import seed_catalog

from marketplace.auth.routes import router as auth_router
from marketplace.catalog.routes import router as catalog_router
from marketplace.cart.routes import router as cart_router
from marketplace.payments.routes import router as payment_router
from marketplace.orders.routes import router as orders_router
from marketplace.web.debug_routes import router as debug_router


app = FastAPI(title="Mystical Marketplace", version="0.2.0")

# Only expose debug routes when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

log_diagnostics()

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

if SEED_CATALOG:
    _db = SessionLocal()
    try:
        seed_catalog(_db)
    finally:
        _db.close()

# Include routers
app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(payment_router)
app.include_router(orders_router)


@app.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected",
            "users": db.query(User).count(),
            "artworks": db.query(Artwork).count(),
            "orders": db.query(Order).count(),
        }
    except SQLAlchemyError as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": str(exc)},
        )

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.auth.models import User
from marketplace.journey.models import JourneyRecord

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/users")
def debug_users(db: Session = Depends(get_db)):
    """Progression state of every account. Mounted only when ENABLE_DEBUG_ROUTES=1."""
    users = db.query(User).order_by(User.id.asc()).all()
    journeys = {}
    for record in db.query(JourneyRecord).order_by(JourneyRecord.gate_number.asc()):
        journeys.setdefault(record.user_id, []).append(record.gate_number)

    return [
        {
            "id": u.id,
            "username": u.username,
            "highest_gate_unlocked": u.highest_gate_unlocked,
            "total_insights": u.total_insights,
            "journey_gates": journeys.get(u.id, []),
        }
        for u in users
    ]

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.store import Store
from marketplace.auth.models import User
from marketplace.core.config import MIN_PASSWORD_LENGTH, INITIAL_GATE_UNLOCKED, DEFAULT_SPIRITUAL_LEVEL
from marketplace.core.deps import get_current_user, get_store
from marketplace.core.security import hash_password, verify_password, issue_token_for
from marketplace.core.log import get_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = get_logger(__name__, "AUTH")


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# =========================
# REGISTER
# =========================
@router.post("/register", status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    email = (body.email or "").strip()
    username = (body.username or "").strip()
    name = (body.name or "").strip()
    password = body.password or ""

    if not email or not password or not username or not name:
        raise HTTPException(status_code=400, detail="All fields are required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    existing = db.query(User).filter(
        or_(User.email == email, User.username == username)
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        email=email,
        username=username,
        name=name,
        password_hash=hash_password(password),
        spiritual_level=DEFAULT_SPIRITUAL_LEVEL,
        contemplation_streak=0,
        total_insights=0,
        highest_gate_unlocked=INITIAL_GATE_UNLOCKED,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user id={user.id} username={user.username}")
    return {"user": user.to_dict(), "access_token": issue_token_for(user)}


# =========================
# LOGIN
# =========================
@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    identifier = (body.email or "").strip()
    password = body.password or ""

    if not identifier or not password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    # Try to find user by email first, then by username
    user = db.query(User).filter(User.email == identifier).first()
    if not user:
        user = db.query(User).filter(User.username == identifier).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Invalid credentials for: {identifier}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"Login successful for: {user.username}")
    return {"user": user.to_dict(), "access_token": issue_token_for(user)}


# =========================
# PROFILE
# =========================
@router.get("/profile")
def profile(
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return {
        "user": user.to_dict(),
        "journey": [record.to_dict() for record in store.journey_for(user.id)],
    }

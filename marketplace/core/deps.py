from typing import Optional

from fastapi import Request, Depends, HTTPException
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.db.store import Store
from marketplace.auth.models import User
from marketplace.core.security import decode_access_token
from marketplace.core.log import get_logger
from marketplace.payments.processor import build_processor

logger = get_logger(__name__, "AUTH")


def _extract_token(request: Request) -> Optional[str]:
    """
    Read the bearer credential from the Authorization header, falling back
    to the access_token cookie.
    """
    auth_header = request.headers.get("authorization") or ""
    token = None
    if auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get("access_token")
        # Support both "Bearer <token>" and raw token values in the cookie.
        if isinstance(token, str) and token.lower().startswith("bearer "):
            token = token[7:].strip()
    return token or None


def verify_credential(token: str) -> Optional[dict]:
    """Claims {user_id, email, username} for a valid token, else None."""
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    return {
        "user_id": payload.get("user_id"),
        "email": payload.get("email"),
        "username": payload["sub"],
    }


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    token = _extract_token(request)

    if not token:
        logger.info(f"reject reason=missing_token path={request.url.path}")
        raise HTTPException(status_code=401, detail="Access token required")

    identity = verify_credential(token)
    if not identity:
        logger.info(f"reject reason=invalid_token path={request.url.path}")
        raise HTTPException(status_code=403, detail="Invalid token")

    user = db.query(User).filter(User.username == identity["username"]).first()

    if not user:
        logger.info(f"reject reason=user_not_found username={identity['username']} path={request.url.path}")
        raise HTTPException(status_code=401, detail="User not found")

    return user


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Like get_current_user, but anonymous or bad credentials just mean None."""
    token = _extract_token(request)
    if not token:
        return None
    identity = verify_credential(token)
    if not identity:
        return None
    return db.query(User).filter(User.username == identity["username"]).first()


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


def get_payment_processor(request: Request):
    """One processor per application, created on first use."""
    processor = getattr(request.app.state, "payment_processor", None)
    if processor is None:
        processor = build_processor()
        request.app.state.payment_processor = processor
    return processor

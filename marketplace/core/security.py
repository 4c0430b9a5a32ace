from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import hmac
import os
from jose import jwt, JWTError

from marketplace.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, is_production
from marketplace.core.log import get_logger

logger = get_logger(__name__, "AUTH")

# ======================
# PASSWORD HASHING (PBKDF2)
# ======================

PBKDF2_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    pwd_hash = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode(),
        salt,
        PBKDF2_ITERATIONS,
    )
    return salt.hex() + ":" + pwd_hash.hex()


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_hex, hash_hex = stored.split(":")
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    pwd_hash = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode(),
        salt,
        PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(pwd_hash, expected)


# ======================
# JWT
# ======================

SECRET_KEY = os.getenv("SECRET_KEY", os.getenv("JWT_SECRET_KEY", ""))
if not SECRET_KEY:
    # In production, require a secret; for local dev, use a default (UNSAFE for prod)
    if is_production():
        raise RuntimeError("SECRET_KEY or JWT_SECRET_KEY env var is required in production")
    SECRET_KEY = "dev-secret-key-CHANGE-IN-PRODUCTION-mystical-marketplace"
    logger.warning("Using default SECRET_KEY for development. DO NOT USE IN PRODUCTION!")
else:
    logger.info(f"SECRET_KEY present: True (length={len(SECRET_KEY)})")

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token claims, or None when the token is expired or malformed."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Token expired")
        return None
    except JWTError as e:
        logger.info(f"JWT decode error: {type(e).__name__}")
        return None


def issue_token_for(user) -> str:
    """Token carrying the identity the auth service hands back on verify()."""
    return create_access_token({
        "sub": user.username,
        "user_id": user.id,
        "email": user.email,
    })

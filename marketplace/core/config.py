"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def is_production() -> bool:
    """
    Detect if we're running in production (Railway, Heroku, etc).
    """
    return bool(
        os.getenv("RAILWAY_ENVIRONMENT") or
        os.getenv("ENVIRONMENT", "").lower() == "production" or
        os.getenv("NODE_ENV", "").lower() == "production" or
        os.getenv("HEROKU_APP_NAME")
    )


# Every new account starts with the first gate open.
INITIAL_GATE_UNLOCKED = 1

# Number of gates in the progression (chapters of the Treatise on Logic).
TOTAL_GATES = 14

DEFAULT_SPIRITUAL_LEVEL = "Beginner"

MIN_PASSWORD_LENGTH = 6

# Access tokens are valid for 24 hours.
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# "demo" auto-confirms payments in-process; "stripe" talks to the real API.
PAYMENT_PROVIDER = os.getenv("PAYMENT_PROVIDER", "demo").strip().lower()

# IMPORTANT: Do NOT hardcode live keys in code or commit them to git.
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "").strip()
STRIPE_API_VERSION = "2023-10-16"

PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "usd").strip().lower()

ENABLE_DEBUG_ROUTES = _flag("ENABLE_DEBUG_ROUTES")

# Seed the 14-gate catalog on startup when the artworks table is empty.
SEED_CATALOG = _flag("SEED_CATALOG", "1")

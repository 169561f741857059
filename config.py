"""
config.py
---------
Settings for the HR Desk bot, read from the environment (and `.env`, which
python-dotenv loads at import). See `.env.example` for every key.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _ids(name: str) -> list[int]:
    return [int(part) for part in os.getenv(name, "").split(",") if part.strip()]


# ── Telegram / Gemini ─────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")

# ── HR database (PostgreSQL) ──────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = _int("DB_PORT", 5432)
DB_NAME: str = os.getenv("DB_NAME", "hr_desk")
DB_USER: str = os.getenv("DB_USER", "hr_desk_user")
DB_PASS: str = os.getenv("DB_PASS", "")

# A full DATABASE_URL wins over the individual parts
DATABASE_URL: str = os.getenv("DATABASE_URL") or (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)
DB_POOL_MIN: int = _int("DB_POOL_MIN", 1)
DB_POOL_MAX: int = _int("DB_POOL_MAX", 5)

# Standard departments and job salary bands, inserted on startup
SEED_REFERENCE_DATA: bool = _flag("SEED_REFERENCE_DATA", True)

# ── Access control ────────────────────────────────────────
# Telegram ids of HR operators; empty means anyone (development only)
ALLOWED_USER_IDS: list[int] = _ids("ALLOWED_USER_IDS")
RATE_LIMIT_MESSAGES: int = _int("RATE_LIMIT_MESSAGES", 30)
RATE_LIMIT_WINDOW_SECONDS: int = _int("RATE_LIMIT_WINDOW_SECONDS", 60)

# ── Presentation ──────────────────────────────────────────
CURRENCY: str = os.getenv("CURRENCY", "USD")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

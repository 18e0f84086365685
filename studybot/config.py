"""
StudyBot — Configuration
All environment variables and constants. Single source of truth.
No other file reads os.environ directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# ─── Database ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'studybot.db'}"
)
# Hosted Postgres URLs still use the legacy scheme; SQLAlchemy wants postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# ─── LLM Settings ────────────────────────────────────────────────────────────
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "300"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.4"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "15"))

# ─── ManyChat (transport) ────────────────────────────────────────────────────
MANYCHAT_API_TOKEN = os.getenv("MANYCHAT_API_TOKEN", "")
MANYCHAT_API_BASE = os.getenv("MANYCHAT_API_BASE", "https://api.manychat.com/fb")
MANYCHAT_SEND_ENABLED = os.getenv("MANYCHAT_SEND_ENABLED", "false").lower() == "true"
MANYCHAT_MESSAGE_TAG = os.getenv("MANYCHAT_MESSAGE_TAG", "NON_PROMOTIONAL_SUBSCRIPTION")
MANYCHAT_TIMEOUT_SECONDS = float(os.getenv("MANYCHAT_TIMEOUT_SECONDS", "10"))

# Chat platforms reject long text blocks; enforced at the webhook, not in the core
MAX_REPLY_LENGTH = int(os.getenv("MAX_REPLY_LENGTH", "1200"))

# ─── Adaptive Difficulty ─────────────────────────────────────────────────────
EMA_ALPHA = float(os.getenv("EMA_ALPHA", "0.2"))
DIFF_EASY_MAX = float(os.getenv("DIFF_EASY_MAX", "0.38"))
DIFF_MED_MAX = float(os.getenv("DIFF_MED_MAX", "0.72"))
DIFF_HYSTERESIS = float(os.getenv("DIFF_HYSTERESIS", "0.03"))
MIN_ANSWERS_FOR_ADAPTIVE = 5

# ─── Registration ────────────────────────────────────────────────────────────
VALID_GRADES = ("10", "11", "varsity")
DISPLAY_NAME_MIN = 2
DISPLAY_NAME_MAX = 50
USERNAME_MIN = 3
USERNAME_MAX = 20

SUBJECTS = {
    "math": "Mathematics",
    "physics": "Physics",
    "life_sciences": "Life Sciences",
    "chemistry": "Chemistry",
}

# ─── Dispatcher ──────────────────────────────────────────────────────────────
MAX_CHAIN_DEPTH = 3  # handler → follow-up command hops resolved in one request

# ─── Hooks ───────────────────────────────────────────────────────────────────
HOOK_TYPES = ("morning", "afternoon", "evening", "fomo", "comeback")
HOOK_STATS_DAYS = 7

# ─── Exam Prep ───────────────────────────────────────────────────────────────
LONG_PLAN_MIN_HOURS = 3  # exams further away than this get a daily plan offer

# ─── CORS ────────────────────────────────────────────────────────────────────
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# ─── Server ──────────────────────────────────────────────────────────────────
PORT = int(os.getenv("PORT", "8000"))

# ─── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

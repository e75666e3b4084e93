"""
config.py
---------
Central configuration module. Loads environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Storage ───────────────────────────────────────────────
DATA_DIR: str = os.getenv("SUBTRACKER_DATA_DIR", os.path.join(os.getcwd(), "data"))
SUBSCRIPTIONS_FILE: str = os.getenv(
    "SUBTRACKER_DATA_FILE", os.path.join(DATA_DIR, "subscriptions.json")
)

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Reports ───────────────────────────────────────────────
DEFAULT_RENEWAL_WINDOW_DAYS: int = 7
TOP_CATEGORIES_LIMIT: int = 5
BAR_WIDTH: int = 10

# ── Currency ──────────────────────────────────────────────
# Display symbol only, not configurable.
CURRENCY_SYMBOL: str = "€"

"""Application configuration."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DB_PATH = BASE_DIR / "data" / "rabbit_invest.db"
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite+aiosqlite:///{DB_PATH}"

# Remote data gateway (mfapi.in)
MFAPI_BASE_URL = os.getenv("MFAPI_BASE_URL", "https://api.mfapi.in")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))  # seconds

# Product limits
SELECTION_CAP = int(os.getenv("SELECTION_CAP", "4"))  # funds compared at once
FAVORITES_CAP = int(os.getenv("FAVORITES_CAP", "5"))
SEARCH_HISTORY_LIMIT = 10

# Comparison view
NAV_REFRESH_INTERVAL = int(os.getenv("NAV_REFRESH_INTERVAL", "300"))  # seconds
CHART_POINTS = 20

# Ensure data directory exists (only needed for local SQLite, skip if DATABASE_URL is overridden)
if not os.getenv("DATABASE_URL"):
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)

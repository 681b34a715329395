"""
Cheesy Parts - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("CHEESY_DB", f"sqlite:///{BASE_DIR / 'cheesy_parts.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("CHEESY_HOST", "0.0.0.0")
PORT   = int(os.environ.get("CHEESY_PORT", "5000"))
DEBUG  = os.environ.get("CHEESY_DEBUG", "0") == "1"
SECRET = os.environ.get("CHEESY_SECRET", "cheesy-parts-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("CHEESY_LOG_LEVEL", "INFO").upper()

# ── Auth ───────────────────────────────────────────────────────────────
TOKEN_DAYS  = int(os.environ.get("CHEESY_TOKEN_DAYS", "30"))
TOKEN_SALT  = "cheesy_parts"

# Optional bootstrap admin, only created when the users table is empty
ADMIN_EMAIL    = os.environ.get("CHEESY_ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.environ.get("CHEESY_ADMIN_PASSWORD", "")

# ── Numbering ──────────────────────────────────────────────────────────
ASSEMBLY_STEP     = 100
PART_NUMBER_WIDTH = 4

# ── Orders ─────────────────────────────────────────────────────────────
ORDER_ITEM_MAX_QUANTITY = 10000
UNKNOWN_PURCHASER       = "Unknown"

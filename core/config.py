"""
core/config.py
--------------
Central configuration hub for the backend API, the Streamlit UI and the
analytics layer.

- Reads Supabase, Gemini and service settings from environment variables
  (a local `.env` file is honoured).
- Provides the business constants (VAT / earning rates, currency, categories).
- Provides the navigation map shared by the UI.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Supabase (environment override; the local store is the fallback)
# ---------------------------------------------------------------------------

SUPABASE_URL_ENV = "SUPABASE_URL"
SUPABASE_KEY_ENV = "SUPABASE_ANON_KEY"

PLACEHOLDER_URL = "https://placeholder.supabase.co"
PLACEHOLDER_KEY = "placeholder.placeholder.placeholder"

# ---------------------------------------------------------------------------
# Generative AI
# ---------------------------------------------------------------------------

GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
AI_TIMEOUT_SEC: float = float(os.getenv("AI_TIMEOUT_SEC", "30"))

# ---------------------------------------------------------------------------
# Backend service
# ---------------------------------------------------------------------------

BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000").rstrip("/")
BACKEND_VERSION: str = os.getenv("BACKEND_VERSION", "1.0")
BACKEND_TIMEOUT_SEC: float = float(os.getenv("BACKEND_TIMEOUT_SEC", "15"))

# ---------------------------------------------------------------------------
# Local store
# ---------------------------------------------------------------------------

GETRICH_HOME: Path = Path(os.getenv("GETRICH_HOME", str(Path.home() / ".getrich")))
DB_FILENAME = "getrich.db"

# ---------------------------------------------------------------------------
# Business constants
# ---------------------------------------------------------------------------

BUSINESS_NAME: str = os.getenv("BUSINESS_NAME", "South Korea Vehicles")
CURRENCY: str = os.getenv("CURRENCY", "RWF")
VAT_RATE: float = float(os.getenv("VAT_RATE", "0.18"))
EARNING_RATE: float = float(os.getenv("EARNING_RATE", "0.21"))
RENEWAL_WINDOW_DAYS: int = int(os.getenv("RENEWAL_WINDOW_DAYS", "30"))

CATEGORIES = [
    "Software Subscription",
    "Domain/Hosting",
    "Marketing",
    "Office Rent",
    "Travel",
    "Consulting",
    "Salary/Owner Draw",
    "Taxes",
    "Other",
]

# (label, page key) in sidebar order
NAVIGATION = [
    ("📊 Dashboard", "dashboard"),
    ("🧾 Invoices", "invoices"),
    ("📁 Projects", "projects"),
    ("💼 Transactions", "transactions"),
    ("✨ AI Insights", "insights"),
    ("⚙️ Settings", "settings"),
]


def format_currency(value: float) -> str:
    """Render an amount the way every dashboard shows it, e.g. `1,200 RWF`."""
    return f"{value:,.0f} {CURRENCY}"

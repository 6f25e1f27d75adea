"""Static configuration for asset kinds, market tickers and storage."""
from __future__ import annotations

import os
from pathlib import Path

HOME_CURRENCY = "EGP"

TROY_OUNCE_GRAMS = 31.1035
DAYS_PER_MONTH = 30.44
GOLD_PURITIES = (24, 22, 21, 18)
DEFAULT_GOLD_PURITY = 24

PROJECTION_HORIZON_MONTHS = 12
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Label, icon, chart colour and default display unit per asset kind.
ASSET_TYPES = {
    "gold": {"label": "Gold", "icon": "🪙", "color": "#fbbf24", "unit": "grams"},
    "silver": {"label": "Silver", "icon": "🥈", "color": "#cbd5e1", "unit": "grams"},
    "usd": {"label": "US Dollar", "icon": "💵", "color": "#4ade80", "unit": "USD"},
    "rent": {"label": "Rent", "icon": "🏠", "color": "#60a5fa", "unit": HOME_CURRENCY},
    "interest": {"label": "Interest", "icon": "📈", "color": "#d8b4fe", "unit": HOME_CURRENCY},
    "cash": {"label": "Cash", "icon": "💰", "color": "#10b981", "unit": HOME_CURRENCY},
    "salary": {"label": "Salary", "icon": "💼", "color": "#38bdf8", "unit": HOME_CURRENCY},
}
UNKNOWN_ASSET_TYPE = {"label": "", "icon": "❔", "color": "#94a3b8", "unit": HOME_CURRENCY}

PRICE_TICKERS = {
    "gold": "GC=F",
    "silver": "SI=F",
    "usd_to_egp": "EGP=X",
}
PRICE_HISTORY_PERIOD = "5d"
PRICE_REFRESH_SECONDS = 300

FALLBACK_PRICES = {
    "gold": {"usd": 5000.0, "egp": 250000.0, "change": 0.0},
    "silver": {"usd": 100.0, "egp": 5000.0, "change": 0.0},
    "usdToEgp": 49.0,
}

STORE_PATH = Path(os.environ.get("WEALTH_TRACKER_STORE", "assets.json"))


def asset_type_info(kind: str) -> dict:
    """Catalogue entry for an asset kind; unknown kinds are labelled verbatim."""
    kind = str(getattr(kind, "value", kind))
    if kind in ASSET_TYPES:
        return ASSET_TYPES[kind]
    return {**UNKNOWN_ASSET_TYPE, "label": kind}

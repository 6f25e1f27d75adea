"""Valuation engine: asset + price snapshot + instant -> value in EGP.

Every function here is pure. Missing optional data degrades to zero (or to
the asset's ``amount`` for interest accounts) instead of raising, so totals
and projections are defined for any collection the user can enter.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Optional, Union

from .config import DAYS_PER_MONTH, DEFAULT_GOLD_PURITY, TROY_OUNCE_GRAMS
from .models import Asset, AssetType, InterestType, PriceSnapshot

Instant = Union[date, datetime]

MONTH = timedelta(days=DAYS_PER_MONTH)


def _as_datetime(value: Instant) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


def complete_months_elapsed(start: Instant, end: Instant) -> int:
    """Whole 30.44-day periods between two instants, never negative.

    This is an average-month approximation and not a calendar month count.
    """
    elapsed = _as_datetime(end) - _as_datetime(start)
    return math.floor(max(0.0, elapsed / MONTH))


def _accrual_end(asset: Asset, as_of: Instant) -> Instant:
    if asset.end_date is None:
        return as_of
    return min(_as_datetime(as_of), _as_datetime(asset.end_date))


def _monthly_income(asset: Asset) -> Optional[float]:
    if asset.type == AssetType.SALARY:
        return asset.monthly_salary
    return asset.monthly_rent


def _accrued_income(asset: Asset, until: Instant) -> float:
    monthly = _monthly_income(asset)
    if not monthly or asset.start_date is None:
        return 0.0
    return monthly * complete_months_elapsed(asset.start_date, until)


def _accrued_interest(asset: Asset, until: Instant) -> float:
    if (
        not asset.principal
        or not asset.interest_rate
        or asset.start_date is None
        or asset.interest_type is None
    ):
        return asset.amount or 0.0

    months = complete_months_elapsed(asset.start_date, until)
    monthly_rate = asset.interest_rate / 100 / 12
    if asset.interest_type == InterestType.SIMPLE:
        return asset.principal + asset.principal * monthly_rate * months
    try:
        growth = (1 + monthly_rate) ** months
    except OverflowError:
        return math.copysign(math.inf, asset.principal)
    return asset.principal * growth


def _market_value(asset: Asset, prices: PriceSnapshot) -> float:
    if asset.type == AssetType.USD:
        if not prices.usd_to_egp:
            return 0.0
        return asset.amount * prices.usd_to_egp
    if asset.type == AssetType.GOLD:
        purity = asset.purity or DEFAULT_GOLD_PURITY
        return (asset.amount / TROY_OUNCE_GRAMS) * prices.gold.egp * (purity / 24)
    if asset.type == AssetType.SILVER:
        return (asset.amount / TROY_OUNCE_GRAMS) * prices.silver.egp
    # cash, and any kind this version does not know yet
    return asset.amount


def value_of(asset: Asset, prices: PriceSnapshot, as_of: Instant) -> float:
    """Value of ``asset`` in EGP at ``as_of``."""
    if asset.type in (AssetType.RENT, AssetType.SALARY):
        return _accrued_income(asset, as_of)
    if asset.type == AssetType.INTEREST:
        return _accrued_interest(asset, as_of)
    return _market_value(asset, prices)


def projected_value_of(
    asset: Asset,
    as_of: Instant,
    prices: Optional[PriceSnapshot] = None,
) -> float:
    """Like ``value_of`` but accrual stops at the asset's end date.

    Market-priced kinds reuse ``value_of`` with ``prices`` held constant.
    An end date earlier than the start date means no elapsed months.
    """
    if asset.type in (AssetType.RENT, AssetType.SALARY):
        return _accrued_income(asset, _accrual_end(asset, as_of))
    if asset.type == AssetType.INTEREST:
        return _accrued_interest(asset, _accrual_end(asset, as_of))
    return value_of(asset, prices or PriceSnapshot.empty(), as_of)


def total_value(
    assets: Iterable[Asset],
    prices: PriceSnapshot,
    now: Optional[datetime] = None,
) -> float:
    now = now or datetime.now()
    return sum((value_of(asset, prices, now) for asset in assets), 0.0)


def value_by_type(
    assets: Iterable[Asset],
    prices: PriceSnapshot,
    now: Optional[datetime] = None,
) -> Dict[str, float]:
    """Current value grouped by asset kind, in first-seen order."""
    now = now or datetime.now()
    totals: Dict[str, float] = {}
    for asset in assets:
        kind = str(getattr(asset.type, "value", asset.type))
        totals[kind] = totals.get(kind, 0.0) + value_of(asset, prices, now)
    return totals

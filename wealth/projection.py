"""Month-by-month projection of the portfolio total."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd
from dateutil.relativedelta import relativedelta

from .config import MONTH_LABELS, PROJECTION_HORIZON_MONTHS
from .models import Asset, PriceSnapshot
from .valuation import projected_value_of, total_value

NOW_LABEL = "Now"


@dataclass(frozen=True)
class ProjectionPoint:
    label: str
    year: int
    value: float
    date: datetime


def round_half_up(value: float) -> float:
    """Nearest whole unit, halves rounded up; non-finite values pass through."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def month_starts(now: datetime, horizon_months: int = PROJECTION_HORIZON_MONTHS) -> List[datetime]:
    """First day of each calendar month following ``now``."""
    current = datetime(now.year, now.month, 1)
    return [current + relativedelta(months=offset + 1) for offset in range(horizon_months)]


def project(
    assets: Sequence[Asset],
    prices: PriceSnapshot,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
    now: Optional[datetime] = None,
) -> List[ProjectionPoint]:
    """Projected total for each upcoming month, market prices held constant."""
    now = now or datetime.now()
    points: List[ProjectionPoint] = []
    for target in month_starts(now, horizon_months):
        value = sum(
            (projected_value_of(asset, target, prices) for asset in assets), 0.0
        )
        points.append(
            ProjectionPoint(
                label=MONTH_LABELS[target.month - 1],
                year=target.year,
                value=round_half_up(value),
                date=target,
            )
        )
    return points


def growth_frame(
    assets: Sequence[Asset],
    prices: PriceSnapshot,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
    now: Optional[datetime] = None,
) -> pd.DataFrame:
    """Projection with the current total prepended as the ``Now`` row.

    Columns: label, year, date, value, change, change_pct, from_now, from_now_pct.
    ``change`` is relative to the previous row; the ``Now`` row has none.
    """
    now = now or datetime.now()
    current = round_half_up(total_value(assets, prices, now))
    rows = [{"label": NOW_LABEL, "year": now.year, "date": now, "value": current}]
    rows.extend(
        {"label": p.label, "year": p.year, "date": p.date, "value": p.value}
        for p in project(assets, prices, horizon_months, now)
    )

    df = pd.DataFrame(rows, columns=["label", "year", "date", "value"])
    previous = df["value"].shift(1)
    df["change"] = df["value"] - previous
    df["change_pct"] = _pct(df["change"], previous)
    horizon = df.index > 0
    df["from_now"] = (df["value"] - current).astype(float).where(horizon)
    df["from_now_pct"] = _pct(
        df["from_now"], pd.Series(float(current), index=df.index)
    ).where(horizon)
    return df


def _pct(delta: pd.Series, base: pd.Series) -> pd.Series:
    base = base.where(base > 0)
    return (delta / base * 100).where(base.notna() | delta.isna(), 0.0)


def growth_summary(frame: pd.DataFrame) -> tuple[float, float]:
    """Total growth over the horizon and its percentage of the current total."""
    if frame.empty:
        return 0, 0.0
    current = float(frame["value"].iloc[0])
    final = float(frame["value"].iloc[-1])
    growth = final - current
    if math.isfinite(growth):
        growth = int(growth)
    pct = (growth / current) * 100 if current > 0 else 0.0
    return growth, pct

"""Live market price retrieval for gold, silver and USD/EGP."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import yfinance as yf

from ..config import PRICE_HISTORY_PERIOD, PRICE_TICKERS
from ..messages import ServiceMessage
from ..models import MetalPrice, PriceSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceResult:
    snapshot: PriceSnapshot
    messages: List[ServiceMessage]
    is_live: bool
    error: Optional[str] = None


class PriceService:
    """Builds a ``PriceSnapshot`` from Yahoo Finance closes.

    Failures never propagate: the previous good snapshot (or the static
    fallback) is returned together with a warning message.
    """

    def __init__(
        self,
        tickers: Dict[str, str] | None = None,
        period: str = PRICE_HISTORY_PERIOD,
    ) -> None:
        self._tickers = tickers or PRICE_TICKERS
        self._period = period

    def fetch(self, previous: Optional[PriceSnapshot] = None) -> PriceResult:
        try:
            rate, _ = self._last_close(self._tickers["usd_to_egp"])
            if not rate:
                raise ValueError("EGP rate missing")
            gold = self._metal_price(self._tickers["gold"], rate)
            silver = self._metal_price(self._tickers["silver"], rate)
        except Exception as exc:  # noqa: BLE001 - degrade to a known snapshot
            logger.warning("Live price fetch failed: %s", exc)
            text = f"Live price fetch failed ({exc}); showing fallback prices."
            failed = PriceResult(
                snapshot=PriceSnapshot.fallback(),
                messages=[ServiceMessage.warning(text)],
                is_live=False,
                error=str(exc),
            )
            return keep_last_good(failed, previous)

        snapshot = PriceSnapshot(gold=gold, silver=silver, usd_to_egp=rate)
        logger.info(
            "Fetched prices: gold %.2f USD, silver %.2f USD, USD/EGP %.4f",
            gold.usd,
            silver.usd,
            rate,
        )
        return PriceResult(snapshot=snapshot, messages=[], is_live=True)

    def _metal_price(self, symbol: str, usd_to_egp: float) -> MetalPrice:
        usd, change = self._last_close(symbol)
        if not usd:
            raise ValueError(f"price missing for {symbol}")
        return MetalPrice(usd=usd, egp=usd * usd_to_egp, change=change)

    def _last_close(self, symbol: str) -> tuple[float, float]:
        """Latest close and its percent change from the close before it."""
        hist = yf.Ticker(symbol).history(period=self._period)
        if hist is None or hist.empty or "Close" not in hist:
            raise ValueError(f"empty history for {symbol}")

        closes = hist["Close"].astype(float).replace(0.0, float("nan")).dropna()
        if closes.empty:
            raise ValueError(f"no usable closes for {symbol}")

        last = float(closes.iloc[-1])
        change = 0.0
        if len(closes) > 1:
            prior = float(closes.iloc[-2])
            change = (last / prior - 1) * 100
        return last, change


def keep_last_good(result: PriceResult, previous: Optional[PriceSnapshot]) -> PriceResult:
    """Replaces the fallback of a failed fetch with the last live snapshot, if any."""
    if result.is_live or previous is None:
        return result
    text = f"Live price fetch failed ({result.error}); showing the last known prices."
    return PriceResult(
        snapshot=previous,
        messages=[ServiceMessage.warning(text)],
        is_live=False,
        error=result.error,
    )

"""
Seeded mock datasets.

Three tree shapes (market -> sector -> stock, asset class -> ETF,
commodity sector -> futures contract) and a random-walk OHLCV frame. Every
generator takes a seed so runs and tests are reproducible.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ...models.market_node import MarketNode

MARKET_SECTORS: Tuple[str, ...] = ("Technology", "Healthcare", "Finance", "Consumer", "Energy")
ETF_ASSET_CLASSES: Tuple[str, ...] = ("Equity", "Fixed Income", "Commodity", "Real Estate")
COMMODITY_SECTORS: Dict[str, Tuple[str, ...]] = {
    "Energy": ("CL", "NG", "RB", "HO"),
    "Metals": ("GC", "SI", "HG", "PL"),
    "Agriculture": ("ZC", "ZW", "ZS", "KC"),
    "Meats/Livestock": ("LE", "HE", "GF"),
}
DATASETS = ("market", "etf", "commodities")


def _uniform(rng: np.random.Generator, low: float, high: float) -> float:
    return float(rng.uniform(low, high))


def _prefix(name: str) -> str:
    return "".join(ch for ch in name if ch.isalpha())[:3].upper()


def _group(name: str, ticker: str, weight: float, children: Sequence[MarketNode]) -> MarketNode:
    return MarketNode(name=name, ticker=ticker, weight=weight, children=tuple(children))


def generate_market_tree(seed: Optional[int] = None, stocks_per_sector: int = 15) -> MarketNode:
    """S&P-style market: five sectors of stocks with full fundamentals."""
    rng = np.random.default_rng(seed)
    sectors: List[MarketNode] = []
    for sector in MARKET_SECTORS:
        prefix = _prefix(sector)
        stocks = [
            MarketNode(
                name=f"{sector} Stock {i + 1}",
                ticker=f"{prefix}{i + 1:02d}",
                weight=_uniform(rng, 1e10, 5.1e11),
                performance_ratio=_uniform(rng, -0.04, 0.04),
                pe_ratio=_uniform(rng, 5, 55),
                pb_ratio=_uniform(rng, 0.5, 10.5),
                dividend_yield=_uniform(rng, 0, 0.08),
                debt_to_equity=_uniform(rng, 0, 3),
                relative_volume=_uniform(rng, 0.5, 4.5),
            )
            for i in range(stocks_per_sector)
        ]
        sectors.append(_group(sector, sector.upper(), _uniform(rng, 5e11, 2.5e12), stocks))
    return _group("S&P 500", "SPX", 1e13, sectors)


def generate_etf_tree(seed: Optional[int] = None, funds_per_class: int = 8) -> MarketNode:
    """ETF universe grouped by asset class; ETFs carry no leverage."""
    rng = np.random.default_rng(seed)
    classes: List[MarketNode] = []
    for asset_class in ETF_ASSET_CLASSES:
        prefix = _prefix(asset_class)
        funds = [
            MarketNode(
                name=f"{asset_class} ETF {i + 1}",
                ticker=f"{prefix}E{i + 1}",
                weight=_uniform(rng, 5e9, 2.05e11),
                performance_ratio=_uniform(rng, -0.03, 0.03),
                pe_ratio=_uniform(rng, 10, 40),
                pb_ratio=_uniform(rng, 1, 6),
                dividend_yield=_uniform(rng, 0, 0.06),
                debt_to_equity=0.0,
                relative_volume=_uniform(rng, 0.5, 3.5),
            )
            for i in range(funds_per_class)
        ]
        classes.append(_group(asset_class, prefix, _uniform(rng, 1e11, 1.1e12), funds))
    return _group("Global Universe", "ALL", 5e12, classes)


def generate_commodities_tree(seed: Optional[int] = None) -> MarketNode:
    """Futures contracts by commodity sector; no fundamentals, high volume."""
    rng = np.random.default_rng(seed)
    sectors: List[MarketNode] = []
    for sector, tickers in COMMODITY_SECTORS.items():
        contracts = [
            MarketNode(
                name=ticker,
                ticker=ticker,
                weight=_uniform(rng, 1e10, 1.1e11),
                performance_ratio=_uniform(rng, -0.075, 0.075),
                dividend_yield=0.0,
                debt_to_equity=0.0,
                relative_volume=_uniform(rng, 0.5, 5.5),
            )
            for ticker in tickers
        ]
        sectors.append(_group(sector, _prefix(sector), _uniform(rng, 5e10, 5.5e11), contracts))
    return _group("Commodities", "CMD", 2e12, sectors)


def generate_tree(dataset: str = "market", seed: Optional[int] = None) -> MarketNode:
    """Dispatch by dataset name (market, etf, commodities)."""
    if dataset == "market":
        return generate_market_tree(seed)
    if dataset == "etf":
        return generate_etf_tree(seed)
    if dataset == "commodities":
        return generate_commodities_tree(seed)
    raise ValueError(f"Unknown dataset: {dataset!r} (expected one of {DATASETS})")


def generate_ohlcv(
    days: int = 100,
    seed: Optional[int] = None,
    start_price: float = 150.0,
    end: Optional[date] = None,
) -> pd.DataFrame:
    """
    Random-walk daily OHLCV frame indexed by date, oldest first.

    high/low wrap open and close; prices are floored at one cent.
    """
    rng = np.random.default_rng(seed)
    end = end or date.today()
    index = pd.DatetimeIndex([end - timedelta(days=days - i) for i in range(days)], name="time")

    changes = (rng.random(days) - 0.5) * 2.0
    close = np.maximum(start_price + np.cumsum(changes), 0.01)
    open_ = np.concatenate(([start_price], close[:-1]))
    high = np.maximum(open_, close) + rng.random(days)
    low = np.maximum(np.minimum(open_, close) - rng.random(days), 0.0)
    volume = rng.integers(500_000, 1_500_000, size=days).astype(float)

    return pd.DataFrame(
        {"open": open_, "high": high, "low": low, "close": close, "volume": volume},
        index=index,
    )

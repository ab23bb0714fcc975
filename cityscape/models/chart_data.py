"""OHLCV chart data handed from the data source to chart widgets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List

import pandas as pd

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class ChartBar:
    """One trading day."""

    time: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


def validate_chart_frame(frame: pd.DataFrame) -> List[str]:
    """
    Check an OHLCV frame indexed by trading day.

    Returns:
        List of problems; empty when the frame is valid.
    """
    errors: List[str] = []
    missing = [c for c in OHLCV_COLUMNS if c not in frame.columns]
    if missing:
        return [f"missing columns: {', '.join(missing)}"]
    if frame.empty:
        return errors

    index = pd.DatetimeIndex(frame.index)
    if not index.is_monotonic_increasing or index.has_duplicates:
        errors.append("index must be strictly increasing by time")

    values = frame[OHLCV_COLUMNS]
    if values.isna().any().any():
        errors.append("OHLCV values must not be NaN")
    if (values < 0).any().any():
        errors.append("OHLCV values must be non-negative")
    if (frame["high"] < frame[["open", "close"]].max(axis=1)).any():
        errors.append("high must be >= max(open, close)")
    if (frame["low"] > frame[["open", "close"]].min(axis=1)).any():
        errors.append("low must be <= min(open, close)")
    return errors


def bars_from_frame(frame: pd.DataFrame) -> List[ChartBar]:
    """Convert a validated OHLCV frame into ChartBar records."""
    errors = validate_chart_frame(frame)
    if errors:
        raise ValueError("; ".join(errors))
    return [
        ChartBar(
            time=pd.Timestamp(ts).date(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for ts, row in zip(frame.index, frame.itertuples(index=False))
    ]

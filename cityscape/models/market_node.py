"""Market tree node: market -> sector -> instrument."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

# Optional financial attributes carried by a node
ATTRIBUTE_FIELDS: Tuple[str, ...] = (
    "performance_ratio",
    "pe_ratio",
    "pb_ratio",
    "dividend_yield",
    "debt_to_equity",
    "relative_volume",
)

# Accepted input keys -> field name (snapshot files, dashboard JSON, camelCase)
FIELD_ALIASES: Dict[str, str] = {
    "value": "weight",
    "market_cap": "weight",
    "marketCap": "weight",
    "performance": "performance_ratio",
    "performanceRatio": "performance_ratio",
    "change_percent": "performance_ratio",
    "peRatio": "pe_ratio",
    "pbRatio": "pb_ratio",
    "dividendYield": "dividend_yield",
    "debtToEquity": "debt_to_equity",
    "relativeVolume": "relative_volume",
}


def finite_or_none(value: Any) -> Optional[float]:
    """Coerce to float; None for missing, non-numeric, NaN or infinite values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class MarketNode:
    """
    Immutable tree node.

    A node with children is a group; its own ``weight`` is informational
    only. A node without children is a leaf contributing ``weight`` to the
    layout. Trees are replaced wholesale on refresh, never mutated.
    """

    name: str
    ticker: str
    weight: float = 0.0

    # Optional financial attributes (None = absent)
    performance_ratio: Optional[float] = None  # 0.012 = +1.2%
    pe_ratio: Optional[float] = None
    pb_ratio: Optional[float] = None
    dividend_yield: Optional[float] = None  # Fraction, 0.02 = 2%
    debt_to_equity: Optional[float] = None
    relative_volume: Optional[float] = None  # 1.0 = average

    children: Tuple["MarketNode", ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def layout_weight(self) -> float:
        """Own weight sanitised for layout: negative or non-finite -> 0."""
        weight = finite_or_none(self.weight)
        return weight if weight is not None and weight > 0 else 0.0

    def attribute(self, name: str) -> Optional[float]:
        """Finite attribute value, or None when absent or malformed."""
        if name not in ATTRIBUTE_FIELDS:
            raise KeyError(f"Unknown attribute: {name}")
        return finite_or_none(getattr(self, name))

    def iter_leaves(self) -> Iterator["MarketNode"]:
        """Leaves in insertion order, depth-first."""
        if self.is_leaf:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "MarketNode"]]:
        """All nodes with their depth, pre-order."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def find(self, ticker: str) -> Optional["MarketNode"]:
        """First node (pre-order) with the given ticker."""
        for _, node in self.walk():
            if node.ticker == ticker:
                return node
        return None

    def with_children(self, children: Tuple["MarketNode", ...]) -> "MarketNode":
        return replace(self, children=tuple(children))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MarketNode":
        """
        Build a tree from nested dicts.

        Accepts snake_case field names, camelCase names and the dashboard
        keys ("value" for weight, "performance" for performance ratio).
        Unknown keys are ignored; malformed numbers become None / 0.
        """
        values: Dict[str, Any] = {}
        for key, raw in data.items():
            name = FIELD_ALIASES.get(key, key)
            if name in ATTRIBUTE_FIELDS:
                values[name] = finite_or_none(raw)
            elif name == "weight":
                weight = finite_or_none(raw)
                values["weight"] = weight if weight is not None else 0.0

        ticker = str(data.get("ticker") or data.get("symbol") or data.get("name") or "")
        name = str(data.get("name") or ticker)
        children = tuple(cls.from_dict(child) for child in data.get("children") or ())
        return cls(name=name, ticker=ticker, children=children, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON (absent attributes omitted)."""
        result: Dict[str, Any] = {
            "name": self.name,
            "ticker": self.ticker,
            "weight": self.weight,
        }
        for name in ATTRIBUTE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

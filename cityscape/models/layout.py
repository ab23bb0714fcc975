"""Layout data structures produced by the space partitioner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .market_node import MarketNode


@dataclass(frozen=True)
class LayoutRect:
    """Axis-aligned rectangle in the normalized [0,E] x [0,E] plane."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def depth(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.depth

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def overlap_area(self, other: "LayoutRect") -> float:
        """Area of the intersection with another rectangle (0 if disjoint)."""
        w = min(self.x1, other.x1) - max(self.x0, other.x0)
        d = min(self.y1, other.y1) - max(self.y0, other.y0)
        return w * d if w > 0 and d > 0 else 0.0

    def inset(self, amount: float, epsilon: float) -> "LayoutRect":
        """
        Shrink every edge by ``amount``.

        A side that would drop to ``epsilon`` or below collapses to
        ``min(side, epsilon)`` around its center instead of inverting.
        """
        x0, x1 = _inset_span(self.x0, self.x1, amount, epsilon)
        y0, y1 = _inset_span(self.y0, self.y1, amount, epsilon)
        return LayoutRect(x0, y0, x1, y1)

    def to_dict(self) -> Dict[str, float]:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


def _inset_span(low: float, high: float, amount: float, epsilon: float) -> Tuple[float, float]:
    size = high - low
    if size - 2 * amount > epsilon:
        return low + amount, high - amount
    mid = (low + high) / 2
    half = min(size, epsilon) / 2
    return mid - half, mid + half


@dataclass(frozen=True)
class PartitionEntry:
    """A leaf and its rectangle. ``path`` holds ancestor tickers, root first."""

    leaf: MarketNode
    rect: LayoutRect
    path: Tuple[str, ...]
    weight: float

    @property
    def depth(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class GroupEntry:
    """
    An internal node and its rectangles.

    ``rect`` is the cell the group was given by its parent; ``content`` is
    ``rect`` minus padding, the box its children tile.
    """

    node: MarketNode
    rect: LayoutRect
    content: LayoutRect
    path: Tuple[str, ...]
    weight: float

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def key(self) -> Tuple[str, ...]:
        """Unique id of the group: its path plus its own ticker."""
        return self.path + (self.node.ticker,)


@dataclass(frozen=True)
class TreeLayout:
    """Full partition of one tree snapshot."""

    extent: float
    leaves: Tuple[PartitionEntry, ...]
    groups: Tuple[GroupEntry, ...]
    excluded: int = 0  # Leaves dropped for zero or malformed weight, or a zero-area cell

    def __len__(self) -> int:
        return len(self.leaves)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extent": self.extent,
            "excluded": self.excluded,
            "leaves": [
                {"ticker": e.leaf.ticker, "path": list(e.path), "weight": e.weight, **e.rect.to_dict()}
                for e in self.leaves
            ],
            "groups": [
                {"ticker": g.node.ticker, "path": list(g.path), "weight": g.weight, **g.rect.to_dict()}
                for g in self.groups
            ],
        }

"""
Bubble (scatter) adapter - one bubble per EncodedNode, for commodity maps.

x is the leaf's performance in percent, y its relative volume (1.0 when
unknown), bubble size grows with the log of its weight and color follows
the sector. The treemap cells are not used, but indices still address the
EncodedNode sequence, so the same pick/hover contract applies.

Point picks are given in data coordinates (performance %, relative volume)
and hit-tested in plot pixels, where bubble sizes are defined.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...models.encoded_node import EncodedNode
from ...utils.logging_setup import get_logger
from .interaction import HoverAdapter
from .labels import format_percent

logger = get_logger(__name__)

SECTOR_COLORS: Dict[str, str] = {
    "Energy": "#ef4444",
    "Metals": "#eab308",
    "Agriculture": "#22c55e",
    "Meats/Livestock": "#f97316",
}
FALLBACK_COLOR = "#94a3b8"

DEFAULT_WEIGHT = 1e9  # Size fallback for zero-weight leaves
MIN_SYMBOL_SIZE = 10.0
PLOT_SIZE = (800.0, 500.0)


def symbol_size(weight: float) -> float:
    """Bubble diameter in pixels: 1.5 * ln(weight) - 30, at least 10."""
    value = weight if weight > 0 else DEFAULT_WEIGHT
    return max(math.log(value) * 1.5 - 30.0, MIN_SYMBOL_SIZE)


@dataclass(frozen=True)
class BubblePrimitive:
    index: int
    ticker: str
    name: str
    sector: str
    x: float  # Performance, percent
    y: float  # Relative volume
    size: float  # Diameter, pixels
    fill: str

    @property
    def tooltip(self) -> List[str]:
        title = f"{self.name} ({self.ticker})" if self.name != self.ticker else self.ticker
        return [
            title,
            self.sector,
            f"Performance: {format_percent(self.x / 100)}",
            f"Relative Vol: {self.y:.2f}x",
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.ticker,
            "value": [self.x, self.y, self.size, self.sector, self.name],
            "color": self.fill,
        }


@dataclass(frozen=True)
class BubbleScene:
    primitives: Tuple[BubblePrimitive, ...]
    x_range: Tuple[float, float]
    y_range: Tuple[float, float]
    average_volume: float
    active_index: Optional[int] = None


def _axis_range(values: Sequence[float], low: float) -> Tuple[float, float]:
    lo = min([low, *values])
    hi = max([low, *values])
    pad = (hi - lo) * 0.05 or 1.0
    return lo - pad, hi + pad


class BubbleAdapter(HoverAdapter):
    """
    Performance vs relative volume scatter.

    Usage:
        adapter = BubbleAdapter(group_names=group_names_from(tree))
        scene = adapter.render(engine.encode())
        adapter.handle(PointerEvent(PointerKind.MOVE, point=(2.5, 3.1)))
    """

    def __init__(
        self,
        group_names: Optional[Dict[str, str]] = None,
        sector_colors: Optional[Dict[str, str]] = None,
        plot_size: Tuple[float, float] = PLOT_SIZE,
    ) -> None:
        super().__init__()
        self._group_names = dict(group_names or {})
        self._sector_colors = dict(SECTOR_COLORS if sector_colors is None else sector_colors)
        self._plot_size = plot_size
        self._primitives: Tuple[BubblePrimitive, ...] = ()
        self._x_range = (-1.0, 1.0)
        self._y_range = (0.0, 1.0)
        self._average_volume = 1.0

    @property
    def primitives(self) -> Tuple[BubblePrimitive, ...]:
        return self._primitives

    def render(self, nodes: Sequence[EncodedNode]) -> BubbleScene:
        self._hover.bind(nodes)
        self._primitives = tuple(
            self._primitive(position, node) for position, node in enumerate(self._hover.nodes)
        )
        xs = [p.x for p in self._primitives]
        ys = [p.y for p in self._primitives]
        self._x_range = _axis_range(xs, 0.0)
        self._y_range = (0.0, _axis_range(ys, 0.0)[1])
        self._average_volume = sum(ys) / len(ys) if ys else 1.0
        logger.debug(f"Bubble render: {len(self._primitives)} bubbles")
        return self.scene()

    def scene(self) -> BubbleScene:
        return BubbleScene(
            self._primitives,
            self._x_range,
            self._y_range,
            self._average_volume,
            self._hover.active_index,
        )

    def sector_of(self, node: EncodedNode) -> str:
        """Display name of the leaf's parent group."""
        if not node.path:
            return ""
        return self._group_names.get(node.path[-1], node.path[-1])

    def _primitive(self, position: int, node: EncodedNode) -> BubblePrimitive:
        leaf = node.leaf
        performance = leaf.attribute("performance_ratio")
        volume = leaf.attribute("relative_volume")
        sector = self.sector_of(node)
        return BubblePrimitive(
            index=position,
            ticker=node.ticker,
            name=node.name,
            sector=sector,
            x=(performance or 0.0) * 100,
            y=volume or 1.0,
            size=symbol_size(node.weight),
            fill=self._sector_colors.get(sector, FALLBACK_COLOR),
        )

    def to_pixels(self, x: float, y: float) -> Tuple[float, float]:
        """Data coordinates -> plot pixels (origin top-left)."""
        width, height = self._plot_size
        x0, x1 = self._x_range
        y0, y1 = self._y_range
        return (x - x0) / (x1 - x0) * width, (y1 - y) / (y1 - y0) * height

    def _hit_test(self, x: float, y: float) -> Optional[int]:
        px, py = self.to_pixels(x, y)
        best: Optional[int] = None
        best_distance = math.inf
        for primitive in self._primitives:
            bx, by = self.to_pixels(primitive.x, primitive.y)
            distance = math.hypot(px - bx, py - by)
            if distance <= primitive.size / 2 and distance < best_distance:
                best, best_distance = primitive.index, distance
        return best

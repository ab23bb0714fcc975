"""Presentation-ready render state for one leaf."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .color import Color
from .layout import LayoutRect
from .market_node import MarketNode


@dataclass(frozen=True)
class Placement:
    """
    Box placement centered on the origin.

    Planar coordinates (x, z) come from the layout rectangle; y is vertical,
    with the box standing on the ground plane.
    """

    position: Tuple[float, float, float]
    scale: Tuple[float, float, float]


@dataclass(frozen=True)
class EncodedNode:
    """
    One leaf after layout and encoding.

    Adapters read only this structure. ``index`` is the leaf's position in
    the deterministic partition order and stays fixed across metric switches.
    """

    index: int
    ticker: str
    name: str
    path: Tuple[str, ...]
    rect: LayoutRect
    weight: float
    height_value: float
    color: Color
    placement: Placement
    height_metric: str
    color_metric: str
    height_source: Optional[float]  # Raw attribute behind the height (None = absent)
    color_source: Optional[float]  # Raw attribute behind the color (None = absent)
    leaf: MarketNode

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def depth(self) -> float:
        return self.rect.depth

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON/frontend consumption."""
        return {
            "index": self.index,
            "ticker": self.ticker,
            "name": self.name,
            "path": list(self.path),
            "rect": self.rect.to_dict(),
            "weight": self.weight,
            "height": self.height_value,
            "color": self.color.to_hex(),
            "position": list(self.placement.position),
            "scale": list(self.placement.scale),
            "height_metric": self.height_metric,
            "color_metric": self.color_metric,
            "height_source": self.height_source,
            "color_source": self.color_source,
        }

"""
Planar (2D) adapter - one flat rectangle per EncodedNode.

Rectangles are drawn at the shrunk footprint from the node's placement, so
adjacent blocks show the same gap as in the 3D view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from config.models import PresentationConfig

from ...models.encoded_node import EncodedNode
from ...models.layout import LayoutRect
from ...utils.logging_setup import get_logger
from .interaction import HoverAdapter
from .labels import color_text, label_font_size, should_label

logger = get_logger(__name__)


@dataclass(frozen=True)
class RectPrimitive:
    """Flat drawable; ``index`` addresses the originating EncodedNode."""

    index: int
    rect: LayoutRect
    fill: str
    label: Optional[str] = None
    font_size: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            **self.rect.to_dict(),
            "fill": self.fill,
            "label": self.label,
            "font_size": self.font_size,
        }


@dataclass(frozen=True)
class PlanarScene:
    extent: float
    primitives: Tuple[RectPrimitive, ...]
    active_index: Optional[int] = None

    @property
    def labelled(self) -> int:
        return sum(1 for p in self.primitives if p.label is not None)


def footprint(node: EncodedNode) -> LayoutRect:
    """Shrunk rectangle centered on the node's layout cell."""
    cx, cy = node.rect.center
    half_w = node.placement.scale[0] / 2
    half_d = node.placement.scale[2] / 2
    return LayoutRect(cx - half_w, cy - half_d, cx + half_w, cy + half_d)


class PlanarAdapter(HoverAdapter):
    """
    Flat treemap view.

    Usage:
        adapter = PlanarAdapter(config.presentation)
        scene = adapter.render(engine.encode())
        adapter.handle(PointerEvent(PointerKind.MOVE, point=(12.0, 40.0)))
    """

    def __init__(self, config: Optional[PresentationConfig] = None) -> None:
        super().__init__()
        self._config = config or PresentationConfig()
        self._primitives: Tuple[RectPrimitive, ...] = ()
        self._extent = 0.0

    @property
    def primitives(self) -> Tuple[RectPrimitive, ...]:
        return self._primitives

    def render(self, nodes: Sequence[EncodedNode], extent: Optional[float] = None) -> PlanarScene:
        self._hover.bind(nodes)
        self._primitives = tuple(
            self._primitive(position, node) for position, node in enumerate(self._hover.nodes)
        )
        if extent is not None:
            self._extent = extent
        elif self._primitives:
            self._extent = max(max(n.rect.x1, n.rect.y1) for n in self._hover.nodes)
        logger.debug(f"Planar render: {len(self._primitives)} primitives")
        return self.scene()

    def scene(self) -> PlanarScene:
        return PlanarScene(self._extent, self._primitives, self._hover.active_index)

    def _primitive(self, position: int, node: EncodedNode) -> RectPrimitive:
        label = None
        font_size = None
        if should_label(node.rect, self._config.min_label_size):
            label = f"{node.ticker}\n{color_text(node)}"
            font_size = label_font_size(node.rect, self._config.label_font_divisor)
        return RectPrimitive(position, footprint(node), node.color.to_hex(), label, font_size)


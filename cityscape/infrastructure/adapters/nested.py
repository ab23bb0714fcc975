"""
Nested 2D adapter - leaf tiles plus group rectangles with headers.

Group rectangles are recovered from the leaves: children tile their
parent's content box exactly, so the bounding box of a group's leaves is
that content box. The adapter needs nothing beyond the EncodedNode
sequence (plus optional display names for group headers).

Group levels: the root is level 0 (the map frame, not drawn), its children
level 1, and so on. ``nested_levels`` caps how deep groups are drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from config.models import PresentationConfig

from ...domain.interfaces.pointer import PointerEvent
from ...models.encoded_node import EncodedNode
from ...models.layout import LayoutRect
from ...models.market_node import MarketNode
from ...utils.logging_setup import get_logger
from ...utils.perf_logger import timed
from .planar import PlanarAdapter, PlanarScene

logger = get_logger(__name__)

ROOT_COLOR = "#0c0f14"
GROUP_COLOR = "#1c2230"
HEADER_COLOR = "#0f172a"


@dataclass(frozen=True)
class GroupPrimitive:
    key: Tuple[str, ...]  # Ancestor tickers plus the group's own ticker
    level: int
    rect: LayoutRect
    header: Optional[LayoutRect]  # None when the group is too small for one
    label: str

    @property
    def id(self) -> str:
        return "/".join(self.key)


@dataclass(frozen=True)
class NestedScene:
    leaves: PlanarScene
    groups: Tuple[GroupPrimitive, ...]


def group_names_from(tree: MarketNode) -> Dict[str, str]:
    """Ticker -> display name for every internal node of ``tree``."""
    return {node.ticker: node.name for _, node in tree.walk() if not node.is_leaf}


def _bounds(rects: Sequence[LayoutRect]) -> LayoutRect:
    return LayoutRect(
        min(r.x0 for r in rects),
        min(r.y0 for r in rects),
        max(r.x1 for r in rects),
        max(r.y1 for r in rects),
    )


class NestedTreemapAdapter:
    """
    Multi-level treemap view.

    Leaf drawing, picking and hover are delegated to a PlanarAdapter;
    this class adds the group layer.

    Usage:
        adapter = NestedTreemapAdapter(config.presentation, group_names_from(tree))
        scene = adapter.render(engine.encode())
        flat = adapter.to_flat()
    """

    def __init__(
        self,
        config: Optional[PresentationConfig] = None,
        group_names: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._config = config or PresentationConfig()
        self._leaves = PlanarAdapter(self._config)
        self._group_names: Dict[str, str] = dict(group_names or {})
        self._groups: Tuple[GroupPrimitive, ...] = ()

    @property
    def active_index(self) -> Optional[int]:
        return self._leaves.active_index

    @property
    def groups(self) -> Tuple[GroupPrimitive, ...]:
        return self._groups

    def set_group_names(self, names: Mapping[str, str]) -> None:
        self._group_names = dict(names)

    def render(self, nodes: Sequence[EncodedNode], extent: Optional[float] = None) -> NestedScene:
        leaves = self._leaves.render(nodes, extent)
        self._groups = self._build_groups(self._leaves.nodes)
        logger.debug(f"Nested render: {len(leaves.primitives)} leaves, {len(self._groups)} groups")
        return NestedScene(leaves, self._groups)

    def _build_groups(self, nodes: Sequence[EncodedNode]) -> Tuple[GroupPrimitive, ...]:
        members: Dict[Tuple[str, ...], List[LayoutRect]] = {}
        for node in nodes:
            # path = (root, ..., parent); prefixes beyond the root are groups
            for size in range(2, len(node.path) + 1):
                key = node.path[:size]
                level = size - 1
                if level > self._config.nested_levels:
                    break
                members.setdefault(key, []).append(node.rect)

        groups = []
        for key, rects in members.items():
            rect = _bounds(rects)
            groups.append(
                GroupPrimitive(
                    key=key,
                    level=len(key) - 1,
                    rect=rect,
                    header=self._header(rect),
                    label=self._group_names.get(key[-1], key[-1]),
                )
            )
        # Parents before children, layout order within a level
        groups.sort(key=lambda g: g.level)
        return tuple(groups)

    def _header(self, rect: LayoutRect) -> Optional[LayoutRect]:
        height = self._config.header_height
        if rect.depth < 2 * height or rect.width < self._config.min_label_size:
            return None
        return LayoutRect(rect.x0, rect.y0, rect.x1, rect.y0 + height)

    def group_at(self, x: float, y: float) -> Optional[GroupPrimitive]:
        """Deepest drawn group containing the point."""
        hit = None
        for group in self._groups:
            if group.rect.contains(x, y) and (hit is None or group.level > hit.level):
                hit = group
        return hit

    @timed("flat_export", warn_threshold_ms=20.0, error_threshold_ms=100.0)
    def to_flat(self) -> Dict[str, List[Any]]:
        """
        Flat parent-linked export (ids/labels/parents/values/colors).

        One root with parent "", every other id reaches it through its
        parent chain, and each parent's value is the sum of its children.
        """
        ids: List[str] = []
        labels: List[str] = []
        parents: List[str] = []
        values: List[float] = []
        colors: List[str] = []
        position: Dict[str, int] = {}

        def add(node_id: str, label: str, parent: str, value: float, color: str) -> None:
            position[node_id] = len(ids)
            ids.append(node_id)
            labels.append(label)
            parents.append(parent)
            values.append(value)
            colors.append(color)

        nodes = self._leaves.nodes
        if not nodes:
            return {"ids": ids, "labels": labels, "parents": parents, "values": values, "colors": colors}

        root = nodes[0].path[0] if nodes[0].path else "root"
        add(root, self._group_names.get(root, root), "", 0.0, ROOT_COLOR)

        for node in nodes:
            parent = root
            for size in range(2, len(node.path) + 1):
                group_id = "/".join(node.path[:size])
                if group_id not in position:
                    ticker = node.path[size - 1]
                    add(group_id, self._group_names.get(ticker, ticker), parent, 0.0, GROUP_COLOR)
                parent = group_id
            add(f"{parent}/{node.ticker}", node.ticker, parent, node.weight, node.color.to_hex())

        # Parents were added before their children, so a reverse pass sums bottom-up
        for i in range(len(ids) - 1, 0, -1):
            values[position[parents[i]]] += values[i]

        logger.debug(f"Flat export: {len(ids)} nodes, root value {values[0]:.2f}")
        return {"ids": ids, "labels": labels, "parents": parents, "values": values, "colors": colors}

    def pick(self, event: PointerEvent) -> Optional[int]:
        return self._leaves.pick(event)

    def handle(self, event: PointerEvent) -> Optional[int]:
        return self._leaves.handle(event)

    def pointer_enter(self, index: int) -> None:
        self._leaves.pointer_enter(index)

    def pointer_leave(self) -> None:
        self._leaves.pointer_leave()

    def resolve(self, index: int) -> Optional[EncodedNode]:
        return self._leaves.resolve(index)

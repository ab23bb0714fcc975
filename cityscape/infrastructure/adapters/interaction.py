"""
Hover state shared by the presentation adapters.

Adapters own this state; the engine never writes it. Holding it in one
small object lets every adapter variant reuse it by composition.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from ...domain.interfaces.pointer import PointerEvent, PointerKind
from ...models.encoded_node import EncodedNode
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)

HitTest = Callable[[float, float], Optional[int]]


class HoverState:
    """
    The rendered node sequence plus at most one active index.

    Indices are positions in the bound sequence. Rebinding after a
    metric-only re-derivation keeps the active index, since leaf order is
    stable for a given snapshot.
    """

    def __init__(self) -> None:
        self._nodes: Tuple[EncodedNode, ...] = ()
        self._active: Optional[int] = None

    @property
    def nodes(self) -> Tuple[EncodedNode, ...]:
        return self._nodes

    @property
    def active_index(self) -> Optional[int]:
        return self._active

    @property
    def active_node(self) -> Optional[EncodedNode]:
        if self._active is None:
            return None
        return self._nodes[self._active]

    def bind(self, nodes: Sequence[EncodedNode]) -> None:
        """Replace the node sequence; drop the active index if it no longer exists."""
        self._nodes = tuple(nodes)
        if self._active is not None and self._active >= len(self._nodes):
            logger.debug(f"Active index {self._active} gone after rebind ({len(self._nodes)} nodes)")
            self._active = None

    def contains(self, index: Optional[int]) -> bool:
        return index is not None and 0 <= index < len(self._nodes)

    def enter(self, index: int) -> None:
        if not self.contains(index):
            logger.debug(f"Ignoring pointer enter for unknown index {index!r}")
            return
        self._active = index

    def leave(self) -> None:
        self._active = None

    def resolve(self, index: int) -> Optional[EncodedNode]:
        if not self.contains(index):
            return None
        return self._nodes[index]

    def hit_cell(self, x: float, y: float) -> Optional[int]:
        """First node whose layout cell contains (x, y)."""
        for position, node in enumerate(self._nodes):
            if node.rect.contains(x, y):
                return position
        return None

    def pick(self, event: PointerEvent, hit_test: Optional[HitTest] = None) -> Optional[int]:
        """
        Resolve an event to an index.

        An ``instance_id`` (from a renderer raycast) is resolved directly. A
        bare point goes to ``hit_test``, by default the layout cells, which
        tile the map, so a point in a gap still lands on its block.
        """
        if event.instance_id is not None:
            return event.instance_id if self.contains(event.instance_id) else None
        if event.point is None:
            return None
        x, y = event.point
        return (hit_test or self.hit_cell)(x, y)

    def handle(self, event: PointerEvent, hit_test: Optional[HitTest] = None) -> Optional[int]:
        """Apply a pointer event; returns the active index afterwards."""
        if event.kind is PointerKind.LEAVE:
            self.leave()
            return None
        index = self.pick(event, hit_test)
        if index is None:
            self.leave()
        else:
            self.enter(index)
        return self._active


class HoverAdapter:
    """
    Pointer plumbing for adapters that own a HoverState.

    Subclasses bind their nodes with ``self._hover.bind`` on render and
    override ``_hit_test`` when their geometry is not the layout cells.
    """

    def __init__(self) -> None:
        self._hover = HoverState()

    @property
    def nodes(self) -> Tuple[EncodedNode, ...]:
        return self._hover.nodes

    @property
    def active_index(self) -> Optional[int]:
        return self._hover.active_index

    def _hit_test(self, x: float, y: float) -> Optional[int]:
        return self._hover.hit_cell(x, y)

    def pick(self, event: PointerEvent) -> Optional[int]:
        return self._hover.pick(event, self._hit_test)

    def handle(self, event: PointerEvent) -> Optional[int]:
        return self._hover.handle(event, self._hit_test)

    def pointer_enter(self, index: int) -> None:
        self._hover.enter(index)

    def pointer_leave(self) -> None:
        self._hover.leave()

    def resolve(self, index: int) -> Optional[EncodedNode]:
        return self._hover.resolve(index)

"""Presentation adapter protocol shared by 2D and 3D variants."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ...models.encoded_node import EncodedNode
from .pointer import PointerEvent


@runtime_checkable
class PresentationAdapter(Protocol):
    """
    Capability set for a map view.

    Implementations:
    - PlanarAdapter (flat rectangles)
    - ExtrudedAdapter (instanced 3D blocks)
    - NestedTreemapAdapter (2D with group rectangles and headers)

    Primitive ``i`` always corresponds to ``nodes[i]`` from the last
    ``render`` call, so a picked index resolves without a spatial search.

    Usage:
        adapter: PresentationAdapter = PlanarAdapter(config.presentation)
        scene = adapter.render(engine.encode())
        index = adapter.pick(event)
    """

    def render(self, nodes: Sequence[EncodedNode]) -> Any:
        """Build drawable primitives, one per node, in node order."""
        ...

    def pick(self, event: PointerEvent) -> Optional[int]:
        """Resolve a pointer event to a primitive index (None on a miss)."""
        ...

    def pointer_enter(self, index: int) -> None:
        """Make ``index`` the active (hovered) index."""
        ...

    def pointer_leave(self) -> None:
        """Clear the active index."""
        ...

    @property
    def active_index(self) -> Optional[int]:
        """Currently hovered index, or None."""
        ...

    def resolve(self, index: int) -> Optional[EncodedNode]:
        """EncodedNode behind primitive ``index``."""
        ...

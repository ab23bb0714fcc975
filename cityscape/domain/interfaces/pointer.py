"""Pointer events delivered to presentation adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class PointerKind(Enum):
    MOVE = "move"
    ENTER = "enter"
    LEAVE = "leave"
    CLICK = "click"


@dataclass(frozen=True)
class PointerEvent:
    """
    A pointer event in map coordinates.

    ``instance_id`` is set when the drawing surface already resolved the
    hit (e.g. an instanced-mesh raycast); ``point`` is the (x, y) position
    in the layout plane otherwise.
    """

    kind: PointerKind = PointerKind.MOVE
    point: Optional[Tuple[float, float]] = None
    instance_id: Optional[int] = None

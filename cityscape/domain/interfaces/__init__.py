"""Domain interfaces for dependency injection."""

from .pointer import PointerEvent, PointerKind
from .presentation_adapter import PresentationAdapter
from .tree_source import TreeDataSource

__all__ = [
    "PointerEvent",
    "PointerKind",
    "PresentationAdapter",
    "TreeDataSource",
]

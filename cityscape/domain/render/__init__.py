"""Render-state derivation and the cached map engine."""

from .deriver import derive, place
from .engine import EngineStats, MapEngine

__all__ = [
    "EngineStats",
    "MapEngine",
    "derive",
    "place",
]

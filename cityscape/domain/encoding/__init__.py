"""Metric codec: financial attributes -> height and color."""

from .codec import (
    clamp,
    clamped_map,
    color_source,
    color_value,
    height_source,
    height_value,
    map_linear,
    market_cap_height,
    performance_tier,
)
from .metrics import ColorMetric, HeightMetric, PerformanceTier

__all__ = [
    "ColorMetric",
    "HeightMetric",
    "PerformanceTier",
    "clamp",
    "clamped_map",
    "color_source",
    "color_value",
    "height_source",
    "height_value",
    "map_linear",
    "market_cap_height",
    "performance_tier",
]

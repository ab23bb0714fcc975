"""Data models for the cityscape engine."""

from .chart_data import ChartBar, bars_from_frame, validate_chart_frame
from .color import Color
from .encoded_node import EncodedNode, Placement
from .layout import GroupEntry, LayoutRect, PartitionEntry, TreeLayout
from .market_node import ATTRIBUTE_FIELDS, MarketNode, finite_or_none

__all__ = [
    "ATTRIBUTE_FIELDS",
    "ChartBar",
    "Color",
    "EncodedNode",
    "GroupEntry",
    "LayoutRect",
    "MarketNode",
    "PartitionEntry",
    "Placement",
    "TreeLayout",
    "bars_from_frame",
    "finite_or_none",
    "validate_chart_frame",
]

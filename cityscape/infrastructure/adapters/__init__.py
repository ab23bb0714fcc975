"""Presentation adapters: planar, extruded, nested treemap and bubble views."""

from .bubble import BubbleAdapter, BubblePrimitive, BubbleScene, symbol_size
from .extruded import ExtrudedAdapter, ExtrudedScene, HoverLabel, RoofLabel, instance_matrices
from .interaction import HoverAdapter, HoverState
from .labels import color_text, height_text, hover_text, should_label, tooltip_lines
from .nested import GroupPrimitive, NestedScene, NestedTreemapAdapter, group_names_from
from .planar import PlanarAdapter, PlanarScene, RectPrimitive, footprint

__all__ = [
    "BubbleAdapter",
    "BubblePrimitive",
    "BubbleScene",
    "ExtrudedAdapter",
    "ExtrudedScene",
    "GroupPrimitive",
    "HoverAdapter",
    "HoverLabel",
    "HoverState",
    "NestedScene",
    "NestedTreemapAdapter",
    "PlanarAdapter",
    "PlanarScene",
    "RectPrimitive",
    "RoofLabel",
    "color_text",
    "footprint",
    "group_names_from",
    "height_text",
    "hover_text",
    "instance_matrices",
    "should_label",
    "symbol_size",
    "tooltip_lines",
]

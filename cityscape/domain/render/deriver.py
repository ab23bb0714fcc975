"""
Render-State Deriver - partition + codec -> EncodedNode per leaf.

Placement convention (shared by 2D and 3D adapters):
- planar center = rectangle center minus half the extent (map centered on
  the origin); layout y becomes world z
- vertical center = height / 2 (blocks stand on the ground plane)
- scale = (width * shrink, height, depth * shrink)
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

from config.models import EncodingConfig, RenderConfig

from ...models.encoded_node import EncodedNode, Placement
from ...models.layout import PartitionEntry
from ...utils.perf_logger import log_timing
from ..encoding.codec import color_source, color_value, height_source, height_value
from ..encoding.metrics import ColorMetric, HeightMetric

DEFAULT_RENDER = RenderConfig()
DEFAULT_ENCODING = EncodingConfig()


def place(entry: PartitionEntry, height: float, extent: float, shrink: float) -> Placement:
    """Box placement for one partition entry."""
    rect = entry.rect
    cx, cz = rect.center
    half = extent / 2
    return Placement(
        position=(cx - half, height / 2, cz - half),
        scale=(rect.width * shrink, height, rect.depth * shrink),
    )


def derive(
    partitioned: Sequence[PartitionEntry],
    height_metric: Union[HeightMetric, str],
    color_metric: Union[ColorMetric, str],
    extent: float,
    encoding: EncodingConfig = DEFAULT_ENCODING,
    render: RenderConfig = DEFAULT_RENDER,
) -> Tuple[EncodedNode, ...]:
    """
    Encode every partition entry, preserving order.

    ``index`` on each EncodedNode is its position in ``partitioned``.
    Calling twice with equal inputs returns equal sequences.
    """
    height_metric = HeightMetric.parse(height_metric, encoding.default_height_metric)
    color_metric = ColorMetric.parse(color_metric, encoding.default_color_metric)

    with log_timing("derive", warn_threshold_ms=20.0, error_threshold_ms=100.0,
                    extra={"leaves": len(partitioned), "height": height_metric.value,
                           "color": color_metric.value}):
        nodes: List[EncodedNode] = []
        for index, entry in enumerate(partitioned):
            leaf = entry.leaf
            height = height_value(leaf, height_metric, encoding)
            nodes.append(
                EncodedNode(
                    index=index,
                    ticker=leaf.ticker,
                    name=leaf.name,
                    path=entry.path,
                    rect=entry.rect,
                    weight=entry.weight,
                    height_value=height,
                    color=color_value(leaf, color_metric, encoding),
                    placement=place(entry, height, extent, render.shrink),
                    height_metric=height_metric.value,
                    color_metric=color_metric.value,
                    height_source=height_source(leaf, height_metric),
                    color_source=color_source(leaf, color_metric),
                    leaf=leaf,
                )
            )
    return tuple(nodes)

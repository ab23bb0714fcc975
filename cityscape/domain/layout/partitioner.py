"""
Space Partitioner - weighted tree -> leaf rectangles.

Effective weight of a group is the sum of its descendant leaf weights; the
group's own ``weight`` is ignored. Leaves with zero, negative or non-finite
weight stay in the tree but get no rectangle, as do leaves whose share
rounds to a zero-thickness cell.

Every group's cell is inset by padding (a fraction of the cell's shorter
side) before its children tile it, so blocks of neighbouring groups are
always separated. Siblings are ordered by descending effective weight with
insertion order as the tie-break, and leaves are emitted depth-first in
that order. The output order is therefore a pure function of the tree and
the config, which keeps instance indices stable across re-renders.
"""

from __future__ import annotations

import math
from typing import Dict, List, Tuple

from config.models import LayoutConfig

from ...models.layout import GroupEntry, LayoutRect, PartitionEntry, TreeLayout
from ...models.market_node import MarketNode
from ...utils.logging_setup import get_logger
from ...utils.perf_logger import log_timing
from ..exceptions import ConfigurationError
from .squarify import squarify

logger = get_logger(__name__)


def partition(root: MarketNode, config: LayoutConfig = LayoutConfig()) -> Tuple[PartitionEntry, ...]:
    """
    Leaf rectangles for ``root``, in deterministic order.

    An empty tree (no positive-weight leaves) yields an empty tuple.

    Raises:
        ConfigurationError: If the extent or padding is invalid.
    """
    return partition_tree(root, config).leaves


def partition_tree(root: MarketNode, config: LayoutConfig = LayoutConfig()) -> TreeLayout:
    """
    Full hierarchical partition: leaf rectangles plus every group's cell.

    Raises:
        ConfigurationError: If the extent or padding is invalid.
    """
    validate_layout_config(config)

    with log_timing("partition", warn_threshold_ms=50.0, error_threshold_ms=250.0) as timing:
        weights: Dict[int, float] = {}
        total = _effective_weight(root, weights)
        leaf_count = sum(1 for _ in root.iter_leaves())

        frame = LayoutRect(0.0, 0.0, config.extent, config.extent)
        leaves: List[PartitionEntry] = []
        groups: List[GroupEntry] = []

        if total > 0:
            if root.is_leaf:
                leaves.append(PartitionEntry(root, _pad(frame, config), (), total))
            else:
                _layout_group(root, frame, (), weights, config, leaves, groups)

        excluded = leaf_count - len(leaves)
        timing["leaves"] = len(leaves)
        timing["excluded"] = excluded

    if excluded:
        logger.debug(f"Partition excluded {excluded} of {leaf_count} leaves with no positive weight or no area")
    if not leaves:
        logger.debug(f"Empty partition for tree {root.ticker!r}")

    return TreeLayout(
        extent=config.extent,
        leaves=tuple(leaves),
        groups=tuple(groups),
        excluded=excluded,
    )


def validate_layout_config(config: LayoutConfig) -> None:
    """Fail fast on a layout config that cannot produce valid rectangles."""
    if not math.isfinite(config.extent) or config.extent <= 0:
        raise ConfigurationError(f"Layout extent must be positive (got: {config.extent!r})")
    if not 0.0 <= config.padding < 0.5:
        raise ConfigurationError(f"Layout padding must be in [0, 0.5) (got: {config.padding!r})")
    if not config.epsilon > 0:
        raise ConfigurationError(f"Layout epsilon must be positive (got: {config.epsilon!r})")


def _effective_weight(node: MarketNode, weights: Dict[int, float]) -> float:
    if node.is_leaf:
        weight = node.layout_weight
    else:
        weight = sum(_effective_weight(child, weights) for child in node.children)
    weights[id(node)] = weight
    return weight


def _pad(rect: LayoutRect, config: LayoutConfig) -> LayoutRect:
    if config.padding <= 0:
        return rect
    amount = config.padding * min(rect.width, rect.depth)
    return rect.inset(amount, config.epsilon)


def _layout_group(
    node: MarketNode,
    rect: LayoutRect,
    path: Tuple[str, ...],
    weights: Dict[int, float],
    config: LayoutConfig,
    leaves: List[PartitionEntry],
    groups: List[GroupEntry],
) -> None:
    content = _pad(rect, config)
    groups.append(GroupEntry(node, rect, content, path, weights[id(node)]))

    # sorted() is stable: equal weights keep insertion order
    children = sorted(
        (child for child in node.children if weights[id(child)] > 0),
        key=lambda child: -weights[id(child)],
    )
    cells = squarify([weights[id(child)] for child in children], content)
    child_path = path + (node.ticker,)

    for child, cell in zip(children, cells):
        # Rounding can collapse a tiny sibling of a huge one to zero thickness
        if cell.width <= 0 or cell.depth <= 0:
            continue
        if child.is_leaf:
            leaves.append(PartitionEntry(child, cell, child_path, weights[id(child)]))
        else:
            _layout_group(child, cell, child_path, weights, config, leaves, groups)

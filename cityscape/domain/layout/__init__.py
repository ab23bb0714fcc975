"""Space partitioning (squarified treemap)."""

from .partitioner import partition, partition_tree, validate_layout_config
from .squarify import squarify, worst_ratio

__all__ = [
    "partition",
    "partition_tree",
    "validate_layout_config",
    "squarify",
    "worst_ratio",
]

"""Tree data sources: file loaders, frame builders and mock generators."""

from .mock_data import (
    DATASETS,
    generate_commodities_tree,
    generate_etf_tree,
    generate_market_tree,
    generate_ohlcv,
    generate_tree,
)
from .mock_source import MockTreeSource
from .snapshot_loader import apply_snapshot_rows, build_market_tree, load_tree

__all__ = [
    "DATASETS",
    "MockTreeSource",
    "apply_snapshot_rows",
    "build_market_tree",
    "generate_commodities_tree",
    "generate_etf_tree",
    "generate_market_tree",
    "generate_ohlcv",
    "generate_tree",
    "load_tree",
]

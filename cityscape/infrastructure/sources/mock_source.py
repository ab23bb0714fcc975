"""Mock asynchronous tree source with simulated latency."""

from __future__ import annotations

import asyncio
from typing import Optional

import pandas as pd

from ...domain.exceptions import DataSourceError
from ...models.market_node import MarketNode
from ...utils.logging_setup import get_logger
from .mock_data import DATASETS, generate_ohlcv, generate_tree

logger = get_logger(__name__)


class MockTreeSource:
    """
    TreeDataSource backed by the seeded generators.

    Each fetch returns a fresh snapshot object; with a fixed seed the
    snapshots are equal in content but distinct in identity, the way a real
    refresh would arrive.

    Usage:
        source = MockTreeSource("market", seed=7, latency=0.5)
        tree = await source.fetch_tree()
    """

    def __init__(
        self,
        dataset: str = "market",
        seed: Optional[int] = None,
        latency: float = 0.0,
    ) -> None:
        if dataset not in DATASETS:
            raise DataSourceError(f"Unknown dataset: {dataset!r} (expected one of {DATASETS})")
        self.dataset = dataset
        self.seed = seed
        self.latency = latency
        self.fetch_count = 0

    async def fetch_tree(self) -> MarketNode:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        self.fetch_count += 1
        tree = generate_tree(self.dataset, self.seed)
        logger.debug(f"Mock {self.dataset} snapshot #{self.fetch_count}")
        return tree

    async def fetch_chart(self, ticker: str, days: int = 200) -> pd.DataFrame:
        """OHLCV frame for ``ticker`` (the ticker only seeds the walk)."""
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        seed = None if self.seed is None else self.seed + sum(map(ord, ticker))
        return generate_ohlcv(days, seed=seed)
